"""
Comparison engine: data models, errors, archive access and diffing.
"""
