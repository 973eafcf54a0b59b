"""
Shared services: hashing and persisted settings.
"""
