"""
Text diff engine.

Provides line-by-line comparison of two decoded text buffers and renders
only the lines that differ:
- ``- line`` for lines present only in the left text
- ``+ line`` for lines present only in the right text

Lines common to both sides are omitted. The alignment is a longest common
subsequence, so a line kept on both sides is never reported as changed, and
output follows document order with removals before additions in a changed
block.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Sequence


REMOVED_PREFIX = '- '
ADDED_PREFIX = '+ '


class LineOp(Enum):
    """Role of one line in an alignment."""
    EQUAL = 'equal'
    DELETE = 'delete'
    INSERT = 'insert'


def split_lines(text: str) -> list[str]:
    """
    Split text into lines on ``\\n``.

    A trailing ``\\r`` is stripped from each line and a final newline does
    not produce an empty last line. Unlike ``str.splitlines`` no other
    separators (form feed, vertical tab, unicode line breaks) split a line.
    """
    if not text:
        return []

    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()

    return [line[:-1] if line.endswith('\r') else line for line in lines]


class TextDiffEngine:
    """
    Engine for comparing text content line by line.
    """

    def diff_text(self, left_text: str, right_text: str) -> list[str]:
        """
        Compare two text buffers.

        Args:
            left_text: Content of the left/original version
            right_text: Content of the right/modified version

        Returns:
            Annotated lines, removals prefixed ``- `` and additions ``+ ``
        """
        return self.diff_lines(split_lines(left_text), split_lines(right_text))

    def diff_lines(
        self,
        left_lines: Sequence[str],
        right_lines: Sequence[str]
    ) -> list[str]:
        """Compare two sequences of lines."""
        return list(self.iter_changes(left_lines, right_lines))

    def iter_changes(
        self,
        left_lines: Sequence[str],
        right_lines: Sequence[str]
    ) -> Iterator[str]:
        for op, line in self.align(left_lines, right_lines):
            if op == LineOp.DELETE:
                yield f"{REMOVED_PREFIX}{line}"
            elif op == LineOp.INSERT:
                yield f"{ADDED_PREFIX}{line}"

    def align(
        self,
        left_lines: Sequence[str],
        right_lines: Sequence[str]
    ) -> list[tuple[LineOp, str]]:
        """
        Align two line sequences on a longest common subsequence.

        The common prefix and suffix are matched directly; the middle is
        solved with an LCS length table and walked back from the end. When
        the walk can go either way it takes the right-hand line first, which
        puts removals ahead of additions once the result is reversed.
        """
        left = list(left_lines)
        right = list(right_lines)

        prefix = 0
        while prefix < len(left) and prefix < len(right) and left[prefix] == right[prefix]:
            prefix += 1

        suffix = 0
        while (suffix < len(left) - prefix and suffix < len(right) - prefix and
               left[-1 - suffix] == right[-1 - suffix]):
            suffix += 1

        left_mid = left[prefix:len(left) - suffix]
        right_mid = right[prefix:len(right) - suffix]

        ops = [(LineOp.EQUAL, line) for line in left[:prefix]]
        ops.extend(self._align_middle(left_mid, right_mid))
        ops.extend((LineOp.EQUAL, line) for line in left[len(left) - suffix:])
        return ops

    @staticmethod
    def _align_middle(left: list[str], right: list[str]) -> list[tuple[LineOp, str]]:
        # table[i][j] is the LCS length of left[:i] and right[:j]
        table = [[0] * (len(right) + 1) for _ in range(len(left) + 1)]
        for i, left_line in enumerate(left, 1):
            row, above = table[i], table[i - 1]
            for j, right_line in enumerate(right, 1):
                if left_line == right_line:
                    row[j] = above[j - 1] + 1
                else:
                    row[j] = max(above[j], row[j - 1])

        ops: list[tuple[LineOp, str]] = []
        i, j = len(left), len(right)
        while i > 0 or j > 0:
            if j > 0 and (i == 0 or table[i][j] == table[i][j - 1]):
                j -= 1
                ops.append((LineOp.INSERT, right[j]))
            elif i > 0 and (j == 0 or table[i][j] == table[i - 1][j]):
                i -= 1
                ops.append((LineOp.DELETE, left[i]))
            else:
                i -= 1
                j -= 1
                ops.append((LineOp.EQUAL, left[i]))

        ops.reverse()
        return ops
