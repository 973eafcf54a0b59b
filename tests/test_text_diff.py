from __future__ import annotations

import pytest

from zipdiff.core.diff.binary_diff import any_binary, is_binary_content
from zipdiff.core.diff.image_diff import is_image_entry
from zipdiff.core.diff.text_diff import LineOp, TextDiffEngine, split_lines


@pytest.fixture
def engine() -> TextDiffEngine:
    return TextDiffEngine()


def test_changed_line_is_reported_as_removal_then_addition(engine) -> None:
    assert engine.diff_text("line1\nline2", "line1\nline3") == ["- line2", "+ line3"]


def test_inserted_and_deleted_lines(engine) -> None:
    assert engine.diff_text("a\nb", "a\nx\nb") == ["+ x"]
    assert engine.diff_text("a\nx\nb", "a\nb") == ["- x"]


def test_changes_stay_in_document_order(engine) -> None:
    left = "a\nb\nc\nd"
    right = "a\nB\nc\nD"

    assert engine.diff_text(left, right) == ["- b", "+ B", "- d", "+ D"]


def test_common_lines_are_omitted(engine) -> None:
    left = "\n".join(f"line {i}" for i in range(300))
    right = left.replace("line 150", "changed 150")

    assert engine.diff_text(left, right) == ["- line 150", "+ changed 150"]


def test_repeated_lines_do_not_leak_into_output(engine) -> None:
    left = "\n".join(["}"] * 250 + ["tail"])
    right = "\n".join(["}"] * 250 + ["end"])

    assert engine.diff_text(left, right) == ["- tail", "+ end"]


def test_empty_side(engine) -> None:
    assert engine.diff_text("", "a\nb") == ["+ a", "+ b"]
    assert engine.diff_text("a\nb", "") == ["- a", "- b"]


def test_line_endings_are_not_significant(engine) -> None:
    assert engine.diff_text("a\r\nb\r\n", "a\nc\n") == ["- b", "+ c"]
    assert engine.diff_text("a", "a\n") == []


def test_split_lines() -> None:
    assert split_lines("") == []
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\n\nb") == ["a", "", "b"]
    assert split_lines("a\r\nb") == ["a", "b"]
    assert split_lines("a\x0cb c") == ["a\x0cb c"]


def test_alignment_keeps_the_longest_common_subsequence(engine) -> None:
    left = ["c", "a", "a", "c", "a", "a"]
    right = ["c", "c", "a"]

    assert engine.diff_lines(left, right) == ["- a", "- a", "- a"]


def test_replaced_block_lists_removals_before_additions(engine) -> None:
    assert engine.diff_lines(["x", "a", "b", "y"], ["x", "c", "d", "y"]) == [
        "- a", "- b", "+ c", "+ d",
    ]


def test_align_reports_every_line_once(engine) -> None:
    left = ["a", "b", "c", "a", "b", "b", "a"]
    right = ["c", "b", "a", "b", "a", "c"]

    ops = engine.align(left, right)

    kept = [line for op, line in ops if op == LineOp.EQUAL]
    assert [line for op, line in ops if op != LineOp.INSERT] == left
    assert [line for op, line in ops if op != LineOp.DELETE] == right
    # LCS of the two sequences has length 4
    assert len(kept) == 4
    assert len(engine.diff_lines(left, right)) == len(left) + len(right) - 2 * len(kept)


@pytest.mark.parametrize("left, right", [
    (["a", "b", "a", "b"], ["b", "a", "b", "a"]),
    (["x", "y", "x", "y", "x"], ["y", "x", "y"]),
    (["1", "2", "3", "2", "1"], ["3", "2", "1", "2", "3"]),
])
def test_no_line_is_both_kept_and_reported(engine, left, right) -> None:
    ops = engine.align(left, right)
    kept = sum(1 for op, _ in ops if op == LineOp.EQUAL)

    assert len(engine.diff_lines(left, right)) == len(left) + len(right) - 2 * kept
    assert kept == lcs_length(left, right)


def lcs_length(left: list[str], right: list[str]) -> int:
    previous = [0] * (len(right) + 1)
    for left_line in left:
        current = [0]
        for j, right_line in enumerate(right, 1):
            if left_line == right_line:
                current.append(previous[j - 1] + 1)
            else:
                current.append(max(previous[j], current[j - 1]))
        previous = current
    return previous[-1]


def test_binary_detection_needs_a_single_null_byte() -> None:
    assert is_binary_content(b"text\x00more")
    assert not is_binary_content(b"plain text \xff")
    assert any_binary(b"text", b"\x00")
    assert not any_binary(b"text", b"more")


@pytest.mark.parametrize("name", [
    "x.png", "a/b.jpg", "c.jpeg", "d.gif", "e.bmp", "f.webp", "g.tiff", "h.svg",
])
def test_image_extensions(name: str) -> None:
    assert is_image_entry(name)


@pytest.mark.parametrize("name", ["x.PNG", "photo.Jpg", "notes.txt", "image.tif", "png/readme"])
def test_non_image_names(name: str) -> None:
    assert not is_image_entry(name)


def test_image_match_is_a_bare_suffix_test() -> None:
    assert is_image_entry("screenshotpng")
