from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from mdwrap.classifier import Classifier, classify_lines
from mdwrap.config import WrapConfig
from mdwrap.models import LineType
from mdwrap.wrapper import wrap_text

markdown_alphabet = " \t#*-+=_~`<>!?/[]^:|\"'().0123456789abcxyz\\"
markdown_line = st.text(alphabet=markdown_alphabet, max_size=24)
markdown_lines = st.lists(markdown_line, max_size=40)


@given(markdown_lines, st.booleans())
def test_stack_is_never_empty_and_bottom_is_text(lines: list[str], doxygen: bool):
    classifier = Classifier(doxygen=doxygen)

    for line in lines:
        classifier.classify(line)
        assert classifier.depth_of_stack >= 1
        assert classifier._stack[0].line_type is LineType.TEXT
        assert classifier._stack[0].depth == 0


@given(st.lists(st.text(max_size=30), max_size=30))
def test_classifier_accepts_any_text(lines: list[str]):
    results = classify_lines(lines)

    assert len(results) == len(lines)


@given(markdown_lines)
def test_one_shot_entries_never_outlive_their_line(lines: list[str]):
    classifier = Classifier()
    previous = None

    for line in lines:
        result = classifier.classify(line)
        if previous is not None and previous.line_type.is_one_shot:
            assert result.state.sequence_number != previous.state.sequence_number
        previous = result


@given(markdown_lines)
def test_sequence_numbers_are_never_reused_for_another_block(lines: list[str]):
    types_by_sequence: dict[int, LineType] = {}

    for result in classify_lines(lines):
        state = result.state
        assert types_by_sequence.setdefault(state.sequence_number, state.line_type) is state.line_type


@given(markdown_lines)
def test_depth_counts_enclosing_nestable_entries(lines: list[str]):
    classifier = Classifier()

    for line in lines:
        classifier.classify(line)
        nestable_below = 0
        for state in classifier._stack[1:]:
            assert state.depth == nestable_below
            nestable_below += state.line_type.is_nestable


@given(st.lists(st.integers(min_value=0, max_value=999_999_999), min_size=1, max_size=30))
def test_contiguous_ordered_list_is_renumbered(numbers: list[int]):
    lines = [f"{number}. item" for number in numbers]

    results = classify_lines(lines)

    for expected, result in enumerate(results, start=1):
        assert result.line == f"{expected}. item"
        assert result.line_type is LineType.ORDERED_LIST
        assert result.state.depth == 0
        assert result.state.indent_hang == 2 + len(str(expected))


@given(st.integers(min_value=3, max_value=8), st.integers(min_value=0, max_value=5))
def test_backtick_fence_is_not_closed_by_tildes(length: int, extra: int):
    lines = ["`" * length, "code", "~" * (length + extra), "`" * (length + extra) + "  ", "after"]

    types = [result.line_type for result in classify_lines(lines)]

    assert types == [LineType.CODE] * 4 + [LineType.TEXT]


@given(st.lists(st.sampled_from(["# not a header", "* not a list", "1. no", "", "text"]), max_size=10))
def test_pre_element_holds_until_end_tag(body: list[str]):
    lines = ["<pre>", *body, "</pre>"]

    types = [result.line_type for result in classify_lines(lines)]

    assert types == [LineType.HTML_BLOCK] * len(lines)


@given(st.lists(st.text(alphabet="abc ", max_size=12).map(str.lstrip), max_size=20))
def test_plain_wrapping_keeps_every_word(lines: list[str]):
    text = "\n".join(lines)

    wrapped = wrap_text(text, WrapConfig(width=20, markdown=False))

    assert wrapped.split() == text.split()
    assert all(len(line) <= 20 for line in wrapped.splitlines())


table_cell = st.text(alphabet="abc", min_size=1, max_size=5)
table_row = st.tuples(table_cell, table_cell).map(" | ".join)


@given(st.lists(table_row, min_size=1, max_size=10), st.sampled_from(["", "text"]))
def test_table_starts_only_after_a_blank_line(rows: list[str], before: str):
    lines = ["intro", before, *rows, "", "after"]

    types = [result.line_type for result in classify_lines(lines)]

    expected = LineType.TABLE if before == "" else LineType.TEXT
    assert types[2 : 2 + len(rows)] == [expected] * len(rows)
    assert types[-1] is LineType.TEXT
