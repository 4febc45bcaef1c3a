from __future__ import annotations

import logging

import pytest

from mdwrap.classifier import (
    Classifier,
    classify_lines,
    indent_depth,
    indent_divisor,
    renumber_ordered_list,
)
from mdwrap.models import LineType

C = LineType.CODE
DL = LineType.DEFINITION_LIST
FN = LineType.FOOTNOTE_DEF
HA = LineType.HEADER_ATX
HS = LineType.HEADER_SETEXT
HR = LineType.HORIZONTAL_RULE
AB = LineType.HTML_ABBREVIATION
HB = LineType.HTML_BLOCK
LL = LineType.LINK_LABEL
OL = LineType.ORDERED_LIST
TB = LineType.TABLE
T = LineType.TEXT
UL = LineType.UNORDERED_LIST


def _types(lines: list[str], doxygen: bool = False) -> list[LineType]:
    return [result.line_type for result in classify_lines(lines, doxygen=doxygen)]


@pytest.mark.parametrize(
    ("indent_left", "nested_within", "expected"),
    [
        (0, None, 4),
        (2, None, 4),
        (3, LineType.ORDERED_LIST, 3),
        (6, LineType.ORDERED_LIST, 3),
        (2, LineType.UNORDERED_LIST, 2),
        (6, LineType.UNORDERED_LIST, 3),
        (8, LineType.UNORDERED_LIST, 4),
        (5, LineType.DEFINITION_LIST, 4),
        (2, LineType.FOOTNOTE_DEF, 4),
    ],
)
def test_indent_divisor(indent_left: int, nested_within: LineType | None, expected: int):
    assert indent_divisor(indent_left, nested_within) == expected


def test_indent_depth_counts_the_item_itself():
    assert indent_depth(0, None, nestable=True) == 1
    assert indent_depth(0, None, nestable=False) == 0
    assert indent_depth(3, LineType.ORDERED_LIST, nestable=True) == 2
    assert indent_depth(8, None, nestable=False) == 2


def test_renumber_ordered_list_rewrites_only_the_digits():
    assert renumber_ordered_list("  7. seven", 2, 1, 10) == "  10. seven"
    assert renumber_ordered_list("100) x\n", 0, 3, 9) == "9) x\n"
    assert renumber_ordered_list("3. three", 0, 1, 3) == "3. three"


def test_document_scenario():
    lines = ["# Title", "", "1. one", "2. two", "   - nested", "", "plain text"]

    results = classify_lines(lines)

    assert [result.line_type for result in results] == [HA, T, OL, OL, UL, T, T]
    assert [result.state.depth for result in results[2:5]] == [0, 0, 1]
    assert results[2].state.ordered_list_number == 1
    assert results[3].state.ordered_list_number == 2
    assert results[3].state.sequence_number > results[2].state.sequence_number


def test_new_classifier_starts_with_plain_text():
    classifier = Classifier()

    assert classifier.depth_of_stack == 1
    assert classifier.state.line_type is T
    assert classifier.state.depth == 0


def test_state_is_a_copy():
    classifier = Classifier()
    result = classifier.classify("* item")

    result.state.indent_left = 99

    assert classifier.state.indent_left == 0


def test_one_shot_types_are_popped_on_the_next_line():
    classifier = Classifier()

    assert classifier.classify("# Header").line_type is HA
    assert classifier.depth_of_stack == 2
    assert classifier.classify("text").line_type is T
    assert classifier.depth_of_stack == 1


@pytest.mark.parametrize(
    ("lines", "expected"),
    [
        (["---", "text", "---"], [HR, T, HS]),
        (["text", "", "---"], [T, T, HR]),
        (["Title", "====="], [T, HS]),
        (["* * *", "***"], [HR, HR]),
        (["*[HTML]: Hyper Text", "text"], [AB, T]),
        ([" # not atx", "text"], [T, T]),
    ],
)
def test_headers_and_rules(lines: list[str], expected: list[LineType]):
    assert _types(lines) == expected


def test_fence_closes_only_on_matching_run():
    lines = ["```", "code", "~~~", "# not a header", "````  ", "after"]

    assert _types(lines) == [C, C, C, C, C, T]


def test_unclosed_fence_stays_code():
    assert _types(["~~~", "* item", "", "text"]) == [C, C, C, C]


def test_overindented_closing_fence_does_not_close():
    assert _types(["```", "    ```", "text"]) == [C, C, C]


def test_indented_code():
    lines = ["text", "", "    code", "", "    more", "text"]

    assert _types(lines) == [T, T, C, C, C, T]


def test_indented_code_inside_list_needs_deeper_indent():
    lines = ["* item", "", "    continued", "", "        code"]

    assert _types(lines) == [UL, T, UL, T, C]


def test_unordered_list_depths():
    classifier = Classifier()
    lines = ["* a", "  * b", "    * c", "* d"]

    depths = [classifier.classify(line).state.depth for line in lines]

    assert depths == [0, 1, 2, 0]
    assert classifier.depth_of_stack == 2


def test_dedent_to_text_pops_everything():
    classifier = Classifier()
    for line in ["* a", "  * b", "    * c", "", "text"]:
        result = classifier.classify(line)

    assert result.line_type is T
    assert classifier.depth_of_stack == 1


def test_lazy_continuation_keeps_the_item():
    results = classify_lines(["* item", "continued"])

    assert [result.line_type for result in results] == [UL, UL]
    assert results[0].state.sequence_number == results[1].state.sequence_number


def test_lazy_continuation_of_nested_item():
    results = classify_lines(["* a", "  * b", "lazy"])

    assert results[2].state.depth == 0
    assert results[2].state.sequence_number == results[0].state.sequence_number


def test_lazy_continuation_returns_to_outermost_item():
    classifier = Classifier()
    for line in ["* a", "  * b", "    * c"]:
        classifier.classify(line)

    result = classifier.classify("d")

    assert result.line_type is UL
    assert result.state.depth == 0
    assert classifier.depth_of_stack == 2


def test_indented_lazy_continuation_keeps_nested_item():
    results = classify_lines(["* a", "  * b", "  lazy"])

    assert results[2].state.depth == 1
    assert results[2].state.sequence_number == results[1].state.sequence_number


def test_new_item_bumps_sequence_number():
    results = classify_lines(["- a", "- b"])

    assert results[1].state.sequence_number > results[0].state.sequence_number
    assert results[1].state.depth == 0


def test_list_type_switch_at_same_depth():
    results = classify_lines(["* a", "1. b"])

    assert results[1].line_type is OL
    assert results[1].state.depth == 0
    assert results[1].line == "1. b"


def test_ordered_list_is_renumbered():
    results = classify_lines(["7. a", "3. b", "99. c"])

    assert [result.line for result in results] == ["1. a", "2. b", "3. c"]


def test_renumbering_widens_hang_at_ten():
    lines = [f"{number}. item" for number in range(20, 31)]

    results = classify_lines(lines)

    assert results[8].line == "9. item"
    assert results[8].state.indent_hang == 3
    assert results[9].line == "10. item"
    assert results[9].state.indent_hang == 4


def test_renumbering_keeps_line_ending_and_indent():
    results = classify_lines(["1. a\n", "1. b\n", "   5) c\n"])

    assert results[1].line == "2. b\n"
    assert results[2].line == "   1) c\n"
    assert results[2].state.depth == 1


def test_delimiter_change_starts_a_new_list():
    results = classify_lines(["1. a", "2) b", "3) c"])

    assert results[1].line == "1) b"
    assert results[1].state.ordered_list_char == ")"
    assert results[2].line == "2) c"
    assert results[1].state.sequence_number > results[0].state.sequence_number


def test_nested_list_returns_to_outer_ordered_list():
    results = classify_lines(["1. a", "   - b", "5. c"])

    assert [result.line_type for result in results] == [OL, UL, OL]
    assert [result.state.depth for result in results] == [0, 1, 0]
    assert results[2].line == "2. c"


def test_doxygen_ordered_list_is_not_renumbered():
    results = classify_lines(["-# one", "-# two"], doxygen=True)

    assert [result.line_type for result in results] == [OL, OL]
    assert [result.line for result in results] == ["-# one", "-# two"]
    assert results[1].state.ordered_list_char == "#"
    assert results[1].state.ordered_list_number == 0


def test_doxygen_marker_without_doxygen_mode():
    assert _types(["-# one"]) == [T]


def test_definition_list():
    results = classify_lines(["Term", ": definition", ": another"])

    assert [result.line_type for result in results] == [T, DL, DL]
    assert results[1].state.indent_hang == 2


def test_footnote_definition():
    lines = ["[^1]: Note.", "    more", "", "    para", "", "text"]

    results = classify_lines(lines)

    assert [result.line_type for result in results] == [FN, FN, T, FN, T, T]
    assert results[0].state.footnote_has_trailing_text is True
    assert results[0].state.indent_hang == 4


def test_footnote_without_text():
    result = classify_lines(["[^note]:"])[0]

    assert result.line_type is FN
    assert result.state.footnote_has_trailing_text is False


def test_link_label_with_title_on_next_line():
    lines = ["[id]: https://example.com", '"Title"', "text"]

    assert _types(lines) == [LL, LL, T]


def test_link_label_title_only_once():
    lines = ['[id]: https://example.com "Title"', '"Again"']

    assert _types(lines) == [LL, T]


def test_indented_link_label_limit():
    assert _types(["   [id]: https://example.com"]) == [LL]
    assert _types(["    [id]: https://example.com"]) == [C]


def test_table_starts_after_blank_line():
    lines = ["", "a | b", "--|--", "c | d", "text"]

    assert _types(lines) == [T, TB, TB, TB, T]


def test_table_at_document_start():
    assert _types(["a | b", "c | d"]) == [TB, TB]


def test_table_row_without_blank_line_is_text():
    assert _types(["text", "a | b"]) == [T, T]


def test_pre_element_spans_lines():
    lines = ["<pre>", "# not a header", "1. not a list", "", "</pre>", "text"]

    assert _types(lines) == [HB, HB, HB, HB, HB, T]


def test_block_element_ends_at_blank_line():
    lines = ["<div>", "# inside", "", "# outside"]

    assert _types(lines) == [HB, HB, T, HA]


def test_html_comment_spans_lines():
    lines = ["<!-- start", "* not a list", "end -->", "* list"]

    assert _types(lines) == [HB, HB, HB, UL]


def test_single_line_html_block():
    assert _types(["<div>text</div>", "text"]) == [HB, T]


def test_inline_html_is_text():
    assert _types(["<em>span</em> text"]) == [T]


def test_headers_clear_open_lists():
    classifier = Classifier()
    for line in ["* a", "  * b"]:
        classifier.classify(line)

    assert classifier.classify("# Header").state.depth == 0
    assert classifier.depth_of_stack == 2


def test_blank_line_reports_plain_text_without_popping():
    classifier = Classifier()
    classifier.classify("* item")

    result = classifier.classify("")

    assert result.line_type is T
    assert classifier.depth_of_stack == 2


def test_crlf_lines():
    lines = ["# Title\r\n", "\r\n", "1. one\r\n"]

    assert _types(lines) == [HA, T, OL]


def test_classifier_logs_stack_changes(caplog):
    caplog.set_level(logging.DEBUG, logger="mdwrap.classifier")

    classify_lines(["# Title", "text"])

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("push: T=#") for message in messages)
    assert any(message.startswith("pop: T=#") for message in messages)
