"""Per-line Markdown block classifier.

`Classifier` is fed one line at a time, in document order, and reports what
block construct each line starts or continues. State lives in a stack of
`ParserState` entries whose bottom entry is always plain text at depth 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
import logging

from .constants import (
    CLOSING_FENCE_MAX_INDENT,
    CODE_INDENT_MIN,
    DL_UL_INDENT_MIN,
    FOOTNOTE_INDENT,
    LINK_INDENT_MAX,
    LIST_INDENT_MAX,
    OL_INDENT_MIN,
)
from .detectors import (
    first_non_whitespace,
    is_atx_header,
    is_horizontal_rule,
    is_html_abbreviation,
    is_link_title,
    is_setext_header,
    is_table_row,
    match_code_fence,
    match_definition_list,
    match_footnote_definition,
    match_link_label,
    match_ordered_list,
    match_unordered_list,
    strip_eol,
)
from .html import classify_html_block, next_html_state
from .models import Classification, CodeFence, HtmlState, LineType, ParserState

logger = logging.getLogger(__name__)

# Remainder that loses every comparison in `indent_divisor`.
_NO_REMAINDER = 9


def indent_divisor(indent_left: int, nested_within: LineType | None) -> int:
    """Pick the column width of one nesting level for an indentation.

    The divisor (4, 3, or 2) that divides `indent_left` with the smallest
    remainder wins, ties going to the larger divisor. A divisor of 2 is only
    considered inside definition and unordered lists.

    Args:
        indent_left: Columns of leading whitespace.
        nested_within: Innermost enclosing nestable line type, if any.

    Returns:
        int: 4, 3, or 2.

    Examples:
        indent_divisor(6, LineType.ORDERED_LIST)  # 3
        indent_divisor(6, LineType.UNORDERED_LIST)  # 3
        indent_divisor(2, LineType.UNORDERED_LIST)  # 2
        indent_divisor(2, None)  # 4
    """
    mod_a = indent_left % LIST_INDENT_MAX
    mod_b = indent_left % OL_INDENT_MIN
    if nested_within in (LineType.DEFINITION_LIST, LineType.UNORDERED_LIST):
        mod_c = indent_left % DL_UL_INDENT_MIN
    else:
        mod_c = _NO_REMAINDER
    if mod_a <= mod_b:
        return LIST_INDENT_MAX if mod_a <= mod_c else DL_UL_INDENT_MIN
    return OL_INDENT_MIN if mod_b <= mod_c else DL_UL_INDENT_MIN


def indent_depth(indent_left: int, nested_within: LineType | None, nestable: bool) -> int:
    """Map an indentation to a nesting depth.

    Args:
        indent_left: Columns of leading whitespace.
        nested_within: Innermost enclosing nestable line type, if any.
        nestable: Whether the line is, or directly continues, a list item or
            footnote definition; the item itself then counts as one level.

    Returns:
        int: Depth, where 0 is outside every nestable construct.

    Examples:
        indent_depth(0, None, nestable=True)  # 1
        indent_depth(3, LineType.ORDERED_LIST, nestable=True)  # 2
    """
    depth = indent_left // indent_divisor(indent_left, nested_within)
    return depth + 1 if nestable else depth


def renumber_ordered_list(line: str, start: int, old_digits_len: int, new_number: int) -> str:
    """Replace the ordinal of an ordered list item.

    Args:
        line: The list item line.
        start: Index of the first digit of the ordinal.
        old_digits_len: Number of digits of the current ordinal.
        new_number: Ordinal to write instead.

    Returns:
        str: The line with its digit span replaced; everything else unchanged.

    Examples:
        renumber_ordered_list("  7. seven", 2, 1, 10)  # "  10. seven"
    """
    assert 0 <= start and start + old_digits_len <= len(line)
    return f"{line[:start]}{new_number}{line[start + old_digits_len:]}"


class Classifier:
    """Classify the lines of one document.

    Create one instance per document; it must not be shared between
    documents or threads.

    Args:
        doxygen: Whether to recognize Doxygen ``-#`` ordered list items.

    Examples:
        classifier = Classifier()
        classifier.classify("1. one").line_type  # LineType.ORDERED_LIST
    """

    def __init__(self, doxygen: bool = False):
        self.doxygen = doxygen
        self._stack: list[ParserState] = []
        self._next_sequence_number = 0
        self._fence = CodeFence()
        self._fence_closed = False
        self._html_state = HtmlState.NONE
        self._html_element = ""
        self._link_title_pending = False
        # A leading "---" has no text above it, so it is a rule.
        self._prev_blank = True
        self._push(LineType.TEXT)

    @property
    def state(self) -> ParserState:
        """Copy of the top of the state stack."""
        return replace(self._stack[-1])

    @property
    def depth_of_stack(self) -> int:
        """Number of entries on the state stack (always at least one)."""
        return len(self._stack)

    # Stack

    @property
    def _top(self) -> ParserState:
        return self._stack[-1]

    def _push(
        self, line_type: LineType, indent_left: int = 0, indent_hang: int = 0, depth: int | None = None
    ) -> ParserState:
        if depth is None:
            depth = self._nestable_count()
        self._next_sequence_number += 1
        state = ParserState(
            line_type=line_type,
            sequence_number=self._next_sequence_number,
            depth=depth,
            indent_left=indent_left,
            indent_hang=indent_hang,
        )
        self._stack.append(state)
        logger.debug(
            "push: T=%s N=%d D=%d L=%d H=%d",
            line_type.value,
            state.sequence_number,
            depth,
            indent_left,
            indent_hang,
        )
        return state

    def _pop(self) -> None:
        assert len(self._stack) > 1, "the bottom state is never popped"
        state = self._stack.pop()
        logger.debug("pop: T=%s N=%d D=%d", state.line_type.value, state.sequence_number, state.depth)

    def _clear(self) -> None:
        while len(self._stack) > 1:
            self._pop()

    def _clear_push(self, line_type: LineType, indent_left: int = 0, indent_hang: int = 0) -> ParserState:
        self._clear()
        return self._push(line_type, indent_left, indent_hang)

    def _top_is(self, line_type: LineType) -> bool:
        return self._top.line_type is line_type

    def _nestable_count(self) -> int:
        return sum(state.line_type.is_nestable for state in self._stack)

    def _nested_within(self) -> LineType | None:
        for state in reversed(self._stack):
            if state.line_type.is_nestable:
                return state.line_type
        return None

    def _level(self, state: ParserState) -> int:
        # The bottom entry is level 0; everything above sits one level below
        # its depth so a first-level list item (depth 0) is level 1.
        return 0 if state is self._stack[0] else state.depth + 1

    def _code_indent_min(self) -> int:
        return (len(self._stack) - self._top_is(LineType.CODE)) * CODE_INDENT_MIN

    # Classification

    def classify(self, line: str) -> Classification:
        """Classify the next line of the document.

        Never raises for any input: a line that matches no construct is text.

        Args:
            line: The next line, with or without its end-of-line characters.

        Returns:
            Classification: Copy of the state the line belongs to, plus the line
                itself, renumbered when it is a continued ordered list item.
        """
        text = strip_eol(line)
        nws, indent_left = first_non_whitespace(text)
        rest = text[nws:]
        blank_before = self._prev_blank
        self._prev_blank = not rest

        early = self._continue_bounded(text, rest, indent_left)
        if early is not None:
            return Classification(replace(early), line)

        if not rest:
            if self._top_is(LineType.HTML_BLOCK) and self._html_state is HtmlState.ELEMENT:
                # A blank line ends a block-level element.
                self._pop()
                self._html_state = HtmlState.NONE
            if self._top_is(LineType.CODE) or self._top_is(LineType.HTML_BLOCK):
                return Classification(self.state, line)
            return Classification(replace(self._stack[0]), line)

        if self._top_is(LineType.HTML_BLOCK):
            self._html_state = next_html_state(rest, self._html_state, self._html_element)
            return Classification(self.state, line)

        code_indent_min = self._code_indent_min()
        if indent_left >= code_indent_min:
            if not self._top_is(LineType.CODE):
                self._push(LineType.CODE, code_indent_min)
            return Classification(self.state, line)
        if self._top_is(LineType.CODE):
            self._pop()

        if self._classify_bounded(text, rest, indent_left, blank_before):
            return Classification(self.state, line)

        line = self._classify_nestable(line, text, nws, indent_left, blank_before)
        return Classification(self.state, line)

    def _continue_bounded(self, text: str, rest: str, indent_left: int) -> ParserState | None:
        """Continue or close the construct left open by the previous line.

        Returns the state to report when the line is fully classified by the
        open construct, or None to carry on classifying.
        """
        line_type = self._top.line_type

        if line_type is LineType.CODE and self._fence:
            if self._fence_closed:
                self._fence_closed = False
                self._fence.reset()
                self._pop()
                return None
            if indent_left <= CLOSING_FENCE_MAX_INDENT and match_code_fence(rest, self._fence):
                self._fence_closed = True
            return self._top

        if line_type.is_one_shot:
            self._pop()
        elif line_type is LineType.LINK_LABEL:
            if self._link_title_pending and is_link_title(rest):
                self._link_title_pending = False
                return self._top
            self._pop()
        elif line_type is LineType.TABLE:
            if rest and is_table_row(text):
                return self._top
            self._pop()
        elif line_type is LineType.HTML_BLOCK and self._html_state is HtmlState.END:
            self._pop()
            self._html_state = HtmlState.NONE
        return None

    def _classify_bounded(self, text: str, rest: str, indent_left: int, blank_before: bool) -> bool:
        """Recognize constructs that replace whatever is open.

        Returns True when the line was classified.
        """
        first = text[0]
        if first == "#" and is_atx_header(text):
            self._clear_push(LineType.HEADER_ATX)
            return True
        if first in "=-" and not blank_before and is_setext_header(text):
            self._clear_push(LineType.HEADER_SETEXT)
            return True
        if first in "~`":
            self._fence.reset()
            if match_code_fence(text, self._fence):
                self._clear_push(LineType.CODE)
                return True

        first = rest[0]
        if first == "*" and is_html_abbreviation(rest):
            self._clear_push(LineType.HTML_ABBREVIATION, indent_left)
            return True
        if first in "*-_" and is_horizontal_rule(rest):
            self._clear_push(LineType.HORIZONTAL_RULE, indent_left)
            return True
        if first == "<":
            opening = classify_html_block(rest)
            if opening is not None:
                self._clear_push(LineType.HTML_BLOCK, indent_left)
                self._html_state, self._html_element = opening
                return True
        if first == "[" and indent_left <= LINK_INDENT_MAX:
            has_text = match_footnote_definition(rest)
            if has_text is not None:
                state = self._clear_push(LineType.FOOTNOTE_DEF, indent_left, FOOTNOTE_INDENT)
                state.footnote_has_trailing_text = has_text
                return True
            has_title = match_link_label(rest)
            if has_title is not None:
                self._clear_push(LineType.LINK_LABEL, indent_left)
                self._link_title_pending = not has_title
                return True
        return False

    def _classify_nestable(
        self, line: str, text: str, nws: int, indent_left: int, blank_before: bool
    ) -> str:
        rest = text[nws:]
        first = rest[0]
        line_type = LineType.TEXT
        ordered = None
        indent_hang = 0

        # Doxygen "-#" is narrower than an unordered "-" item.
        if self.doxygen and first == "-":
            ordered = match_ordered_list(rest, doxygen=True)
        if ordered is None:
            if first in "*+-":
                indent_hang = match_unordered_list(rest)
                line_type = LineType.UNORDERED_LIST
            elif first in "0123456789":
                ordered = match_ordered_list(rest)
            elif first == ":":
                indent_hang = match_definition_list(rest)
                line_type = LineType.DEFINITION_LIST
            if indent_hang is None:
                line_type = LineType.TEXT
        if ordered is not None:
            line_type = LineType.ORDERED_LIST
            indent_hang = ordered.indent_hang

        is_item = line_type.is_nestable
        lazy = not blank_before and self._top.line_type.is_nestable
        depth = indent_depth(indent_left, self._nested_within(), lazy or is_item)

        # Pop states for decreases in indentation. Text right after a list
        # item's text counts as part of an item, so it never pops the
        # outermost one.
        while self._top.line_type.is_nestable and depth < self._level(self._top):
            top = self._top
            limit = top.indent_left if is_item else top.content_column
            if indent_left >= limit:
                break
            logger.debug("dedent: D=%d < TOP.D=%d", depth, self._level(top))
            self._pop()

        if not is_item:
            if blank_before and is_table_row(text):
                self._push(LineType.TABLE, indent_left)
            return line

        top = self._top
        if top.line_type.is_nestable and indent_left >= top.content_column:
            state = self._push(line_type, indent_left, indent_hang, depth=top.depth + 1)
        elif top.line_type is line_type:
            if ordered is not None and ordered.delimiter != top.ordered_list_char:
                state = self._restart(top, indent_left, indent_hang)
            else:
                self._next_sequence_number += 1
                top.sequence_number = self._next_sequence_number
                state = top
                if ordered is not None and ordered.delimiter != "#":
                    state.ordered_list_number += 1
                    if len(str(state.ordered_list_number)) > len(str(state.ordered_list_number - 1)):
                        state.indent_hang += 1
                    return self._renumber(line, nws, ordered.digits, state.ordered_list_number)
                return line
        elif top.line_type.is_nestable:
            self._pop()
            state = self._push(line_type, indent_left, indent_hang, depth=top.depth)
        else:
            state = self._push(line_type, indent_left, indent_hang)

        if ordered is None:
            return line
        state.ordered_list_char = ordered.delimiter
        if ordered.delimiter == "#":
            return line
        state.ordered_list_number = 1
        return self._renumber(line, nws, ordered.digits, 1)

    def _restart(self, top: ParserState, indent_left: int, indent_hang: int) -> ParserState:
        # Changing the delimiter starts a new list at the same depth.
        self._pop()
        return self._push(LineType.ORDERED_LIST, indent_left, indent_hang, depth=top.depth)

    def _renumber(self, line: str, nws: int, digits: int, number: int) -> str:
        # `nws` indexes the stripped text, which is a prefix of `line`.
        if line[nws : nws + digits] == str(number):
            return line
        logger.debug("renumber: %r -> %d", line[nws : nws + digits], number)
        return renumber_ordered_list(line, nws, digits, number)


def classify_lines(lines: Iterable[str], doxygen: bool = False) -> list[Classification]:
    """Classify every line of a document with a fresh `Classifier`.

    Args:
        lines: Lines of the document, in order.
        doxygen: Whether to recognize Doxygen ``-#`` ordered list items.

    Returns:
        list[Classification]: One classification per line.

    Examples:
        [c.line_type for c in classify_lines(["# Title", "text"])]
        # [LineType.HEADER_ATX, LineType.TEXT]
    """
    classifier = Classifier(doxygen=doxygen)
    return [classifier.classify(line) for line in lines]
