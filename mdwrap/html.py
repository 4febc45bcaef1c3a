"""Block-level HTML recognition.

A line starting with ``<`` opens a raw-HTML block when it is a comment,
CDATA section, doctype, processing instruction, raw-text element (``pre``,
``script``, ``style``), block-level element, or any other tag standing alone
on its line. The kind of opening decides how the block ends. Malformed tags
are reported as "not HTML" and never abort parsing.
"""

from __future__ import annotations

from typing import NamedTuple

from .constants import HTML_BLOCK_ELEMENTS, HTML_ELEMENT_CHAR_MAX, HTML_PRE_ELEMENTS
from .detectors import is_blank_line
from .models import HtmlState

# Openings whose end is a fixed token.
_END_TOKENS = {
    HtmlState.CDATA: "]]>",
    HtmlState.COMMENT: "-->",
    HtmlState.DOCTYPE: ">",
    HtmlState.PROCESSING_INSTRUCTION: "?>",
}


class HtmlOpening(NamedTuple):
    """Classification of a line that opens an HTML block.

    Attributes:
        state: How the block ends; `HtmlState.END` when it ends on this line.
        element: Lowercase element name, or ``""`` for non-element openings.
    """

    state: HtmlState
    element: str


def read_element_name(text: str, pos: int) -> tuple[str, int] | None:
    """Read an HTML element name starting at `pos`.

    Names start with a letter and continue with letters, digits, or ``-``.

    Args:
        text: Line text.
        pos: Index where the name should start.

    Returns:
        tuple[str, int] | None: The lowercase name and the index just past it,
            or None when there is no name, it is too long, or it is not
            followed by whitespace, ``/``, ``>``, or the end of the line.

    Examples:
        read_element_name("<div class=x>", 1)  # ("div", 4)
        read_element_name("<1>", 1)  # None
    """
    end = pos
    while end < len(text) and (text[end].isascii() and (text[end].isalnum() or text[end] == "-")):
        end += 1
    name = text[pos:end]
    if not name or not name[0].isalpha() or len(name) > HTML_ELEMENT_CHAR_MAX:
        return None
    if end < len(text) and text[end] not in " \t\r\n/>":
        return None
    return name.lower(), end


def skip_tag(text: str, pos: int, is_end_tag: bool = False) -> int | None:
    """Skip to just past the ``>`` that closes a tag.

    Quoted attribute values may contain ``>``. A start tag may end with one
    self-closing ``/`` immediately before ``>``; an end tag may not.

    Args:
        text: Line text.
        pos: Index just past the element name.
        is_end_tag: Whether the tag is an end tag.

    Returns:
        int | None: Index just past ``>``, or None when the tag is malformed
            or does not close on this line.

    Examples:
        skip_tag('<a title="x>y">z', 2)  # 15
        skip_tag("</a/>", 3, is_end_tag=True)  # None
    """
    quote = ""
    while pos < len(text):
        character = text[pos]
        if quote:
            if character == quote:
                quote = ""
        elif character in "\"'":
            quote = character
        elif character == ">":
            return pos + 1
        elif character == "/":
            if is_end_tag or text[pos + 1 : pos + 2] != ">":
                return None
        pos += 1
    return None


def find_end_tag(text: str, element: str, pos: int = 0) -> bool:
    """Look for ``</element>`` in `text`, skipping over other whole tags.

    Args:
        text: Line text.
        element: Lowercase element name to find the end tag of.
        pos: Index to start scanning from.

    Returns:
        bool: True when the end tag is present.

    Examples:
        find_end_tag("code</pre>", "pre")  # True
        find_end_tag('<a title="</pre>">', "pre")  # False
    """
    while True:
        lt = text.find("<", pos)
        if lt < 0:
            return False
        is_end_tag = text[lt + 1 : lt + 2] == "/"
        name = read_element_name(text, lt + 1 + is_end_tag)
        if name is not None:
            tag_end = skip_tag(text, name[1], is_end_tag)
            if tag_end is not None:
                if is_end_tag and name[0] == element:
                    return True
                pos = tag_end
                continue
        pos = lt + 1


def classify_html_block(text: str) -> HtmlOpening | None:
    """Classify a line starting with ``<`` as the opening of an HTML block.

    Args:
        text: Line text starting at ``<``.

    Returns:
        HtmlOpening | None: How the block ends, or None when the line does not
            open a block-level HTML construct.

    Examples:
        classify_html_block("<!-- note")  # HtmlOpening(HtmlState.COMMENT, "")
        classify_html_block("<pre>")  # HtmlOpening(HtmlState.PRE, "pre")
        classify_html_block("<em>span</em> text")  # None
    """
    if not text.startswith("<"):
        return None

    if text.startswith("<!--"):
        return _token_opening(HtmlState.COMMENT, text, 4)
    if text.startswith("<![CDATA["):
        return _token_opening(HtmlState.CDATA, text, 9)
    if text.startswith("<!") and text[2:3].isupper():
        return _token_opening(HtmlState.DOCTYPE, text, 2)
    if text.startswith("<?"):
        return _token_opening(HtmlState.PROCESSING_INSTRUCTION, text, 2)

    is_end_tag = text[1:2] == "/"
    name = read_element_name(text, 1 + is_end_tag)
    if name is None:
        return None
    element, after_name = name

    if element in HTML_PRE_ELEMENTS and not is_end_tag:
        tag_end = skip_tag(text, after_name)
        if tag_end is not None and find_end_tag(text, element, tag_end):
            return HtmlOpening(HtmlState.END, element)
        return HtmlOpening(HtmlState.PRE, element)

    if element in HTML_BLOCK_ELEMENTS:
        if not is_end_tag:
            tag_end = skip_tag(text, after_name)
            if tag_end is not None and find_end_tag(text, element, tag_end):
                return HtmlOpening(HtmlState.END, element)
        return HtmlOpening(HtmlState.ELEMENT, element)

    # Any other tag counts only when it stands alone on its line; otherwise
    # it's a span-level element at the beginning of a line, e.g.:
    #
    #     <em>span</em>
    tag_end = skip_tag(text, after_name, is_end_tag)
    if tag_end is None or not is_blank_line(text[tag_end:]):
        return None
    return HtmlOpening(HtmlState.ELEMENT, element)


def _token_opening(state: HtmlState, text: str, pos: int) -> HtmlOpening:
    if _END_TOKENS[state] in text[pos:]:
        return HtmlOpening(HtmlState.END, "")
    return HtmlOpening(state, "")


def next_html_state(text: str, state: HtmlState, element: str) -> HtmlState:
    """Advance an open HTML block over one of its continuation lines.

    Block-level elements end only at a blank line, which the caller handles.

    Args:
        text: The continuation line.
        state: Current HTML state.
        element: Element that opened the block (for `HtmlState.PRE`).

    Returns:
        HtmlState: `HtmlState.END` when the block ends on this line, otherwise `state`.

    Examples:
        next_html_state("end -->", HtmlState.COMMENT, "")  # HtmlState.END
        next_html_state("</pre>", HtmlState.PRE, "pre")  # HtmlState.END
    """
    if state in _END_TOKENS:
        return HtmlState.END if _END_TOKENS[state] in text else state
    if state is HtmlState.PRE and find_end_tag(text, element):
        return HtmlState.END
    return state
