"""Block-level Markdown line detectors.

Each detector receives the text of a line starting at its first
non-whitespace character, with the end-of-line characters removed, and reports
whether the line is an instance of one construct plus any construct-specific
data. Detectors keep no state between calls; the fence detector mutates only
the `CodeFence` it is handed.
"""

from __future__ import annotations

from typing import NamedTuple

from .constants import (
    ATX_CHAR_MAX,
    CODE_FENCE_CHAR_MIN,
    DL_UL_INDENT_MIN,
    HR_CHAR_MIN,
    LIST_INDENT_MAX,
    OL_CHAR_MAX,
    OL_INDENT_MIN,
    TAB_SPACES_MARKDOWN,
)
from .models import CodeFence


class OrderedListItem(NamedTuple):
    """Data extracted from an ordered list marker.

    Attributes:
        number: Ordinal parsed from the marker (0 for Doxygen ``-#``).
        delimiter: ``.``, ``)``, or ``#`` for Doxygen ``-#``.
        indent_hang: Columns from the marker to the item's text.
        digits: Number of characters in the ordinal.
    """

    number: int
    delimiter: str
    indent_hang: int
    digits: int


def is_space(char: str) -> bool:
    """Whether `char` is a space or a tab (end-of-line characters are not)."""
    return char == " " or char == "\t"


def _char_at(text: str, pos: int) -> str:
    return text[pos] if pos < len(text) else ""


def _is_space_or_end(text: str, pos: int) -> bool:
    return pos >= len(text) or text[pos] in " \t\r\n"


def is_blank_line(text: str) -> bool:
    """Whether `text` holds nothing but whitespace."""
    return not text.strip(" \t\r\n")


def strip_eol(line: str) -> str:
    """Remove trailing ``\\n`` or ``\\r\\n`` from a line."""
    return line.rstrip("\r\n")


def first_non_whitespace(line: str) -> tuple[int, int]:
    """Find the first non-whitespace character of a line.

    Tabs advance to the next multiple of four columns to match Markdown
    indentation rules.

    Args:
        line: Line whose leading whitespace should be measured.

    Returns:
        tuple[int, int]: Index of the first non-whitespace character (the
            length of the line when it is blank) and the number of columns the
            leading whitespace occupies.

    Examples:
        first_non_whitespace("  * item")  # (2, 2)
        first_non_whitespace("\\t text")  # (2, 5)
    """
    columns = 0
    for index, character in enumerate(line):
        if character == " ":
            columns += 1
        elif character == "\t":
            columns += TAB_SPACES_MARKDOWN - (columns % TAB_SPACES_MARKDOWN)
        elif character in "\r\n":
            continue
        else:
            return index, columns
    return len(line), columns


def is_uri_scheme(text: str) -> int | None:
    """Check whether `text` starts with a URI scheme followed by ``:``.

    A scheme is ``[A-Za-z][A-Za-z0-9.+-]*`` (RFC 3986, section 3.1). The rest
    of the URI is not validated.

    Args:
        text: Text to check.

    Returns:
        int | None: Index just past the ``:``, or None when there is no scheme.

    Examples:
        is_uri_scheme("https://example.com")  # 6
        is_uri_scheme("1http:")  # None
    """
    if not text or not (text[0].isascii() and text[0].isalpha()):
        return None
    for index in range(1, len(text)):
        character = text[index]
        if character == ":":
            return index + 1
        if not (character.isascii() and (character.isalnum() or character in ".+-")):
            return None
    return None


def is_atx_header(text: str) -> bool:
    """Check for an atx header: one to six ``#`` followed by whitespace.

    Examples:
        is_atx_header("## Section")  # True
        is_atx_header("#hashtag")  # False
    """
    run = len(text) - len(text.lstrip("#"))
    return 0 < run <= ATX_CHAR_MAX and _is_space_or_end(text, run)


def is_setext_header(text: str) -> bool:
    """Check for a Setext header underline: a run of ``=`` or ``-`` only.

    Trailing whitespace is allowed. Whether the previous line was text is the
    caller's concern.

    Examples:
        is_setext_header("=====")  # True
        is_setext_header("-- x")  # False
    """
    if not text or text[0] not in "=-":
        return False
    run = len(text) - len(text.lstrip(text[0]))
    return is_blank_line(text[run:])


def is_horizontal_rule(text: str) -> bool:
    """Check for a horizontal rule.

    A rule is three or more of the same ``*``, ``-``, or ``_`` character,
    optionally separated by whitespace, and nothing else.

    Examples:
        is_horizontal_rule("* * *")  # True
        is_horizontal_rule("--")  # False
    """
    if not text or text[0] not in "*-_":
        return False
    rule_char = text[0]
    count = 0
    for character in text:
        if character in " \t\r\n":
            continue
        if character != rule_char:
            return False
        count += 1
    return count >= HR_CHAR_MIN


def match_ordered_list(text: str, doxygen: bool = False) -> OrderedListItem | None:
    """Match an ordered list marker.

    Markers are one to nine digits followed by ``.`` or ``)`` and a space or
    tab. In Doxygen mode, ``-#`` followed by a space or tab also matches.

    The hang indent is the width of a one-digit marker plus one space, plus
    one more when a second space follows; a tab after the marker collapses to
    the list indent maximum.

    Args:
        text: Line text starting at the marker.
        doxygen: Whether to recognize Doxygen ``-#`` markers.

    Returns:
        OrderedListItem | None: Marker data, or None when there is no marker.

    Examples:
        match_ordered_list("12) text")  # OrderedListItem(12, ")", 3, 2)
        match_ordered_list("-# text", doxygen=True)  # OrderedListItem(0, "#", 3, 1)
    """
    if doxygen and text.startswith("-#"):
        number, delimiter, digits = 0, "#", 1
    else:
        digits = len(text) - len(text.lstrip("0123456789"))
        if not 1 <= digits <= OL_CHAR_MAX:
            return None
        delimiter = _char_at(text, digits)
        if delimiter not in (".", ")"):
            return None
        number = int(text[:digits])

    after = _char_at(text, digits + 1)
    if not is_space(after):
        return None

    if after == "\t":
        indent_hang = LIST_INDENT_MAX
    else:
        indent_hang = OL_INDENT_MIN + is_space(_char_at(text, digits + 2))
    return OrderedListItem(number, delimiter, indent_hang, digits)


def _match_dl_ul(text: str) -> int | None:
    after = _char_at(text, 1)
    if not is_space(after):
        return None
    if after == "\t":
        return LIST_INDENT_MAX
    indent_hang = DL_UL_INDENT_MIN
    if is_space(_char_at(text, 2)):
        indent_hang += 1
        if is_space(_char_at(text, 3)):
            indent_hang += 1
    return indent_hang


def match_unordered_list(text: str) -> int | None:
    """Match ``*``, ``+``, or ``-`` followed by whitespace.

    Args:
        text: Line text starting at the marker.

    Returns:
        int | None: Hang indent (2 to 4 columns), or None when there is no marker.

    Examples:
        match_unordered_list("-   item")  # 4
        match_unordered_list("-item")  # None
    """
    if not text or text[0] not in "*+-":
        return None
    return _match_dl_ul(text)


def match_definition_list(text: str) -> int | None:
    """Match a ``:`` definition marker; returns the hang indent or None."""
    if not text.startswith(":"):
        return None
    return _match_dl_ul(text)


def match_footnote_definition(text: str) -> bool | None:
    """Match a footnote definition ``[^id]:`` followed by whitespace.

    Args:
        text: Line text starting at ``[``.

    Returns:
        bool | None: Whether non-whitespace text follows the marker on the same
            line, or None when the line is not a footnote definition.

    Examples:
        match_footnote_definition("[^1]: Note.")  # True
        match_footnote_definition("[^1]:")  # False
        match_footnote_definition("[1]: x")  # None
    """
    if not text.startswith("[^"):
        return None
    close = text.find("]", 2)
    if close < 0:
        return None
    if _char_at(text, close + 1) != ":" or not _is_space_or_end(text, close + 2):
        return None
    return not is_blank_line(text[close + 2 :])


def is_link_title(text: str) -> bool:
    """Whether `text` starts a link title attribute (``"``, ``'``, or ``(``)."""
    return bool(text) and text[0] in ('"', "'", "(")


def match_link_label(text: str) -> bool | None:
    """Match a link reference definition ``[id]: URI ["title"]``.

    The URI is only checked for a plausible scheme; it may be wrapped in
    ``<...>``, in which case the closing ``>`` must end it.

    Args:
        text: Line text starting at ``[``.

    Returns:
        bool | None: Whether a title follows the URI on the same line, or None
            when the line is not a link reference definition.

    Examples:
        match_link_label('[id]: https://example.com "Title"')  # True
        match_link_label("[id]: https://example.com")  # False
        match_link_label("[id]: not a uri")  # None
    """
    if not text.startswith("["):
        return None
    close = text.find("]", 1)
    if close < 0:
        return None
    if _char_at(text, close + 1) != ":" or not is_space(_char_at(text, close + 2)):
        return None

    rest = text[close + 2 :].lstrip(" \t")
    bracketed = rest.startswith("<")
    if bracketed:
        rest = rest[1:]
    scheme_end = is_uri_scheme(rest)
    if scheme_end is None:
        return None

    uri_end = scheme_end
    while uri_end < len(rest) and rest[uri_end] not in " \t\r\n":
        uri_end += 1
    if bracketed and rest[uri_end - 1] != ">":
        return None
    trailing = rest[uri_end:]
    if is_blank_line(trailing):
        return False
    if not is_link_title(trailing.lstrip(" \t")):
        return None
    return True


def match_code_fence(text: str, fence: CodeFence) -> bool:
    """Open or close a fenced code block.

    When `fence` is unset, a run of three or more ``~`` or ````` establishes
    it. When set, the line closes it only if it is a run of the same character
    at least as long as the opening run followed by nothing but whitespace.

    Args:
        text: Line text starting at its first non-whitespace character.
        fence: Fence to establish or match against; updated when established.

    Returns:
        bool: True when the line opens (or closes) the fence.

    Examples:
        fence = CodeFence()
        match_code_fence("```python", fence)  # True, fence is now ("`", 3)
        match_code_fence("~~~", fence)  # False
    """
    fence_char = fence.fence_char or _char_at(text, 0)
    if not fence_char or fence_char not in "~`":
        return False
    run = len(text) - len(text.lstrip(fence_char))

    if fence:
        return run >= fence.fence_length and is_blank_line(text[run:])
    if run >= CODE_FENCE_CHAR_MIN:
        fence.fence_char = fence_char
        fence.fence_length = run
        return True
    return False


def is_table_row(text: str) -> bool:
    r"""Check for a table row.

    A row has at least one unescaped ``|`` preceded by at least one
    non-whitespace character; ``\`` escapes the next character.

    Examples:
        is_table_row("a | b")  # True
        is_table_row("| a")  # False
        is_table_row(r"a \| b")  # False
    """
    seen_text = False
    index = 0
    while index < len(text):
        character = text[index]
        if character == "\\":
            index += 2
            continue
        if character == "|":
            if seen_text:
                return True
        elif character not in " \t\r\n":
            seen_text = True
        index += 1
    return False


def is_html_abbreviation(text: str) -> bool:
    r"""Check for an abbreviation definition ``*[abbr]:``.

    Examples:
        is_html_abbreviation("*[HTML]: Hyper Text Markup Language")  # True
        is_html_abbreviation(r"*[a\]b]: x")  # True
    """
    if not text.startswith("*["):
        return False
    index = 2
    while index < len(text):
        character = text[index]
        if character == "\\":
            index += 2
            continue
        if character == "]":
            return _char_at(text, index + 1) == ":"
        index += 1
    return False
