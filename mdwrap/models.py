"""Data models for mdwrap."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class LineType(Enum):
    """Block-level Markdown line types.

    The values are mnemonic characters used in debug traces.

    Attributes:
        NONE: No line type determined (yet).
        CODE: Indented or fenced code.
        DEFINITION_LIST: ``: definition`` item.
        FOOTNOTE_DEF: ``[^id]: text`` footnote definition.
        HEADER_ATX: ``#`` to ``######`` header.
        HEADER_SETEXT: ``=====`` or ``-----`` header underline.
        HORIZONTAL_RULE: ``***``, ``---``, or ``___``.
        HTML_ABBREVIATION: ``*[abbr]: text`` abbreviation.
        HTML_BLOCK: Block-level raw HTML.
        LINK_LABEL: ``[id]: URI`` link reference definition.
        ORDERED_LIST: ``1.`` or ``1)`` item (or Doxygen ``-#``).
        TABLE: Table row.
        TEXT: Plain text.
        UNORDERED_LIST: ``*``, ``+``, or ``-`` item.
    """

    NONE = "0"
    CODE = "C"
    DEFINITION_LIST = ":"
    FOOTNOTE_DEF = "^"
    HEADER_ATX = "#"
    HEADER_SETEXT = "="
    HORIZONTAL_RULE = "_"
    HTML_ABBREVIATION = "A"
    HTML_BLOCK = "<"
    LINK_LABEL = "["
    ORDERED_LIST = "1"
    TABLE = "|"
    TEXT = "T"
    UNORDERED_LIST = "*"

    @property
    def is_nestable(self) -> bool:
        """Whether the line type can contain other nestable constructs."""
        return self in NESTABLE_LINE_TYPES

    @property
    def is_one_shot(self) -> bool:
        """Whether the line type never spans more than one line."""
        return self in ONE_SHOT_LINE_TYPES

    @property
    def is_verbatim(self) -> bool:
        """Whether lines of this type must never be wrapped."""
        return self in VERBATIM_LINE_TYPES


NESTABLE_LINE_TYPES = frozenset(
    {
        LineType.DEFINITION_LIST,
        LineType.FOOTNOTE_DEF,
        LineType.ORDERED_LIST,
        LineType.UNORDERED_LIST,
    }
)

ONE_SHOT_LINE_TYPES = frozenset(
    {
        LineType.HEADER_ATX,
        LineType.HEADER_SETEXT,
        LineType.HORIZONTAL_RULE,
        LineType.HTML_ABBREVIATION,
    }
)

VERBATIM_LINE_TYPES = frozenset(
    {
        LineType.CODE,
        LineType.HEADER_ATX,
        LineType.HEADER_SETEXT,
        LineType.HORIZONTAL_RULE,
        LineType.HTML_ABBREVIATION,
        LineType.HTML_BLOCK,
        LineType.LINK_LABEL,
        LineType.TABLE,
    }
)


class HtmlState(Enum):
    """How the currently open raw-HTML block ends.

    Attributes:
        NONE: No HTML block is open.
        CDATA: Ends at ``]]>``.
        COMMENT: Ends at ``-->``.
        DOCTYPE: Ends at ``>``.
        ELEMENT: Block-level element; ends at the next blank line.
        PROCESSING_INSTRUCTION: Ends at ``?>``.
        PRE: Raw-text element (``pre``, ``script``, ``style``); ends at its end tag.
        END: The end was seen; the block closes before the next line.
    """

    NONE = auto()
    CDATA = auto()
    COMMENT = auto()
    DOCTYPE = auto()
    ELEMENT = auto()
    PROCESSING_INSTRUCTION = auto()
    PRE = auto()
    END = auto()


@dataclass
class CodeFence:
    """Fence that opened a fenced code block.

    Attributes:
        fence_char: Fence character (``~`` or `````), or None when unset.
        fence_length: Number of fence characters in the opening run.
    """

    fence_char: str | None = None
    fence_length: int = 0

    def __bool__(self) -> bool:
        return self.fence_char is not None

    def reset(self) -> None:
        self.fence_char = None
        self.fence_length = 0


@dataclass
class ParserState:
    """One entry of the classifier's state stack.

    Attributes:
        line_type: Kind of block the entry represents.
        sequence_number: Number distinguishing a new block from the
            continuation of one of the same type.
        depth: Nesting depth (0 is outermost).
        indent_left: Columns of leading whitespace, tabs expanded.
        indent_hang: Extra columns for continuation lines.
        footnote_has_trailing_text: Whether a footnote definition has text on
            its marker line.
        ordered_list_char: Ordered list delimiter (``.`` or ``)``; ``#`` for
            Doxygen ``-#`` items).
        ordered_list_number: Current ordinal of an ordered list.
    """

    line_type: LineType = LineType.TEXT
    sequence_number: int = 0
    depth: int = 0
    indent_left: int = 0
    indent_hang: int = 0
    footnote_has_trailing_text: bool = False
    ordered_list_char: str = ""
    ordered_list_number: int = 0

    @property
    def content_column(self) -> int:
        """Column at which the construct's content starts."""
        return self.indent_left + self.indent_hang


@dataclass(frozen=True)
class Classification:
    """Result of classifying one line.

    Attributes:
        state: Snapshot of the top of the state stack after the line.
        line: The line, with its ordinal rewritten when it was renumbered.
    """

    state: ParserState
    line: str

    @property
    def line_type(self) -> LineType:
        return self.state.line_type

    @property
    def is_verbatim(self) -> bool:
        return self.state.line_type.is_verbatim

    @property
    def is_nestable(self) -> bool:
        return self.state.line_type.is_nestable
