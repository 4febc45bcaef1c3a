"""Constants used across the mdwrap package."""

from __future__ import annotations

from .config import WrapConfig

DEFAULT_CONFIG = WrapConfig()

# Limits and defaults
DEFAULT_MAX_FILE_SIZE = DEFAULT_CONFIG.max_file_size
DEFAULT_MAX_LINE_LENGTH = DEFAULT_CONFIG.max_line_length
TEXT_EXTENSIONS = (".md", ".markdown", ".mdown", ".mkd", ".txt", ".text", ".dox")

# Markdown block grammar
TAB_SPACES_MARKDOWN = 4
ATX_CHAR_MAX = 6  # max number of # in an atx header
CODE_FENCE_CHAR_MIN = 3  # min number of ~~~ or ```
CLOSING_FENCE_MAX_INDENT = 3
CODE_INDENT_MIN = 4  # min indent for code, per nesting level
FOOTNOTE_INDENT = 4
HR_CHAR_MIN = 3  # min number of ***, ---, or ___
LINK_INDENT_MAX = 3  # max indent for [id]: URI
LIST_INDENT_MAX = 4  # max indent for all lists
DL_UL_INDENT_MIN = 2  # definition and unordered list min indent
OL_CHAR_MAX = 9  # ordered list max digits
OL_INDENT_MIN = 3  # ordered list min indent

# HTML
HTML_ELEMENT_CHAR_MAX = 10  # "blockquote"

# Raw-text elements whose content runs until the matching end tag.
HTML_PRE_ELEMENTS = frozenset({"pre", "script", "style"})

# Block-level HTML5 elements; a block of these ends at the next blank line.
HTML_BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "canvas",
        "caption",
        "center",
        "col",
        "colgroup",
        "dd",
        "details",
        "dialog",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frame",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "head",
        "header",
        "hgroup",
        "hr",
        "html",
        "iframe",
        "legend",
        "li",
        "link",
        "main",
        "menu",
        "menuitem",
        "meta",
        "nav",
        "noframes",
        "noscript",
        "ol",
        "optgroup",
        "option",
        "output",
        "p",
        "param",
        "section",
        "source",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "title",
        "tr",
        "track",
        "ul",
        "video",
    }
)
