"""
mdwrap: reflow plain text, Markdown, and Doxygen comments to a line width.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    mdwrap README.md --width 72

Library Usage:
    from mdwrap import Classifier, WrapConfig, wrap_text

    wrapped = wrap_text(text, WrapConfig(width=72))

    classifier = Classifier()
    for line in text.splitlines():
        print(classifier.classify(line).line_type)
"""

from .classifier import (
    Classifier,
    classify_lines,
    indent_depth,
    indent_divisor,
    renumber_ordered_list,
)
from .config import ConfigError, WrapConfig
from .exceptions import LineTooLongError, WidthTooSmallError, WrapError
from .models import Classification, CodeFence, HtmlState, LineType, ParserState
from .wrapper import wrap_text

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "Classifier",
    "classify_lines",
    "wrap_text",
    # Data models
    "Classification",
    "CodeFence",
    "HtmlState",
    "LineType",
    "ParserState",
    "WrapConfig",
    # Utilities
    "indent_depth",
    "indent_divisor",
    "renumber_ordered_list",
    # Exceptions
    "ConfigError",
    "LineTooLongError",
    "WidthTooSmallError",
    "WrapError",
    # Version
    "__version__",
]
