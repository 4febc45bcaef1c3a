"""Reflow text to a line width.

Paragraphs are refilled with `textwrap`; what counts as a paragraph depends
on the mode. In Markdown mode every line goes through a `Classifier` so that
headers, code, tables, and HTML pass through untouched and list items keep
their markers and hang indents.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import textwrap

from .classifier import Classifier
from .config import WIDTH_MINIMUM, WrapConfig
from .constants import DEFAULT_CONFIG, TAB_SPACES_MARKDOWN
from .detectors import first_non_whitespace, is_blank_line
from .doxygen import CommandKind, parse_command, parse_command_name
from .exceptions import LineTooLongError, WidthTooSmallError
from .models import Classification, LineType

logger = logging.getLogger(__name__)


def wrap_text(text: str, config: WrapConfig | None = None) -> str:
    """Reflow `text` to the configured width.

    Args:
        text: Text to reflow.
        config: Wrapping options; defaults apply when omitted.

    Returns:
        str: The reflowed text, using the input's end-of-line convention.

    Raises:
        LineTooLongError: If an input line exceeds `config.max_line_length`.
        WidthTooSmallError: If a paragraph's indentation leaves fewer than
            `WIDTH_MINIMUM` columns for text.

    Examples:
        wrap_text("one two three\\n", WrapConfig(width=10, markdown=False))
        # "one two\\nthree\\n"
    """
    config = config or DEFAULT_CONFIG
    lines, newline, trailing_newline = split_lines(text)

    for line_number, line in enumerate(lines, start=1):
        if len(line) > config.max_line_length:
            raise LineTooLongError(line_number, config.max_line_length)

    output = LineWrapper(config).wrap(lines)
    result = newline.join(output)
    if trailing_newline:
        result += newline
    return result


def split_lines(text: str) -> tuple[list[str], str, bool]:
    """Split text into lines without their end-of-line characters.

    Returns:
        tuple[list[str], str, bool]: The lines, the newline used by the first
            line (``"\\r\\n"`` or ``"\\n"``), and whether the text ends with one.
    """
    if not text:
        return [], "\n", False
    lines = text.split("\n")
    newline = "\r\n" if lines[0].endswith("\r") and len(lines) > 1 else "\n"
    trailing_newline = text.endswith("\n")
    if trailing_newline:
        lines.pop()
    return [line.removesuffix("\r") for line in lines], newline, trailing_newline


class LineWrapper:
    """Fill paragraphs one input line at a time.

    Args:
        config: Wrapping options.
    """

    def __init__(self, config: WrapConfig):
        self.config = config
        self.tab_size = TAB_SPACES_MARKDOWN if config.markdown else config.tab_spaces
        self.classifier = Classifier(doxygen=config.doxygen) if config.markdown else None
        self._output: list[str] = []
        self._lines: list[str] = []
        self._words: list[str] = []
        self._initial_indent = ""
        self._subsequent_indent = ""
        # Highest sequence number seen; a higher one starts a new item.
        self._sequence_number = 0
        self._preformatted_end: str | None = None

    def wrap(self, lines: Iterable[str]) -> list[str]:
        """Wrap `lines` and return the output lines."""
        for line in lines:
            self.feed(line)
        self.flush()
        return self._output

    def feed(self, line: str) -> None:
        """Process one input line (without its end-of-line characters)."""
        if self._preformatted_end is not None:
            self._output.append(line)
            if parse_command_name(line) == self._preformatted_end:
                logger.debug("doxygen: end of preformatted block %r", self._preformatted_end)
                self._preformatted_end = None
            return

        classification = self.classifier.classify(line) if self.classifier else None
        if classification is not None and classification.is_verbatim:
            self._emit_verbatim(classification)
            return

        if self.config.doxygen and self._feed_doxygen(line):
            self._track(classification)
            return

        if is_blank_line(line):
            self.flush()
            self._output.append(line)
            return

        if classification is not None and classification.is_nestable:
            self._feed_nestable(classification)
        else:
            if not self._lines:
                indent = self._leading_whitespace(line)
                self._start(indent, indent)
            self._add(line, line.split())
        self._track(classification)

    def flush(self, verbatim: bool = False) -> None:
        """Emit the pending paragraph, refilled unless `verbatim` is set."""
        if not self._lines:
            return
        if verbatim or not self._words:
            self._output.extend(self._lines)
        else:
            self._output.extend(self._fill())
        self._lines = []
        self._words = []

    def _emit_verbatim(self, classification: Classification) -> None:
        # A Setext underline turns the text above it into a header.
        self.flush(verbatim=classification.line_type is LineType.HEADER_SETEXT)
        self._output.append(classification.line)
        self._track(classification)

    def _feed_doxygen(self, line: str) -> bool:
        command = parse_command(line)
        if command is None or command.kind is CommandKind.INLINE:
            return False

        self.flush()
        if CommandKind.PRE in command.kind:
            self._output.append(line)
            if not any(f"{prefix}{command.end_name}" in line for prefix in "@\\"):
                logger.debug("doxygen: preformatted until %r", command.end_name)
                self._preformatted_end = command.end_name
        elif CommandKind.EOL in command.kind:
            self._output.append(line)
        else:
            indent = self._leading_whitespace(line)
            self._start(indent, indent)
            self._add(line, line.split())
        return True

    def _feed_nestable(self, classification: Classification) -> None:
        state = classification.state
        line = classification.line
        nws, _ = first_non_whitespace(line)
        leading = self._leading_whitespace(line)

        if state.sequence_number <= self._sequence_number:
            # Continuation of the current item, or a later paragraph of it.
            if not self._lines:
                self._start(leading, leading)
            self._add(line, line.split())
            return

        self.flush()
        if state.line_type is LineType.FOOTNOTE_DEF and not state.footnote_has_trailing_text:
            self._output.append(line)
            return

        marker, _, text = line[nws:].partition(" ")
        if "\t" in marker:
            marker, _, tail = marker.partition("\t")
            text = f"{tail} {text}"
        padding = max(1, state.content_column - len(leading) - len(marker))
        self._start(f"{leading}{marker}{' ' * padding}", " " * state.content_column)
        self._add(line, text.split())

    def _track(self, classification: Classification | None) -> None:
        if classification is not None:
            self._sequence_number = max(self._sequence_number, classification.state.sequence_number)

    def _start(self, initial_indent: str, subsequent_indent: str) -> None:
        self._initial_indent = initial_indent
        self._subsequent_indent = subsequent_indent

    def _add(self, line: str, words: list[str]) -> None:
        self._lines.append(line)
        self._words.extend(words)

    def _leading_whitespace(self, line: str) -> str:
        stripped = line.lstrip(" \t")
        return line[: len(line) - len(stripped)].expandtabs(self.tab_size)

    def _fill(self) -> list[str]:
        indent = max(len(self._initial_indent), len(self._subsequent_indent))
        if self.config.width - indent < WIDTH_MINIMUM:
            raise WidthTooSmallError(self.config.width - indent, WIDTH_MINIMUM)
        wrapper = textwrap.TextWrapper(
            width=self.config.width,
            initial_indent=self._initial_indent,
            subsequent_indent=self._subsequent_indent,
            break_long_words=False,
            break_on_hyphens=False,
        )
        return wrapper.wrap(" ".join(self._words))
