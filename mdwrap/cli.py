"""
Reflows a text or Markdown file to a line width.
The result goes to stdout unless the file is rewritten in place.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .classifier import Classifier
from .config import ConfigError, apply_overrides, build_config
from .exceptions import WrapError
from .filesystem import (
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    read_checked,
    rewrite_file,
)
from .wrapper import split_lines, wrap_text

__all__ = ["cli"]


def format_classification(classifier: Classifier, line: str) -> str:
    """Classify `line` and render the state as a one-line trace."""
    result = classifier.classify(line)
    state = result.state
    return (
        f"T={state.line_type.value} N={state.sequence_number} D={state.depth} "
        f"L={state.indent_left} H={state.indent_hang}|{result.line}"
    )


@click.command()
@click.version_option()
@click.option("-w", "--width", type=int, help="Maximum line width")
@click.option("--markdown/--no-markdown", default=None, help="Recognize Markdown blocks")
@click.option("-x", "--doxygen", is_flag=True, default=None, help="Recognize Doxygen commands")
@click.option("-i", "--in-place", is_flag=True, help="Rewrite the file instead of printing")
@click.option("--classify", is_flag=True, help="Print each line's Markdown classification")
@click.option("--debug", is_flag=True, help="Log classifier state changes to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    width: int | None = None,
    markdown: bool | None = None,
    doxygen: bool | None = None,
    in_place: bool = False,
    classify: bool = False,
    debug: bool = False,
):
    """
    Entry point for reflowing a file.

    Args:
        filepath: Path to the file to process.
        width: Override for the maximum line width.
        markdown: Override for Markdown block recognition.
        doxygen: Override for Doxygen command recognition.
        in_place: Whether to rewrite the file atomically.
        classify: Whether to print classifications instead of wrapping.
        debug: Whether to log classifier state changes.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is rejected or the configuration is
            invalid.
        click.ClickException: If limits are exceeded, the file cannot be read
            or rewritten, or wrapping fails.

    Examples:
        mdwrap README.md --width 72 --in-place
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(filepath.parent, width=width, markdown=markdown, doxygen=doxygen)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    config = apply_overrides(config, max_line_length=max_line_length)

    try:
        text, initial_stat = read_checked(filepath, max_file_size)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    if classify:
        classifier = Classifier(doxygen=config.doxygen)
        for line in split_lines(text)[0]:
            click.echo(format_classification(classifier, line))
        return

    try:
        wrapped = wrap_text(text, config)
    except WrapError as error:
        raise click.ClickException(str(error)) from error

    if not in_place:
        click.echo(wrapped, nl=False)
        return
    if wrapped == text:
        return
    try:
        rewrite_file(
            filepath,
            wrapped,
            initial_stat,
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
