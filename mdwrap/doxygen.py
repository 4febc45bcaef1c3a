"""Doxygen command table.

Commands are looked up by name with a binary search over a sorted table. A
command's kind says how it interacts with paragraph filling: inline commands
are ordinary words, the others must start a line and may end the paragraph
before them or pass lines through untouched.
"""

from __future__ import annotations

from bisect import bisect_left
from enum import Flag
from typing import NamedTuple

COMMAND_NAME_CHARS = frozenset("abcdefghijklmnopqrstuvwxyz()[]{}$")
COMMAND_NAME_MAX = 16


class CommandKind(Flag):
    """How a Doxygen command affects wrapping.

    Attributes:
        INLINE: May appear anywhere; wrapped like any other word.
        BOL: Must be at the beginning of a line.
        EOL: The rest of the line belongs to the command; never wrapped.
        PAR: Starts a new paragraph.
        PRE: Lines up to the matching end command are preformatted.
    """

    INLINE = 1
    BOL = 2
    EOL = 4
    PAR = 8
    PRE = 16


_EOL = CommandKind.BOL | CommandKind.EOL
_PAR = CommandKind.BOL | CommandKind.PAR
_PRE = _PAR | CommandKind.PRE


class Command(NamedTuple):
    """A Doxygen command.

    Attributes:
        name: Name without the leading ``@`` or ``\\``.
        kind: How the command affects wrapping.
        end_name: Name of the command that ends it, if any.
    """

    name: str
    kind: CommandKind
    end_name: str | None = None


_INLINE_NAMES = (
    "a anchor b c e em emoji enum extends f$ fileinfo p ref refitem showdate struct"
)
_BOL_NAMES = "copybrief copydetails copydoc pure"
_EOL_NAMES = (
    "addindex addtogroup callergraph callgraph category cite class collaborationgraph"
    " concept def defgroup diafile dir directorygraph docbookinclude dontinclude"
    " dotfile doxyconfig else elseif endcode endcond enddocbookonly enddot"
    " endhtmlonly endif endinternal endlatexonly endlink endmanonly endmsc"
    " endparblock endrtfonly endsecreflist endverbatim enduml endxmlonly example"
    " f) f] f} file fn groupgraph headerfile hidecallergraph hidecallgraph"
    " hidecollaborationgraph hidedirectorygraph hidegroupgraph hideincludedbygraph"
    " hideincludegraph hideinitializer hiderefby hiderefs htmlinclude idlexcept"
    " image implements include includedbygraph includedoc includegraph"
    " includelineno ingroup interface latexinclude line mainpage maninclude"
    " memberof module mscfile n name namespace noop nosubgrouping overload package"
    " page par paragraph parblock private privatesection property protected"
    " protectedsection protocol public publicsection qualifier raisewarning related"
    " relates relatedalso relatesalso sa section showinitializer showrefby showrefs"
    " skip skipline snippet snippetdoc snippetlineno static subpage subsection"
    " subsubsection tableofcontents typedef union until var verbinclude vhdlflow"
    " weakgroup xmlinclude { }"
)
_PAR_NAMES = (
    "arg attention author authors brief bug copyright date deprecated details"
    " exception invariant li note param post pre remark remarks result return"
    " returns retval see short since test throw throws todo tparam version warning"
    " xrefitem"
)

COMMANDS: tuple[Command, ...] = tuple(
    sorted(
        [
            *(Command(name, CommandKind.INLINE) for name in _INLINE_NAMES.split()),
            *(Command(name, CommandKind.BOL) for name in _BOL_NAMES.split()),
            *(Command(name, _EOL) for name in _EOL_NAMES.split()),
            *(Command(name, _PAR) for name in _PAR_NAMES.split()),
            Command("link", CommandKind.INLINE, "endlink"),
            Command("if", _EOL, "endif"),
            Command("ifnot", _EOL, "endif"),
            Command("internal", _EOL, "endinternal"),
            Command("secreflist", _EOL, "endsecreflist"),
            Command("cond", _PAR, "endcond"),
            Command("rtfonly", _PAR, "endrtfonly"),
            Command("code", _PRE, "endcode"),
            Command("docbookonly", _PRE, "enddocbookonly"),
            Command("dot", _PRE, "enddot"),
            Command("f(", _PRE, "f)"),
            Command("f[", _PRE, "f]"),
            Command("f{", _PRE, "f}"),
            Command("htmlonly", _PRE, "endhtmlonly"),
            Command("latexonly", _PRE, "endlatexonly"),
            Command("manonly", _PRE, "endmanonly"),
            Command("msc", _PRE, "endmsc"),
            Command("startuml", _PRE, "enduml"),
            Command("verbatim", _PRE, "endverbatim"),
            Command("xmlonly", _PRE, "endxmlonly"),
        ]
    )
)
_COMMAND_NAMES = tuple(command.name for command in COMMANDS)


def find_command(name: str) -> Command | None:
    """Look up a Doxygen command by name.

    Args:
        name: Command name without the leading ``@`` or ``\\``.

    Returns:
        Command | None: The command, or None when `name` is not a command.

    Examples:
        find_command("param").kind  # CommandKind.BOL | CommandKind.PAR
        find_command("nosuch")  # None
    """
    index = bisect_left(_COMMAND_NAMES, name)
    if index < len(_COMMAND_NAMES) and _COMMAND_NAMES[index] == name:
        return COMMANDS[index]
    return None


def parse_command_name(line: str) -> str | None:
    """Extract the name of the Doxygen command a line starts with.

    Args:
        line: Line to inspect; leading spaces and tabs are skipped.

    Returns:
        str | None: The command name, or None when the line does not start
            with ``@`` or ``\\`` followed by one to sixteen command characters.

    Examples:
        parse_command_name("  @param x The x.")  # "param"
        parse_command_name("\\\\f[")  # "f["
        parse_command_name("text")  # None
    """
    text = line.lstrip(" \t")
    if not text or text[0] not in "@\\":
        return None
    end = 1
    while end < len(text) and text[end] in COMMAND_NAME_CHARS:
        end += 1
    if not 1 < end <= COMMAND_NAME_MAX + 1:
        return None
    return text[1:end]


def parse_command(line: str) -> Command | None:
    """Find the Doxygen command a line starts with, if it is a known one.

    An option list such as the ``[in]`` of ``@param[in]`` is ignored.
    """
    name = parse_command_name(line)
    if name is None:
        return None
    command = find_command(name)
    if command is None and name.find("[") > 0:
        command = find_command(name[: name.index("[")])
    return command
