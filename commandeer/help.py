"""
Commandeer help rendering (rich-based).

- printhelp(commands, flags): list of commands grouped by namespace plus the
  global flags table.
- printhelpfor(command, flags): usage line, description, arguments and flags
  of a single command type.

Namespaces
- The namespace of a command is the text before its first ':' ("make" for
  "make:controller"). Commands without one are listed first.

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset, coalesce


def _palette(colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #FF4D94",
        "description-section": "italic #A3A3A3",
        "group-label": "bold #FFFFFF",
        "command-name": "bold #36C5F0",
        "argument-name": "bold #FFD600",
        "flag-name": "bold #22C55E",
        "flag-type": "#9CA3AF",
        "description": "#9CA3AF",
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _flagnames(flag):
    names = ["--" + flag.name]
    if flag.alias is not None:
        names.insert(0, ("-" if len(flag.alias) == 1 else "--") + flag.alias)
    return ", ".join(names)


def _flagstable(title, flags, styler, text):
    table = Table(title=text(title, styler("group-label")), title_justify="left", box=None, show_header=False, padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column(no_wrap=True)
    table.add_column()
    for flag in flags:
        table.add_row(
            text(_flagnames(flag), styler("flag-name")),
            text("" if flag.type == "boolean" else "<%s>" % flag.type, styler("flag-type")),
            text(flag.descr, styler("description")),
        )
    return table


def _emit(renders, title, console, fancy, styler, text):
    console = coalesce(console, Console())
    if fancy:
        console.print(Panel(Group(*renders), title=text(title, styler("panel-title")), title_align="left", box=ROUNDED))
    else:
        console.print(Group(*renders))


def usage(command, /):
    """
    Plain usage string of a command type.

    Example
    - "greet <name> [age] [...files] [flags]"
    """
    parts = [command.name]
    for argument in command.args:
        if argument.spread:
            parts.append("[...%s]" % argument.name if not argument.required else "<...%s>" % argument.name)
        elif argument.required:
            parts.append("<%s>" % argument.name)
        else:
            parts.append("[%s]" % argument.name)
    if command.flags:
        parts.append("[flags]")
    return " ".join(parts)


def printhelp(commands, flags=(), /, *, console=Unset, colorful=True, fancy=False):
    """
    Render the list of commands, grouped by namespace, and the global flags.

    Parameters
    - commands: iterable of command types (e.g. kernel.commands.values()).
    - flags: iterable of global Flag descriptors (e.g. kernel.flags.values()).
    - console: rich Console to print on (a fresh stdout console by default).
    """
    styler, text = _palette(colorful)

    groups = defaultdict(list)
    for command in sorted(commands, key=lambda command: command.name):
        namespace, colon, _ = command.name.partition(":")
        groups[namespace if colon else ""].append(command)

    renders = []
    for namespace in sorted(groups):
        table = Table(
            title=text(namespace or "available commands", styler("group-label")),
            title_justify="left",
            box=None,
            show_header=False,
            padding=(0, 2),
        )
        table.add_column(no_wrap=True)
        table.add_column()
        for command in groups[namespace]:
            table.add_row(text(command.name, styler("command-name")), text(command.descr, styler("description")))
        renders.append(table)

    if flags := list(flags):
        renders.append(_flagstable("global flags", flags, styler, text))

    _emit(renders, "commands", console, fancy, styler, text)


def printhelpfor(command, flags=(), /, *, console=Unset, colorful=True, fancy=False):
    """
    Render the usage, description, arguments and flags of one command type.

    Parameters
    - command: the command type.
    - flags: optional global Flag descriptors to list after the command's own.
    - console: rich Console to print on (a fresh stdout console by default).
    """
    styler, text = _palette(colorful)

    renders = [
        Text.assemble(text("usage", styler("usage-label")), ": ", text(usage(command), styler("program-name")))
    ]
    if command.descr:
        renders.append(text(command.descr, styler("description-section")))

    if command.args:
        table = Table(title=text("arguments", styler("group-label")), title_justify="left", box=None, show_header=False, padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column(no_wrap=True)
        table.add_column()
        for argument in command.args:
            table.add_row(
                text(argument.name, styler("argument-name")),
                text("required" if argument.required else "optional", styler("flag-type")),
                text(argument.descr, styler("description")),
            )
        renders.append(table)

    if command.flags:
        renders.append(_flagstable("flags", command.flags, styler, text))
    if flags := list(flags):
        renders.append(_flagstable("global flags", flags, styler, text))

    _emit(renders, command.name, console, fancy, styler, text)


__all__ = (
    "usage",
    "printhelp",
    "printhelpfor",
)
