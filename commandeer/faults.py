"""
Commandeer faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- CommandException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Kinds
- ConfigurationError: a command type has a bad shape; raised by Kernel.register().
  Always a programmer error.
- UnknownCommandError: argv[0] names no registered command; raised by Kernel.handle().
- InvalidFlagValueError: a number flag received no numeric value; raised by the parser.

Integration
- The kernel raises faults directly and never renders them.
- The invoke() driver calls trigger(fault, **ctx): in non-shell mode the fault is
  raised again; in shell mode it is rendered via rich and the process exits.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the kernel (stable identifiers).

    grouping (by high-level domain)
    - configuration (1000x)
      • MISSING_COMMAND_NAME, INVALID_COMMAND, ARGUMENT_ORDER, SPREAD_POSITION,
        DUPLICATED_FIELD
    - routing (1110x)
      • UNKNOWN_COMMAND
    - flags (1112x)
      • INVALID_FLAG_VALUE

    numeric ranges encode domains; spacing leaves room for future additions
    without reshuffling existing codes.
    """
    # --- configuration errors (10xxx) ---
    MISSING_COMMAND_NAME        = 10001
    INVALID_COMMAND             = 10002
    ARGUMENT_ORDER              = 10003
    SPREAD_POSITION             = 10004
    DUPLICATED_FIELD            = 10005

    # --- routing errors (11xxx) ---
    UNKNOWN_COMMAND             = 11101

    # --- flag errors (11xxx) ---
    INVALID_FLAG_VALUE          = 11124

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a message plus read-only keyword options.

    recognized options
    - title, code, hint, docs: rendered copy.
    - input: the offending token or name, when there is one.
    - shell, fancy, colorful, prog: runtime options merged in by trigger().
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        prog = text(
            getattr(main, "__prog__", self.options.get("prog") or os.path.basename(sys.argv[0]) or "commandeer"),
            styler("prog-name")
        )

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(str(self.options.get("title", "error")).title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(CommandException): ...
class UnknownCommandError(CommandException): ...
class InvalidFlagValueError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, the fault is raised.

    typical options
    - shell, fancy, colorful, prog, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., input/suggestions).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "ConfigurationError",
    "UnknownCommandError",
    "InvalidFlagValueError",
    "FaultCode",
    "trigger",
    "getdoc",
)
