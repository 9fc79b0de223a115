"""
Commandeer kernel: register, find and invoke commands from an argv list.

What this module provides
- Kernel
  • register(commands): validate and store command types by name.
  • flag(name, handler, **options): register a global flag and its handler.
  • find(argv): the command type named by argv[0], or None.
  • suggestions(name, distance=3): registered names within an edit distance.
  • handle(argv): parse argv, fire global flags, build and run the command.

- invoke(kernel, prompt): process driver. Runs kernel.handle() under asyncio
  and reports kernel faults (rendered via rich in shell mode, raised otherwise).

Pipeline of handle(argv)
    argv → find → Parser.parse (global + command flags) → global flag handlers
         → command() → __bind__(parsed, inputs) → await handle()

Design notes
- The command name is always the first token. "tool greet --x" works, "tool --x greet"
  takes the flag-only path and "tool foo greet" looks up "foo".
- Argument shape is validated once, at registration. Presence of required
  arguments is not checked at dispatch: a missing positional is bound as None.
- The kernel never catches, wraps, or reports errors; invoke() is the reporting layer.
"""
import asyncio
import inspect
import shlex
import sys
from collections.abc import Iterable

from rapidfuzz.distance import Levenshtein

from .arguments import Flag
from .faults import *
from .parser import Parser, isflag
from .utils import *


class Kernel:
    """
    Registry of command types and global flags, plus the dispatch pipeline.

    One kernel is built at process start, filled with register()/flag(), and
    then handed to whatever drives handle(argv). Both registries are plain
    mappings with no locking; register everything before dispatching.
    """

    def __init__(self):
        self._commands = {}
        self._flags = {}

    commands = mirror("commands")
    flags = mirror("flags")

    def _validate(self, command):
        """
        Check a command type's shape before it is stored.

        Arguments are matched by position, so the accepted shape is
        required* optional* spread?: a required argument cannot follow an
        optional one, and a spread argument can only be the last one.
        """
        typename = getattr(command, "__name__", repr(command))

        if not getattr(command, "name", None):
            raise ConfigurationError(
                "missing command name for %r class" % typename,
                title="missing command name",
                code=FaultCode.MISSING_COMMAND_NAME,
                input=typename,
                hint="set a non-empty 'name' class attribute on %s" % typename,
                docs=getdoc(FaultCode.MISSING_COMMAND_NAME),
            )

        if not callable(getattr(command, "__bind__", None)) or not callable(getattr(command, "handle", None)):
            raise ConfigurationError(
                "command %r does not implement the command contract" % command.name,
                title="invalid command",
                code=FaultCode.INVALID_COMMAND,
                input=command.name,
                hint="subclass commandeer.Command and override handle()",
                docs=getdoc(FaultCode.INVALID_COMMAND),
            )

        optional = None
        for index, argument in enumerate(command.args):
            if optional and argument.required:
                raise ConfigurationError(
                    "required argument %r of command %r cannot follow optional argument %r" % (
                        argument.name, command.name, optional.name
                    ),
                    title="argument order",
                    code=FaultCode.ARGUMENT_ORDER,
                    input=argument.name,
                    hint="move %r before %r or make it optional" % (argument.name, optional.name),
                    docs=getdoc(FaultCode.ARGUMENT_ORDER),
                )

            if argument.spread and len(command.args) > index + 1:
                raise ConfigurationError(
                    "spread argument %r of command %r must be the last argument" % (argument.name, command.name),
                    title="spread position",
                    code=FaultCode.SPREAD_POSITION,
                    input=argument.name,
                    hint="move %r to the end of the arguments" % argument.name,
                    docs=getdoc(FaultCode.SPREAD_POSITION),
                )

            if not argument.required:
                optional = argument

        seen = set()
        for field in (*command.args, *command.flags):
            if field.name in seen:
                raise ConfigurationError(
                    "command %r declares %r more than once" % (command.name, field.name),
                    title="duplicated field",
                    code=FaultCode.DUPLICATED_FIELD,
                    input=field.name,
                    hint="give every argument and flag of a command its own name",
                    docs=getdoc(FaultCode.DUPLICATED_FIELD),
                )
            seen.add(field.name)

    def _fire(self, parsed, command=None):
        """
        Run the handler of every global flag present in the parse result.

        Handlers run in registration order and only for present values; an
        empty string or an empty list counts as absent. Handler errors propagate.
        """
        for name, flag in list(self._flags.items()):
            if (value := parsed.get(name, Unset)) is Unset:
                continue
            if isinstance(value, str | list | tuple) and not value:
                continue
            flag(value, parsed, command)

    def register(self, commands, /):
        """
        Validate and store command types, keyed by their name.

        A later command with the same name replaces the earlier one. Validation
        fails fast with ConfigurationError; commands stored before the failing
        one stay registered.
        """
        for command in commands:
            self._validate(command)
            self._commands[command.name] = command
        return self

    def flag(self, name, handler, /, **options):
        """
        Register a global flag, recognized whatever command runs (or none).

        Parameters
        - name: flag name without dashes (e.g. "env" for --env).
        - handler: handler(value, parsed, command) called after parsing when the
          flag is present; command is the resolved command type or None.
        - options: type ("boolean" by default), alias, descr.

        Registering the same name again replaces the earlier flag.
        """
        if not callable(handler):
            raise TypeError("flag() handler must be callable")
        self._flags[name] = Flag(name, handler=handler, **{"type": "boolean"} | options)
        return self

    def find(self, argv, /):
        """
        Return the command type named by argv[0], or None.

        Only the first token is considered; the name is never searched for
        further down the list.
        """
        argv = list(argv[:1])
        if not argv:
            return None
        return self._commands.get(argv[0])

    def suggestions(self, name, /, distance=3):
        """
        Registered command names within `distance` edits of `name`.

        Names come back in registration order, not ranked by similarity.
        """
        return [command for command in self._commands if Levenshtein.distance(name, command) <= distance]

    async def handle(self, argv, /):
        """
        Parse argv, fire global flags and run the matched command.

        Returns the command's handle() result; None for an empty argv or when
        argv starts with a flag (global flags only, no command runs).

        Raises
        - UnknownCommandError when argv[0] is not a registered command.
        - InvalidFlagValueError from the parser.
        - Anything raised by global flag handlers or the command body, unchanged.
        """
        argv = list(argv)
        if not argv:
            return None

        parser = Parser(self._flags.values())

        if isflag(argv[0]):
            self._fire(parser.parse(argv))
            return None

        command = self.find(argv)
        if command is None:
            raise UnknownCommandError(
                "%r is not a registered command" % argv[0],
                title="unknown command",
                code=FaultCode.UNKNOWN_COMMAND,
                input=argv[0],
                docs=getdoc(FaultCode.UNKNOWN_COMMAND),
            )

        parsed = parser.parse(argv[1:], command)
        self._fire(parsed, command)

        inputs = {}
        positionals = parsed["_"]
        for index, argument in enumerate(command.args):
            if argument.spread:
                inputs[argument.name] = positionals[index:]
                break
            inputs[argument.name] = positionals[index] if index < len(positionals) else None

        for flag in command.flags:
            inputs[flag.name] = parsed.get(flag.name)

        instance = command()
        instance.__bind__(parsed, inputs)

        result = instance.handle()
        if inspect.isawaitable(result):
            result = await result
        return result


def invoke(kernel, prompt=Unset, /, *, shell=True, fancy=False, colorful=True):
    """
    Run a kernel against command-line tokens and report kernel faults.

    Parameters
    - kernel: the Kernel to dispatch on.
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.
    - shell: render faults to stderr and exit with status 1 (True), or raise them (False).
    - fancy: render faults inside a panel.
    - colorful: style the rendering.

    Behavior
    - Returns whatever the command's handle() returned.
    - UnknownCommandError is enriched with kernel.suggestions() and a
      "did you mean" hint before being triggered.
    - Errors raised by command bodies or flag handlers are not intercepted.
    """
    if not isinstance(kernel, Kernel):
        raise TypeError("invoke() first argument must be a kernel")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() prompt must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() prompt must be a string or an iterable of strings")

    try:
        return asyncio.run(kernel.handle(tokens))
    except CommandException as exception:
        options = {"shell": shell, "fancy": fancy, "colorful": colorful}
        if isinstance(exception, UnknownCommandError):
            suggestions = kernel.suggestions(exception.options["input"])
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "check the command name; %d commands are registered" % len(kernel.commands)
            options |= {"suggestions": suggestions, "hint": hint}
        trigger(exception, **options)


__all__ = (
    "Kernel",
    "invoke",
)
