"""
Commandeer command layer: declare command types and hold per-run values.

What this module provides
- Command: base class for command types. A command type declares, as class
  attributes:
  • name: the command name matched against argv[0] (e.g. "make:controller").
  • descr: a short human description.
  • args: ordered Argument descriptors (position on the command line = index).
  • flags: Flag descriptors local to the command.
  and implements `async def handle(self)`.

- CommandType metaclass:
  • Freezes `args` and `flags` into tuples when the class is built, so the
    declared shape cannot drift after registration.
  • Rejects elements of the wrong descriptor type with a TypeError.
  • Provides stable __repr__/__rich_repr__ for instances.

Per-run values
- The kernel creates one instance per invocation and binds the parsed values
  through __bind__(parsed, inputs). The command body reads them explicitly:
    self["name"]            → value of the argument/flag named "name"
    self.get("env", "dev")  → value or default when absent/None
    self.inputs             → read-only mapping of every declared value
    self.parsed             → the raw parse result ({"_": [...], ...})

Quick start
    from commandeer import Command, argument, flags

    class Greet(Command):
        name = "greet"
        descr = "Greet a user with their name"
        args = (argument("name"), argument("age", required=False))
        flags = (flags.string("env"),)

        async def handle(self):
            print("hello %s" % self["name"])
"""
import functools
import operator
import re
from types import MappingProxyType

from .arguments import Argument, Flag
from .utils import *


class CommandType(type):
    """
    Metaclass for command types.

    Responsibilities
    - Freeze the declared `args` and `flags` sequences into tuples.
    - Validate element types (Argument for args, Flag for flags).
    - Derive a human-friendly __typename__ from the class name.

    Notes
    - Ordering rules (required → optional → spread) and name presence are
      checked when the command is registered on a kernel, not here.
    """

    def __new__(cls, name, bases, namespace, **options):
        for field, kind in (("args", Argument), ("flags", Flag)):
            if field not in namespace:
                continue
            if isinstance(declared := namespace[field], str) or not hasattr(declared, "__iter__"):
                raise TypeError(f"command {name!r} {field!r} must be a sequence of {kind.__name__} descriptors")
            namespace[field] = tuple(declared)
            for item in namespace[field]:
                if not isinstance(item, kind):
                    raise TypeError(f"command {name!r} {field!r} must only contain {kind.__name__} descriptors")

        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {"__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower()},
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            yield "name", type(self).name
            yield from self._inputs.items()
        self.__rich_repr__ = __rich_repr__

        return self


class Command(metaclass=CommandType):
    """
    Base class for command types.

    Subclasses set `name`, `descr`, `args`, `flags` and override `handle()`.
    Instances are created by the kernel with no arguments, once per run.
    """

    name = None
    descr = None
    args = ()
    flags = ()

    def __init__(self):
        self._inputs = {}
        self._parsed = MappingProxyType({"_": ()})

    inputs = mirror("inputs")
    parsed = mirror("parsed")

    def __bind__(self, parsed, inputs, /):
        """
        Attach one run's raw parse result and declared values.

        Called by the kernel between construction and handle().
        """
        self._parsed = MappingProxyType(parsed)
        self._inputs = dict(inputs)

    def __getitem__(self, name, /):
        return self._inputs[name]

    def __contains__(self, name, /):
        return name in self._inputs

    def get(self, name, default=None, /):
        """
        Value bound to `name`, or `default` when it is absent or None.
        """
        value = self._inputs.get(name)
        return default if value is None else value

    async def handle(self):
        """
        Command body. The default does nothing and returns None.
        """
        return None


__all__ = (
    "Command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
