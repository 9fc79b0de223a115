r"""
Commandeer argument and flag descriptors.

Overview
- Descriptors
  • Argument: positional descriptor (name, required, type "value" | "spread").
  • Flag: named descriptor (name, type "boolean" | "string" | "number" | "array",
    optional alias, optional handler).

- Builders
  • argument(name, ...): a plain positional argument.
  • spread(name, ...): a positional argument that takes every remaining value.
  • flags.boolean/string/number/array(name, ...): flags of a given type.
  Builders return descriptors; command types list them in their `args`/`flags`
  sequences, which are frozen when the command class is built.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    selected fields via read-only properties declared in __introspectable__.

Validation highlights
- Names are non-empty strings without surrounding whitespace and without a
  leading '-' (dashes belong to the command line, not to the descriptor).
- Flag aliases follow the same rules.
- Unknown kinds are rejected with ValueError; wrong Python types with TypeError.
- Positional ordering (required → optional → spread) is a registration-time
  rule and lives in the kernel, not here.

Quick example:
    >>> from commandeer.arguments import argument, spread, flags
    >>> args = (argument("name"), argument("age", required=False))
    >>> files = spread("files")
    >>> env = flags.string("env", alias="e", descr="Environment to run in")
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns descriptors into introspectable, read-only records.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument(name='age', required=False, type='value', descr=None)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, field, name, /):
    """
    Internal: validate a descriptor name (or alias) and return it.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    if not name or name != name.strip():
        raise ValueError(f"{cls.__typename__} {field!r} cannot be empty or padded with whitespace")
    if name.startswith("-"):
        raise ValueError(f"{cls.__typename__} {field!r} must be given without leading dashes")
    return name


def _sanitize_descr(cls, descr, /):
    """
    Internal: normalize an optional description (Unset → None, trimmed otherwise).
    """
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    if isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    return coalesce(descr)


class Argument(metaclass=ArgumentType):
    """
    Positional argument descriptor.

    Position in the command's `args` sequence maps to the position of the value
    on the command line. A "spread" argument takes every remaining positional
    value as a list, so it can only be the last one.
    """

    __introspectable__ = (
        "name",
        "required",
        "type",
        "descr",
    )

    KINDS = ("value", "spread")

    def __init__(self, name, /, required=True, type="value", descr=Unset):
        self._name = _sanitize_name(Argument, "name", name)
        if type not in self.KINDS:
            raise ValueError(f"{Argument.__typename__} 'type' must be one of {', '.join(map(repr, self.KINDS))}")
        self._type = type
        self._required = bool(required)
        self._descr = _sanitize_descr(Argument, descr)

    @property
    def spread(self):
        return self._type == "spread"


class Flag(metaclass=ArgumentType):
    """
    Named flag descriptor.

    Flags are written `--name` (or `-alias`) on the command line. Their parsed
    value depends on the type:
    - boolean → True/False
    - string  → str ("" when no value followed)
    - number  → int or float
    - array   → list of str, accumulated over repeated occurrences

    Global flags carry a handler; calling the flag forwards
    (value, parsed, command) to it, and does nothing when no handler is bound.
    """

    __introspectable__ = (
        "name",
        "type",
        "alias",
        "descr",
    )

    KINDS = ("boolean", "string", "number", "array")

    def __init__(self, name, /, type="boolean", alias=Unset, descr=Unset, handler=Unset):
        self._name = _sanitize_name(Flag, "name", name)
        if type not in self.KINDS:
            raise ValueError(f"{Flag.__typename__} 'type' must be one of {', '.join(map(repr, self.KINDS))}")
        self._type = type
        self._alias = coalesce(alias) if alias is Unset else _sanitize_name(Flag, "alias", alias)
        if self._alias == self._name:
            raise ValueError(f"{Flag.__typename__} 'alias' cannot repeat the flag name")
        self._descr = _sanitize_descr(Flag, descr)
        if handler is not Unset and not callable(handler):
            raise TypeError(f"{Flag.__typename__} 'handler' must be callable")
        self._handler = handler

    @property
    def names(self):
        """
        Every spelling of this flag, name first.
        """
        return (self._name,) if self._alias is None else (self._name, self._alias)

    def __call__(self, value, parsed, command=None, /):
        if self._handler is Unset:
            return
        return self._handler(value, parsed, command)


def argument(name, /, *, required=True, descr=Unset):
    """
    Build a plain positional argument.

    Examples
    - argument("name")                   → required single value
    - argument("age", required=False)    → optional single value
    """
    return Argument(name, required, "value", descr)


def spread(name, /, *, required=False, descr=Unset):
    """
    Build a spread argument: every positional value from its position onward,
    as a list. Spread arguments are optional unless said otherwise.
    """
    return Argument(name, required, "spread", descr)


class flags:
    """
    Flag builders, one per flag type.

    Example
    - flags.string("env", alias="e", descr="Environment to run in")
    - flags.array("fragment", alias="f")
    """

    def __new__(cls, *args, **kwargs):
        raise TypeError("flags is a namespace and cannot be instantiated")

    @staticmethod
    def boolean(name, /, *, alias=Unset, descr=Unset):
        return Flag(name, "boolean", alias, descr)

    @staticmethod
    def string(name, /, *, alias=Unset, descr=Unset):
        return Flag(name, "string", alias, descr)

    @staticmethod
    def number(name, /, *, alias=Unset, descr=Unset):
        return Flag(name, "number", alias, descr)

    @staticmethod
    def array(name, /, *, alias=Unset, descr=Unset):
        return Flag(name, "array", alias, descr)


__all__ = (
    # Classes (descriptors)
    "Argument",
    "Flag",

    # Builders
    "argument",
    "spread",
    "flags",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
