"""
Commandeer option parser.

Turns an argv-like list of tokens into a plain parse result:

    {"_": ["positional", ...], "flagname": value, "alias": value, ...}

Rules
- "--" ends flag parsing; everything after it is positional. A lone "-" is positional.
- "--name=value" and "--name value" are both accepted; a value token is never
  taken when it looks like a flag itself, except a negative number ("--n -5")
  after a number flag.
- "-abc" sets the boolean aliases a, b and c; a non-boolean alias inside such a
  cluster takes the rest of the cluster (or the next token) as its value.
  "-v=false" gives a boolean alias an inline value, like "--verbose=false".
- "--no-name" sets a boolean (or unknown) flag to False.
- Values are converted by flag type:
  • boolean → True, or False for an inline "false"/"0"
  • string  → the value, "" when none followed
  • number  → int when integral, float otherwise (InvalidFlagValueError if neither)
  • array   → list of values accumulated in order
- Unknown flags are kept: the next non-flag token is their value, else True.
- Values are stored under the flag name and mirrored under its alias.
- Flags that do not appear in the tokens do not appear in the result.
"""
from collections import deque

from .arguments import Flag
from .faults import InvalidFlagValueError, FaultCode, getdoc
from .utils import Unset


def isflag(token, /):
    """
    Tell whether a command-line token is written as a flag.

    The command name always occupies the first position, so the kernel uses
    this to decide between the command path and the flag-only path.
    """
    return isinstance(token, str) and token.startswith("-")


class Parser:
    """
    Parse tokens against a set of known flags.

    Parameters
    - flags: iterable of Flag (typically the kernel's global flags).

    A command type given to parse() adds its own flags; on a name or alias
    clash the command's flag wins.
    """

    def __init__(self, flags=(), /):
        self._flags = {}
        for flag in flags:
            if not isinstance(flag, Flag):
                raise TypeError("Parser() flags must be Flag descriptors")
            self._flags[flag.name] = flag

    def _lookup(self, command):
        known = dict(self._flags)
        if command is not None:
            known.update((flag.name, flag) for flag in command.flags)

        aliases = {}
        for layer in (self._flags.values(), () if command is None else command.flags):
            for flag in layer:
                if flag.alias is not None and known.get(flag.name) is flag:
                    aliases[flag.alias] = flag
        # aliases never shadow a real flag name
        return aliases | {flag.name: flag for flag in known.values()}

    def parse(self, argv, /, command=None):
        """
        Parse `argv` and return the result mapping (see module docs).
        """
        lookup = self._lookup(command)
        result = {"_": []}
        tokens = deque(argv)

        while tokens:
            token = tokens.popleft()

            if token == "--":
                result["_"].extend(tokens)
                break

            if token == "-" or not isflag(token):
                result["_"].append(token)
                continue

            if token.startswith("--"):
                name, equals, value = token[2:].partition("=")
                self._assign(result, lookup, name, value if equals else Unset, tokens, token=token)
                continue

            # short cluster: -abc, -n5, -e=prod
            cluster = token[1:]
            for index, letter in enumerate(cluster):
                if letter == "=":
                    break
                rest = cluster[index + 1:]
                flag = lookup.get(letter)
                if rest and flag is not None and (flag.type != "boolean" or rest.startswith("=")):
                    self._assign(result, lookup, letter, rest.removeprefix("="), tokens, token=token)
                    break
                self._assign(result, lookup, letter, Unset, tokens if not rest else deque(), token=token)

        return result

    def _assign(self, result, lookup, name, value, tokens, *, token):
        flag = lookup.get(name)

        if flag is None and name.startswith("no-") and value is Unset:
            negated = lookup.get(name[3:])
            if negated is None or negated.type == "boolean":
                self._store(result, negated, name[3:], False)
                return

        if flag is None:
            if value is Unset:
                value = tokens.popleft() if tokens and not isflag(tokens[0]) else True
            self._store(result, None, name, value)
            return

        match flag.type:
            case "boolean":
                self._store(result, flag, name, True if value is Unset else value.lower() not in ("false", "0"))
            case "string":
                self._store(result, flag, name, self._take(value, tokens, ""))
            case "number":
                if value is Unset and tokens and self._numeric(tokens[0]):
                    value = tokens.popleft()
                raw = self._take(value, tokens, Unset)
                self._store(result, flag, name, self._number(flag, raw, token))
            case "array":
                values = result.setdefault(flag.name, [])
                if flag.alias is not None:
                    result[flag.alias] = values
                if (raw := self._take(value, tokens, "")) != "":
                    values.append(raw)

    @staticmethod
    def _take(value, tokens, default):
        if value is not Unset:
            return value
        if tokens and not isflag(tokens[0]):
            return tokens.popleft()
        return default

    @staticmethod
    def _numeric(token):
        try:
            float(token)
        except ValueError:
            return False
        return True

    @staticmethod
    def _number(flag, raw, token):
        if raw is not Unset:
            for convert in (int, float):
                try:
                    return convert(raw)
                except ValueError:
                    continue
        raise InvalidFlagValueError(
            "flag %r expects a number but got %s" % (token, "nothing" if raw is Unset else repr(raw)),
            title="invalid flag value",
            code=FaultCode.INVALID_FLAG_VALUE,
            input=flag.name,
            hint="pass a numeric value (for example: --%s=10)" % flag.name,
            docs=getdoc(FaultCode.INVALID_FLAG_VALUE),
        )

    @staticmethod
    def _store(result, flag, name, value):
        if flag is None:
            result[name] = value
            return
        result.update(dict.fromkeys(flag.names, value))


def parse(argv, /, flags=(), command=None):
    """
    Convenience form of Parser(flags).parse(argv, command).
    """
    return Parser(flags).parse(argv, command)


__all__ = (
    "Parser",
    "parse",
    "isflag",
)
