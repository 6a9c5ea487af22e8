"""
aargs tokenizer: classify a flat argv into prologue, flags and epilogue.

Token grammar (checked in this order until literal-only mode starts)
- "--"                            → separator: every later token is epilogue, verbatim.
- "-x"   (one letter or digit)    → short switch, resolved through the schema aliases.
- "--[no-]name[=value]"           → long flag (negated, bare, or with an attached value).
- anything else                   → literal.

Flag values (as stored in ParseResult.flags)
- True          the flag was named once
- int (≥ 2)     the flag was named that many times (counter)
- False         the flag was negated (--no-name), whatever came before
- str           one value (--name=value, or --name value)
- list[str]     repeated values, in order

Literals
- while no flag has been seen, literals are prologue;
- a literal right after a bare non-boolean long flag becomes that flag's value;
- the first other literal after a flag switches to literal-only mode and starts
  the epilogue.

Values after a bare flag are optional, except when the flag already holds a value:
naming it again bare demands a new one, and any flag, separator or end of input in
its place is a MissingValueError.
"""
import re

from .argv import to_argv
from .faults import (
    MissingValueError,
    UnexpectedBooleanAssignmentError,
    UnexpectedNegationValueError,
    FaultCode,
    getdoc,
)
from .schema import Schema
from .utils import Unset, coalesce, kebab


class ParseResult:
    """
    Tokenizer output: leading positionals, flag values, trailing positionals.

    Containers are always materialized; the result is falsy when all three are
    empty, which is the “no result” case.
    """
    __slots__ = ("prologue", "flags", "epilogue")

    def __init__(self, prologue=(), flags=(), epilogue=()):
        self.prologue = list(prologue)
        self.flags = dict(flags)
        self.epilogue = list(epilogue)

    def __bool__(self):
        return bool(self.prologue or self.flags or self.epilogue)

    def __eq__(self, other):
        if not isinstance(other, ParseResult):
            return NotImplemented
        return (self.prologue, self.flags, self.epilogue) == (other.prologue, other.flags, other.epilogue)

    __hash__ = None

    def as_dict(self):
        """
        compact mapping omitting empty components ({} when there is no result).
        """
        return {name: value for name in self.__slots__ if (value := getattr(self, name))}

    def __repr__(self):
        return "parse-result(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "prologue", self.prologue
        yield "flags", self.flags
        yield "epilogue", self.epilogue


class Tokenizer:
    """
    Single-pass argv scanner.

    The schema is only read: it supplies alias resolution and tells which flags
    are declared boolean. A tokenizer may be reused; every parse() starts fresh.
    """

    def __init__(self, schema=Unset, /):
        self.schema = coalesce(schema, Schema())
        if not isinstance(self.schema, Schema):
            raise TypeError("Tokenizer() argument must be a schema")
        self._reset()

    def _reset(self):
        self._literal_only = False
        self._prologue = []
        self._flags = {}
        self._epilogue = []
        self._awaiting = None  # flag that may take the next literal as its value
        self._pending = None  # token of a flag that must take the next literal

    def parse(self, argv, /):
        """
        Tokenize `argv` (an iterable of strings) into a ParseResult.
        """
        self._reset()
        for token in argv:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be an iterable of strings")
            self._parse_token(token)
        self._check_pending()
        return ParseResult(self._prologue, self._flags, self._epilogue)

    def _check_pending(self):
        if self._pending is not None:
            raise MissingValueError(
                "missing value after %r" % self._pending,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass a value right after it (for example: %s VALUE)" % self._pending,
                token=self._pending,
                docs=getdoc(FaultCode.MISSING_VALUE),
            )

    def _resolve(self, name):
        self._check_pending()
        return self.schema.canonical(name)

    def _parse_token(self, token):
        if self._literal_only:
            self._epilogue.append(token)
            return

        if token == "--":
            self._check_pending()
            self._literal_only = True
            self._awaiting = None
        elif match := re.fullmatch(r"-([A-Za-z0-9])", token):
            self._parse_short(token, self._resolve(match[1]))
        elif match := re.fullmatch(r"--(?P<no>no-)?(?P<name>[A-Za-z0-9-]+)(?:=(?P<value>.*))?", token, re.DOTALL):
            self._parse_long(token, self._resolve(match["name"]), match["value"], bool(match["no"]))
        else:
            self._parse_literal(token)

    def _toggle(self, token, name, *, negated=False):
        """
        counter rule: absent → True → 2 → 3 ...; negated values only reset with `negated`.
        """
        value = self._flags.get(name, Unset)
        if value is Unset or (negated and value is False):
            self._flags[name] = True
        elif value is True:
            self._flags[name] = 2
        elif isinstance(value, int) and value is not False:
            self._flags[name] = value + 1
        else:
            raise UnexpectedBooleanAssignmentError(
                "unexpected boolean %r after set to value %r" % (token, value),
                title="unexpected boolean",
                code=FaultCode.UNEXPECTED_BOOLEAN_ASSIGNMENT,
                hint="use --%s=VALUE to add another value instead" % kebab(name),
                token=token,
                value=value,
                docs=getdoc(FaultCode.UNEXPECTED_BOOLEAN_ASSIGNMENT),
            )

    def _accumulate(self, name, value):
        """
        value rule: placeholder (absent/True/False/counter) → str → [str, str] → [..., str].
        """
        current = self._flags.get(name, Unset)
        if isinstance(current, list):
            current.append(value)
        elif isinstance(current, str):
            self._flags[name] = [current, value]
        else:
            self._flags[name] = value

    def _parse_short(self, token, name):
        # short switches never take a value
        self._toggle(token, name)
        self._awaiting = None

    def _parse_long(self, token, name, value, negated):
        boolean = self.schema.boolean(name)
        if negated:
            if value is not None:
                raise UnexpectedNegationValueError(
                    "unexpected value specified with no- prefix: %r" % token,
                    title="unexpected negation value",
                    code=FaultCode.UNEXPECTED_NEGATION_VALUE,
                    hint="drop the value (--no-%s) or the no- prefix (--%s=%s)" % (kebab(name), kebab(name), value),
                    token=token,
                    docs=getdoc(FaultCode.UNEXPECTED_NEGATION_VALUE),
                )
            self._flags[name] = False
            self._awaiting = None
        elif value is not None:
            if boolean:
                raise UnexpectedBooleanAssignmentError(
                    "unexpected value for --[no-]%s: %r" % (kebab(name), value),
                    title="unexpected value",
                    code=FaultCode.UNEXPECTED_BOOLEAN_ASSIGNMENT,
                    hint="%r is a switch; use --%s or --no-%s" % (kebab(name), kebab(name), kebab(name)),
                    token=token,
                    value=value,
                    docs=getdoc(FaultCode.UNEXPECTED_BOOLEAN_ASSIGNMENT),
                )
            self._accumulate(name, value)
            self._awaiting = None
        elif boolean:
            self._toggle(token, name, negated=True)
            self._awaiting = None
        else:
            current = self._flags.get(name, Unset)
            if isinstance(current, (str, list)):
                self._pending = token
            else:
                self._toggle(token, name, negated=True)
            self._awaiting = name

    def _parse_literal(self, token):
        if self._awaiting is not None:
            self._accumulate(self._awaiting, token)
            self._awaiting = None
            self._pending = None
        elif not self._flags:
            self._prologue.append(token)
        else:
            self._literal_only = True
            self._epilogue.append(token)


def tokenize(*args, schema=Unset, **kwargs):
    """
    Build an argv from call-style arguments (see to_argv) and tokenize it.

        >>> tokenize("look", "how", "--easy", "--this=is", "to", "use!").as_dict()
        {'prologue': ['look', 'how'], 'flags': {'easy': True, 'this': 'is'}, 'epilogue': ['to', 'use!']}
    """
    return Tokenizer(schema).parse(to_argv(*args, **kwargs))


__all__ = (
    "ParseResult",
    "Tokenizer",
    "tokenize",
)
