"""
aargs binder: distribute a parse result into the named slots of a schema.

What this module provides
- Aargs: the caller-facing object. It owns a Schema, parses call-style
  arguments or an argv exactly once, and exposes the bound values through an
  explicit accessor (get / [] with an optional '?' truthiness suffix) and
  generated help.
- invoke(aargs, callback, argv): run a callback with the process arguments,
  rendering faults the way a shell user expects.

Binding steps
1. required prologue names not already given as flags must be covered by the
   prologue tokens (InsufficientPositionalArgumentsError otherwise);
2. prologue tokens fill the prologue slots still open (or the splat key);
3. leftovers are put in front of the epilogue tokens;
4. that list fills the epilogue slots still open (or the splat key); whatever
   remains without a splat key is an UnexpectedEpilogueError;
5. the instance is marked valid; binding again is an AlreadyBoundError.

Quick start
    from aargs import Aargs

    aargs = Aargs(prologue=["mode"], epilogue="etc")
    aargs.parse("build", "extra", "--read-all-about-it", "--", "more")
    aargs["mode"]                   # "build"
    aargs["read_all_about_it?"]     # True
    aargs["etc"]                    # ["extra", "more"]
"""
import os.path
import shlex
import sys
import threading
from collections.abc import Iterable
from types import MappingProxyType

from .argv import to_argv
from .faults import *
from .faults import console
from .help import HelpFormatter
from .schema import Schema
from .tokenizer import ParseResult, Tokenizer
from .utils import Unset, coalesce, mirror


def _detach(value):
    """
    copy of a bound list, so callers cannot change the bound state through it.
    """
    return list(value) if isinstance(value, list) else value


class Aargs:
    """
    Schema-bound argument set (parse once, then read).

    Parameters
    - schema: Schema (positional-only, optional). When omitted, the keyword
      options below build one: prologue, flag_config, flag_configs, epilogue, aliases.
    - program: name shown in the usage line (defaults to the running script).
    """
    schema = mirror("schema")
    program = mirror("program")

    def __init__(self, schema=Unset, /, *, program=Unset, **options):
        if schema is Unset:
            schema = Schema(**options)
        elif options:
            raise TypeError("Aargs() takes either a schema or schema options, not both")
        if not isinstance(schema, Schema):
            raise TypeError("Aargs() argument must be a schema")
        self._schema = schema
        self._program = coalesce(program, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "aargs")
        self._values = {}
        self._valid = False
        self._lock = threading.RLock()

    @property
    def valid(self):
        return self._valid

    @property
    def values(self):
        return MappingProxyType({key: _detach(value) for key, value in self._values.items()})

    def parse(self, *args, **kwargs):
        """
        Tokenize call-style arguments (see to_argv) against the schema and bind them.

        Returns self, so `Aargs(...).parse(*sys.argv[1:])` reads naturally.
        """
        with self._lock:
            self._check_unbound()
            result = Tokenizer(self._schema).parse(to_argv(*args, **kwargs))
            return self.bind(result)

    def bind(self, result, /):
        """
        Bind an already tokenized ParseResult (or None for “no result”).
        """
        if result is None:
            result = ParseResult()
        if not isinstance(result, ParseResult):
            raise TypeError("bind() argument must be a parse result")

        with self._lock:
            self._check_unbound()
            values = dict(result.flags)
            consumed = self._apply_prologue(values, result.prologue)
            self._apply_epilogue(values, result.prologue[consumed:] + result.epilogue)
            self._values = values
            self._valid = True
        return self

    def _check_unbound(self):
        if self._valid:
            raise AlreadyBoundError(
                "arguments are frozen once parsed",
                title="already parsed",
                code=FaultCode.ALREADY_BOUND,
                hint="create a new Aargs instance to parse another argv",
                docs=getdoc(FaultCode.ALREADY_BOUND),
            )

    def _missing(self, names):
        formatter = HelpFormatter(self._schema, self._program)
        rendered = ", ".join(map(formatter.render, names))
        raise InsufficientPositionalArgumentsError(
            "missing positional arguments: %s" % rendered,
            title="missing positional arguments",
            code=FaultCode.INSUFFICIENT_POSITIONALS,
            hint="pass %s positionally or as --name=VALUE" % rendered,
            names=tuple(names),
            docs=getdoc(FaultCode.INSUFFICIENT_POSITIONALS),
        )

    def _apply_prologue(self, values, prologue):
        """
        Fill prologue slots; return how many prologue tokens were consumed.
        """
        schema = self._schema
        if schema.prologue_key:
            values[schema.prologue_key] = list(prologue)
            return len(prologue)

        # names given as flags no longer need a positional token
        needed = [name for name in schema.required_prologue if name not in values]
        if len(needed) > len(prologue):
            self._missing(needed[len(prologue):])

        expected = [name for name in (*schema.required_prologue, *schema.optional_prologue) if name not in values]
        consumed = dict(zip(expected, prologue))
        values.update(consumed)
        return len(consumed)

    def _apply_epilogue(self, values, epilogue):
        schema = self._schema
        if schema.epilogue_key:
            values[schema.epilogue_key] = list(epilogue)
            return

        expected = [name for name in (*schema.required_epilogue, *schema.optional_epilogue) if name not in values]
        consumed = dict(zip(expected, epilogue))
        if missing := [name for name in expected[len(consumed):] if schema.required(name)]:
            self._missing(missing)
        values.update(consumed)

        if remainder := epilogue[len(consumed):]:
            raise UnexpectedEpilogueError(
                "unexpected epilogue: %r" % (remainder,),
                title="unexpected epilogue",
                code=FaultCode.UNEXPECTED_EPILOGUE,
                hint="remove the extra arguments or declare an epilogue to collect them",
                epilogue=tuple(remainder),
                docs=getdoc(FaultCode.UNEXPECTED_EPILOGUE),
            )

    def get(self, name, /):
        """
        Read a bound value by name.

        - "name"  → the raw value (None when the slot was left empty).
        - "name?" → whether it is set (False only for absent, None or --no-name;
          "" and [] count as set).

        Names are canonicalized like flags ("dry-run" == "dry_run") and resolved
        through the aliases. Unknown names raise UnknownKeyAccessError.
        """
        if not isinstance(name, str):
            raise TypeError("get() argument must be a string")
        boolean = name.endswith("?")
        key = self._schema.canonical(name[:-1] if boolean else name)
        if key not in self._values and key not in self._schema.api_keys:
            raise UnknownKeyAccessError(
                "unknown argument %r" % name,
                title="unknown argument",
                code=FaultCode.UNKNOWN_KEY,
                hint="known arguments: %s" % (", ".join(sorted({*self._values, *self._schema.api_keys})) or "none"),
                name=name,
                docs=getdoc(FaultCode.UNKNOWN_KEY),
            )
        value = self._values.get(key)
        if boolean:
            return value is not None and value is not False
        return _detach(value)

    __getitem__ = get

    def __contains__(self, name):
        return isinstance(name, str) and self._schema.canonical(name) in self._values

    def help(self):
        """
        Usage line, followed by the flag table when any flag carries help text.
        """
        return HelpFormatter(self._schema, self._program).lines()

    def __repr__(self):
        return "aargs(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "program", self._program
        yield "valid", self._valid
        yield "values", self._values


def invoke(aargs, callback, argv=Unset, /, *, shell=True, fancy=False, colorful=True):
    """
    Parse the process arguments into `aargs`, then call `callback(aargs)`.

    This is the explicit way to make a script “run itself”:

        if __name__ == "__main__":
            invoke(Aargs(prologue=["mode"]), main)

    Parameters
    - argv:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-tokenized sequence.
    - shell: when True, faults are printed with rich (followed by the help
      lines) and the process exits with status 1; when False they are raised.

    Returns whatever the callback returns.
    """
    if not isinstance(aargs, Aargs):
        raise TypeError("invoke() first argument must be an Aargs instance")
    if not callable(callback):
        raise TypeError("invoke() second argument must be callable")

    if argv is Unset:
        tokens = sys.argv[1:]
    elif isinstance(argv, str):
        tokens = shlex.split(argv)
    elif isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() argument must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    try:
        aargs.bind(Tokenizer(aargs.schema).parse(tokens))
    except AargsException as fault:
        if shell:
            console.print(HelpFormatter(aargs.schema, aargs.program), style="dim")
        trigger(fault, shell=shell, fancy=fancy, colorful=colorful, prog=aargs.program)
        return None
    return callback(aargs)


__all__ = (
    "Aargs",
    "invoke",
)
