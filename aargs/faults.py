"""
aargs faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- AargsException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Token-first messages: every message quotes the offending token or name
  (“missing value after '--flag'”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The tokenizer, schema and binder raise these faults directly (fail fast).
- invoke() catches them and calls trigger(fault, **ctx): in non-shell mode the
  exception is re-raised; in shell mode it is rendered via rich and the process exits.
"""
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
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - tokens (1111x)
      • MISSING_VALUE, UNEXPECTED_BOOLEAN_ASSIGNMENT, UNEXPECTED_NEGATION_VALUE
    - positionals (1112x)
      • INSUFFICIENT_POSITIONALS, UNEXPECTED_EPILOGUE
    - binding/access (1113x)
      • ALREADY_BOUND, UNKNOWN_KEY
    - schema (1114x)
      • INVALID_SCHEMA

    normalize() lets the host remap codes to custom labels while keeping code-stability.
    """
    # --- token errors (11xxx) ---
    MISSING_VALUE                 = 11111
    UNEXPECTED_BOOLEAN_ASSIGNMENT = 11112
    UNEXPECTED_NEGATION_VALUE     = 11113

    # --- positional errors (11xxx) ---
    INSUFFICIENT_POSITIONALS      = 11121
    UNEXPECTED_EPILOGUE           = 11122

    # --- binding errors (11xxx) ---
    ALREADY_BOUND                 = 11131
    UNKNOWN_KEY                   = 11132

    # --- schema errors (11xxx) ---
    INVALID_SCHEMA                = 11141

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class AargsException(Exception):
    """
    base class of every aargs fault.

    - message: the one-sentence body (lowercased, quotes the offending token/name).
    - options: read-only context (title, code, hint, docs, token, names, ...) plus
      runtime rendering switches merged in by trigger() (shell, fancy, colorful, prog).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

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

        prog = text(getattr(main, "__prog__", self.options.get("prog", "aargs")), styler("prog-name"))
        code = self.options.get("code")

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint", ""), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class MissingValueError(AargsException): ...
class UnexpectedBooleanAssignmentError(AargsException): ...
class UnexpectedNegationValueError(AargsException): ...
class InsufficientPositionalArgumentsError(AargsException): ...
class UnexpectedEpilogueError(AargsException): ...
class AlreadyBoundError(AargsException): ...
class UnknownKeyAccessError(AargsException): ...
class InvalidSchemaError(AargsException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see AargsException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, the exception is raised.

    typical options
    - prog, shell, fancy, colorful, deferred, plus any context the reporter may
      want to show (token, names, ...).
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

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "AargsException",
    "MissingValueError",
    "UnexpectedBooleanAssignmentError",
    "UnexpectedNegationValueError",
    "InsufficientPositionalArgumentsError",
    "UnexpectedEpilogueError",
    "AlreadyBoundError",
    "UnknownKeyAccessError",
    "InvalidSchemaError",
    "FaultCode",
    "trigger",
    "getdoc",
)
