"""
aargs argv builder: Python call style → flat token list.

Rules
- Name("easy")          → "--easy"           (a bare name is a boolean switch)
- Name("no_easy")       → "--no-easy"
- "raw"                 → "raw"              (plain strings pass through)
- {"this": "is"}        → "--this=is"        (mappings expand in place)
- easy=True             → "--easy"           (keywords are appended last)
- easy=False            → "--no-easy"
- tag=["a", "b"]        → "--tag=a", "--tag=b"
- count=3               → "--count=3"
- name=None             → "--name="          (an empty value)

Mappings as positional arguments are how an epilogue is spelled in call style:

    >>> to_argv("look", "how", Name("easy"), {"this": "is"}, "to", "use!")
    ['look', 'how', '--easy', '--this=is', 'to', 'use!']
"""
from collections.abc import Mapping

from .utils import kebab


class Name(str):
    """
    A flag name given positionally (the call-style spelling of a bare switch).

    Plain strings are literals; wrap a string in Name to turn it into "--name".
    """
    __slots__ = ()

    def __repr__(self):
        return "Name(%s)" % str.__repr__(self)


def _flagify_pair(name, value):
    flag = kebab(str(name))
    if value is True:
        return ["--%s" % flag]
    if value is False:
        return ["--no-%s" % flag]
    if value is None:
        return ["--%s=" % flag]
    if isinstance(value, (list, tuple)):
        return ["--%s=%s" % (flag, "" if item is None else item) for item in value]
    return ["--%s=%s" % (flag, value)]


def _flagify(argument):
    if isinstance(argument, Name):
        return ["--%s" % kebab(argument)]
    if isinstance(argument, Mapping):
        return [token for name, value in argument.items() for token in _flagify_pair(name, value)]
    return [argument if isinstance(argument, str) else str(argument)]


def to_argv(*args, **kwargs):
    """
    Convert call-style arguments into an equivalent argv token list.

    Positional arguments keep their order; keyword arguments are appended after
    them in declaration order. Tokenizing the result gives the same ParseResult
    as tokenizing the equivalent hand-written argv.
    """
    argv = [token for argument in args for token in _flagify(argument)]
    for name, value in kwargs.items():
        argv.extend(_flagify_pair(name, value))
    return argv


__all__ = (
    "Name",
    "to_argv",
)
