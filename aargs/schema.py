"""
aargs schema: the immutable declaration a parse result is bound against.

Overview
- Positional slots
  • prologue: names consumed from the leading positional tokens.
  • epilogue: names consumed from trailing tokens (after flags or `--`).
  Either side is one of:
    True            → collect every token into a splat key ("prologue"/"epilogue")
    False           → disabled
    "name"          → collect every token into the splat key "name"
    ["a", "b?"]     → named slots; a trailing '?' marks an optional slot
- Flags
  • flag_configs: name → config, where config is True, a help string,
    a {"type": ..., "help": ...} mapping, or a FlagConfig.
  • flag_config: the config applied to flags that were not declared.
  • aliases: alternate name → canonical name (e.g. {"f": "force"}).

Default resolution (Unset means “not specified”)
- prologue    → disabled when epilogue or flag_configs is given, else True.
- flag_config → disabled when flag_configs is given, else True.
- epilogue    → disabled when prologue or flag_configs is given, else True.
So Schema() is fully permissive, and declaring anything narrows the rest.

Names are stored in canonical (underscore) form: "read-all" and "read_all" are
the same slot.
"""
import re
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .faults import InvalidSchemaError, FaultCode, getdoc
from .utils import Unset, mirror, underscore

ANY_KEY = "any_key"
"""help row standing for every undeclared flag when a default flag config exists."""


class FlagConfig(NamedTuple):
    type: str = "anything"
    help: str | None = None


def _explicit(value):
    return value is not Unset and value is not None and value is not False


def _resolve_config(name, value):
    """
    normalize a flag config shorthand into a FlagConfig (or None for “no config”).
    """
    if value is None or value is False:
        return None
    if value is True:
        return FlagConfig()
    if isinstance(value, FlagConfig):
        return value
    if isinstance(value, str):
        return FlagConfig(help=value)
    if isinstance(value, Mapping):
        try:
            return FlagConfig(**value)
        except TypeError:
            pass
    raise InvalidSchemaError(
        "invalid config %r for flag %r" % (value, name),
        title="invalid schema",
        code=FaultCode.INVALID_SCHEMA,
        hint="use True, a help string, or a mapping with 'type' and 'help' keys",
        name=name,
        docs=getdoc(FaultCode.INVALID_SCHEMA),
    )


def _resolve_positionals(value, default, side):
    """
    turn a prologue/epilogue declaration into (required, optional, splat key).
    """
    if value is True:
        return [], [], default
    if value is False or value is None:
        return [], [], None
    if isinstance(value, str):
        if not re.fullmatch(r"[\w-]+", value):
            raise InvalidSchemaError(
                "invalid %s name %r" % (side, value),
                title="invalid schema",
                code=FaultCode.INVALID_SCHEMA,
                hint="names may only contain letters, digits, '-' and '_'",
                name=value,
                docs=getdoc(FaultCode.INVALID_SCHEMA),
            )
        return [], [], underscore(value)
    if not isinstance(value, Iterable):
        raise InvalidSchemaError(
            "%s must be a boolean, a name or a list of names, not %s" % (side, type(value).__name__),
            title="invalid schema",
            code=FaultCode.INVALID_SCHEMA,
            hint="for example: %s=['mode', 'file?']" % side,
            docs=getdoc(FaultCode.INVALID_SCHEMA),
        )

    required = []
    optional = []
    for entry in value:
        match = re.fullmatch(r"(?P<key>[\w-]+)(?P<optional>\?)?", entry) if isinstance(entry, str) else None
        if not match:
            raise InvalidSchemaError(
                "invalid %s name %r" % (side, entry),
                title="invalid schema",
                code=FaultCode.INVALID_SCHEMA,
                hint="names may only contain letters, digits, '-' and '_', optionally followed by '?'",
                name=entry,
                docs=getdoc(FaultCode.INVALID_SCHEMA),
            )
        key = underscore(match["key"])
        if match["optional"]:
            optional.append(key)
        elif optional:
            raise InvalidSchemaError(
                "required %s %r cannot follow optional %s %r" % (side, key, side, optional[-1]),
                title="invalid schema",
                code=FaultCode.INVALID_SCHEMA,
                hint="move %r before the optional names" % key,
                name=key,
                docs=getdoc(FaultCode.INVALID_SCHEMA),
            )
        else:
            required.append(key)
    return required, optional, None


class Schema:
    """
    Immutable positional/flag declaration.

    Once constructed every attribute is read-only and every container is exposed
    as a read-only view, so a single Schema can be shared by any number of
    tokenizers and binders.
    """
    __introspectable__ = (
        "required_prologue",
        "optional_prologue",
        "prologue_key",
        "flag_config",
        "flag_configs",
        "aliases",
        "required_epilogue",
        "optional_epilogue",
        "epilogue_key",
    )

    required_prologue = mirror("required_prologue")
    optional_prologue = mirror("optional_prologue")
    prologue_key = mirror("prologue_key")
    flag_config = mirror("flag_config")
    flag_configs = mirror("flag_configs")
    aliases = mirror("aliases")
    required_epilogue = mirror("required_epilogue")
    optional_epilogue = mirror("optional_epilogue")
    epilogue_key = mirror("epilogue_key")
    api_keys = mirror("api_keys")

    def __init__(
            self,
            *,
            prologue=Unset,
            flag_config=Unset,
            flag_configs=Unset,
            epilogue=Unset,
            aliases=Unset,
    ):
        prologue_set = _explicit(prologue)
        flag_configs_set = _explicit(flag_configs)
        epilogue_set = _explicit(epilogue)

        if prologue is Unset:
            prologue = not (epilogue_set or flag_configs_set)
        if flag_config is Unset:
            flag_config = not flag_configs_set
        if epilogue is Unset:
            epilogue = not (prologue_set or flag_configs_set)

        required_prologue, optional_prologue, prologue_key = _resolve_positionals(prologue, "prologue", "prologue")
        required_epilogue, optional_epilogue, epilogue_key = _resolve_positionals(epilogue, "epilogue", "epilogue")

        if flag_configs is Unset or flag_configs is None or flag_configs is False:
            flag_configs = {}
        if not isinstance(flag_configs, Mapping):
            raise InvalidSchemaError(
                "flag_configs must be a mapping, not %s" % type(flag_configs).__name__,
                title="invalid schema",
                code=FaultCode.INVALID_SCHEMA,
                hint="for example: flag_configs={'verbose': {'type': 'boolean'}}",
                docs=getdoc(FaultCode.INVALID_SCHEMA),
            )
        configs = {}
        for name, config in flag_configs.items():
            if (config := _resolve_config(name, config)) is not None:
                configs[underscore(name)] = config

        if aliases is Unset or aliases is None:
            aliases = {}
        if not isinstance(aliases, Mapping):
            raise InvalidSchemaError(
                "aliases must be a mapping, not %s" % type(aliases).__name__,
                title="invalid schema",
                code=FaultCode.INVALID_SCHEMA,
                hint="for example: aliases={'f': 'force'}",
                docs=getdoc(FaultCode.INVALID_SCHEMA),
            )

        self._required_prologue = tuple(required_prologue)
        self._optional_prologue = tuple(optional_prologue)
        self._prologue_key = prologue_key
        self._flag_config = _resolve_config(ANY_KEY, flag_config)
        self._flag_configs = configs
        self._aliases = {underscore(alias): underscore(name) for alias, name in aliases.items()}
        self._required_epilogue = tuple(required_epilogue)
        self._optional_epilogue = tuple(optional_epilogue)
        self._epilogue_key = epilogue_key
        self._api_keys = frozenset(optional_prologue) | frozenset(optional_epilogue) | frozenset(configs)
        self._frozen = True

    def __setattr__(self, name, value, /):
        if getattr(self, "_frozen", False):
            raise AttributeError("schema is read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError("schema is read-only")

    def canonical(self, name, /):
        """
        canonical identifier for a raw flag name: fold to underscores, then apply aliases.
        """
        name = underscore(name)
        return self._aliases.get(name, name)

    def config(self, name, /):
        """
        the declared config of `name`, falling back to the config for undeclared flags.
        """
        return self._flag_configs.get(name, self._flag_config)

    def type(self, name, /):
        config = self.config(name)
        return config.type if config else None

    def boolean(self, name, /):
        return self.type(name) == "boolean"

    def required(self, name, /):
        return name in self._required_prologue or name in self._required_epilogue

    def optional(self, name, /):
        return name in self._optional_prologue or name in self._optional_epilogue

    def splat(self, name, /):
        return name is not None and name in (self._prologue_key, self._epilogue_key)

    def __repr__(self):
        return "schema(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)


__all__ = (
    "ANY_KEY",
    "FlagConfig",
    "Schema",
)
