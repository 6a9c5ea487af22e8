"""
aargs help: usage line and flag table generated from a schema.

Rendering of one name
- required positional   → MODE
- optional positional   → [MODE]
- splat key             → [REST ... [REST]]
- undeclared flags      → [aargs]
- boolean flag          → --[no-]verbose
- any other flag        → --output=VALUE

Layout
    Usage: tool MODE --src=VALUE --[no-]force
      --src=VALUE     : file to operate on
      --[no-]force    : (switch)

The table is only produced when at least one displayed name carries explicit
help text; otherwise lines() is just the usage line.
"""
from rich.console import Group
from rich.table import Table
from rich.text import Text

from .schema import ANY_KEY, Schema
from .utils import kebab


class HelpFormatter:
    def __init__(self, schema, program, /):
        if not isinstance(schema, Schema):
            raise TypeError("HelpFormatter() first argument must be a schema")
        self.schema = schema
        self.program = program

    def names(self):
        """
        display order: prologue slots, flags not already listed, epilogue slots.
        """
        schema = self.schema
        prologue = [*schema.required_prologue, *schema.optional_prologue]
        if schema.prologue_key:
            prologue.append(schema.prologue_key)
        epilogue = [*schema.required_epilogue, *schema.optional_epilogue]
        if schema.epilogue_key:
            epilogue.append(schema.epilogue_key)
        flags = list(schema.flag_configs)
        if schema.flag_config:
            flags.append(ANY_KEY)
        return prologue + [name for name in flags if name not in prologue] + epilogue

    def render(self, name, /):
        schema = self.schema
        display = kebab(name)
        if schema.required(name):
            return display.upper()
        if schema.optional(name):
            return "[%s]" % display.upper()
        if name == ANY_KEY:
            return "[aargs]"
        if schema.splat(name):
            return "[%s ... [%s]]" % (display.upper(), display.upper())
        if schema.boolean(name):
            return "--[no-]%s" % display
        return "--%s=VALUE" % display

    def usage(self):
        return "Usage: %s %s" % (self.program, " ".join(map(self.render, self.names())))

    def rows(self):
        """
        (rendered name, description) for every displayed name with a config, plus
        whether any description is explicit help text.
        """
        rows = []
        explicit = False
        for name in self.names():
            if not (config := self.schema.config(name)):
                continue
            if config.help:
                explicit = True
                description = config.help
            elif config.type == "boolean":
                description = "(switch)"
            else:
                description = "(%s)" % config.type
            rows.append((self.render(name), description))
        return rows, explicit

    def lines(self):
        rows, explicit = self.rows()
        if not rows or not explicit:
            return [self.usage()]
        width = max(len(flag) for flag, _ in rows)
        return [self.usage()] + ["  %-*s : %s" % (width, flag, description) for flag, description in rows]

    def __str__(self):
        return "\n".join(self.lines())

    def __rich__(self):
        main = __import__("__main__")
        styles = {
            "usage": "bold #E6E6F0",
            "flag": "bold #00E5FF",
            "descr": "#C8C8D0",
        } | getattr(main, "__styles__", {})

        usage = Text(self.usage(), styles.get("usage", ""))
        rows, explicit = self.rows()
        if not rows or not explicit:
            return usage

        table = Table.grid(padding=(0, 2))
        table.add_column(style=styles.get("flag", ""), no_wrap=True)
        table.add_column(style=styles.get("descr", ""))
        for flag, description in rows:
            table.add_row(Text(flag), Text(description))
        return Group(usage, table)


__all__ = (
    "HelpFormatter",
)
