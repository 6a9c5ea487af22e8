"""
Schema behavioral tests (default resolution, positional declarations, configs, immutability).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from aargs import ANY_KEY, FlagConfig, Schema, Unset
from aargs.faults import InvalidSchemaError, FaultCode


class TestDefaultResolution(TestCase):
    """Declaring anything narrows the rest."""

    def testEverythingPermissiveByDefault(self):
        schema = Schema()
        self.assertEqual(schema.prologue_key, "prologue")
        self.assertEqual(schema.epilogue_key, "epilogue")
        self.assertEqual(schema.flag_config, FlagConfig())

    def testPrologueDisablesEpilogue(self):
        schema = Schema(prologue=["mode"])
        self.assertEqual(schema.required_prologue, ("mode",))
        self.assertIsNone(schema.epilogue_key)
        self.assertEqual(schema.flag_config, FlagConfig())

    def testEpilogueDisablesPrologue(self):
        schema = Schema(epilogue="rest")
        self.assertIsNone(schema.prologue_key)
        self.assertEqual(schema.epilogue_key, "rest")

    def testFlagConfigsDisableEverythingElse(self):
        schema = Schema(flag_configs={"src": "file to operate on"})
        self.assertIsNone(schema.prologue_key)
        self.assertIsNone(schema.epilogue_key)
        self.assertIsNone(schema.flag_config)

    def testExplicitFalseDoesNotCountAsSet(self):
        schema = Schema(prologue=False)
        self.assertIsNone(schema.prologue_key)
        self.assertEqual(schema.epilogue_key, "epilogue")

    def testEmptyFlagConfigsCountAsSet(self):
        self.assertIsNone(Schema(flag_configs={}).flag_config)

    def testUnsetIsUnspecified(self):
        self.assertEqual(Schema(prologue=Unset).prologue_key, "prologue")


class TestPositionalDeclarations(TestCase):
    """Named, optional and splat slots."""

    def testOptionalMarker(self):
        schema = Schema(prologue=["mode", "file?"], epilogue=["target", "rest?"])
        self.assertEqual(schema.required_prologue, ("mode",))
        self.assertEqual(schema.optional_prologue, ("file",))
        self.assertEqual(schema.required_epilogue, ("target",))
        self.assertEqual(schema.optional_epilogue, ("rest",))
        self.assertTrue(schema.required("mode"))
        self.assertTrue(schema.optional("rest"))
        self.assertFalse(schema.splat("mode"))

    def testNamesAreCanonical(self):
        schema = Schema(prologue=["dry-run"])
        self.assertEqual(schema.required_prologue, ("dry_run",))

    def testRequiredAfterOptionalRejected(self):
        with self.assertRaises(InvalidSchemaError) as context:
            Schema(prologue=["file?", "mode"])
        self.assertEqual(context.exception.options["code"], FaultCode.INVALID_SCHEMA)
        with self.assertRaises(InvalidSchemaError):
            Schema(epilogue=["rest?", "target"])

    def testInvalidNameRejected(self):
        with self.assertRaises(InvalidSchemaError):
            Schema(prologue=["no spaces"])
        with self.assertRaises(InvalidSchemaError):
            Schema(prologue=[1])
        with self.assertRaises(InvalidSchemaError):
            Schema(epilogue="bad name")

    def testSplat(self):
        schema = Schema(prologue="files")
        self.assertTrue(schema.splat("files"))
        self.assertFalse(schema.splat(None))
        self.assertEqual(schema.required_prologue, ())


class TestFlagConfigs(TestCase):
    """Config shorthands, types and aliases."""

    def testShorthands(self):
        schema = Schema(flag_configs={
            "any": True,
            "src": "file to operate on",
            "verbose": {"type": "boolean"},
            "level": FlagConfig("number", "how loud"),
            "ignored": False,
        })
        self.assertEqual(schema.flag_configs["any"], FlagConfig())
        self.assertEqual(schema.flag_configs["src"], FlagConfig(help="file to operate on"))
        self.assertTrue(schema.boolean("verbose"))
        self.assertEqual(schema.type("level"), "number")
        self.assertNotIn("ignored", schema.flag_configs)

    def testInvalidConfigRejected(self):
        with self.assertRaises(InvalidSchemaError):
            Schema(flag_configs={"x": 3})
        with self.assertRaises(InvalidSchemaError):
            Schema(flag_configs={"x": {"kind": "boolean"}})
        with self.assertRaises(InvalidSchemaError):
            Schema(flag_configs=["x"])

    def testUndeclaredFallsBackToDefault(self):
        self.assertEqual(Schema().type("whatever"), "anything")
        self.assertIsNone(Schema(flag_configs={"x": True}).type("whatever"))
        self.assertTrue(Schema(flag_config={"type": "boolean"}).boolean("whatever"))

    def testAliasesAreCanonical(self):
        schema = Schema(aliases={"n": "dry-run"})
        self.assertEqual(schema.canonical("n"), "dry_run")
        self.assertEqual(schema.canonical("dry-run"), "dry_run")
        self.assertEqual(schema.canonical("other"), "other")

    def testApiKeys(self):
        schema = Schema(prologue=["mode", "file?"], epilogue=["rest?"], flag_configs={"src": True})
        self.assertEqual(schema.api_keys, {"file", "rest", "src"})

    def testAnyKeyConstant(self):
        self.assertEqual(ANY_KEY, "any_key")


class TestImmutability(TestCase):
    """A schema cannot be changed once built."""

    def testAttributesAreReadOnly(self):
        schema = Schema(prologue=["mode"])
        with self.assertRaises(AttributeError):
            schema.prologue_key = "x"
        with self.assertRaises(AttributeError):
            schema._required_prologue = ("x",)
        with self.assertRaises(AttributeError):
            del schema._aliases

    def testContainersAreReadOnly(self):
        schema = Schema(flag_configs={"src": True}, aliases={"s": "src"})
        with self.assertRaises(TypeError):
            schema.flag_configs["other"] = FlagConfig()
        with self.assertRaises(TypeError):
            schema.aliases["o"] = "other"

    def testRepr(self):
        self.assertTrue(repr(Schema()).startswith("schema(required_prologue=()"))


if __name__ == "__main__":
    unittest.main()
