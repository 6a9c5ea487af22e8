# python
"""
Faults behavioral tests (codes, messages, replacement, triggering, rendering).

Scope
- Validate stable numeric codes and host-side normalization via __codes__.
- Validate that __replace__ merges options without mutating the original.
- Validate trigger() raising outside the shell and exiting inside it.
- Validate rich rendering in plain, colorful and fancy modes.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from aargs.faults import *


def make_console():
    return Console(file=io.StringIO(), color_system=None, width=100)


class TestFaultCode(TestCase):
    """Stable identifiers."""

    def testValues(self):
        self.assertEqual(FaultCode.MISSING_VALUE, 11111)
        self.assertEqual(FaultCode.UNEXPECTED_BOOLEAN_ASSIGNMENT, 11112)
        self.assertEqual(FaultCode.UNEXPECTED_NEGATION_VALUE, 11113)
        self.assertEqual(FaultCode.INSUFFICIENT_POSITIONALS, 11121)
        self.assertEqual(FaultCode.UNEXPECTED_EPILOGUE, 11122)
        self.assertEqual(FaultCode.ALREADY_BOUND, 11131)
        self.assertEqual(FaultCode.UNKNOWN_KEY, 11132)
        self.assertEqual(FaultCode.INVALID_SCHEMA, 11141)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11111")

    def testNormalizeUsesHostCodes(self):
        codes = {FaultCode.MISSING_VALUE: "E-VALUE"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "E-VALUE")
            self.assertEqual(FaultCode.UNKNOWN_KEY.normalize(), "11132")


class TestException(TestCase):
    """Message and options."""

    def setUp(self):
        self.fault = MissingValueError(
            "missing value after '--flag'",
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            hint="pass a value",
            token="--flag",
        )

    def testHierarchy(self):
        for cls in (
                MissingValueError,
                UnexpectedBooleanAssignmentError,
                UnexpectedNegationValueError,
                InsufficientPositionalArgumentsError,
                UnexpectedEpilogueError,
                AlreadyBoundError,
                UnknownKeyAccessError,
                InvalidSchemaError,
        ):
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, AargsException))

    def testStr(self):
        self.assertEqual(str(self.fault), "missing value after '--flag'")
        self.assertEqual(str(AargsException()), "")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["token"] = "--other"

    def testReplaceMergesOptions(self):
        replaced = self.fault.__replace__(shell=True, token="--other")
        self.assertIsInstance(replaced, MissingValueError)
        self.assertIsNot(replaced, self.fault)
        self.assertEqual(replaced.message, self.fault.message)
        self.assertEqual(replaced.options["token"], "--other")
        self.assertTrue(replaced.options["shell"])
        self.assertEqual(self.fault.options["token"], "--flag")
        self.assertNotIn("shell", self.fault.options)


class TestTrigger(TestCase):
    """Raise or print-and-exit."""

    def setUp(self):
        self.fault = UnknownKeyAccessError(
            "unknown argument 'nope'",
            title="unknown argument",
            code=FaultCode.UNKNOWN_KEY,
            hint="known arguments: none",
        )

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownKeyAccessError) as context:
            trigger(self.fault, prog="tool")
        self.assertEqual(context.exception.options["prog"], "tool")

    def testExitsInShell(self):
        console = make_console()
        with mock.patch("aargs.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(self.fault, shell=True, colorful=False, prog="tool")
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("tool", output)
        self.assertIn("11132", output)
        self.assertIn("Unknown Argument", output)
        self.assertIn("unknown argument 'nope'", output)
        self.assertIn("known arguments: none", output)

    def testDeferredDoesNotExit(self):
        console = make_console()
        with mock.patch("aargs.faults.console", console):
            self.assertIsNone(trigger(self.fault, shell=True, deferred=True, colorful=False))
        self.assertIn("unknown argument 'nope'", console.file.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestRendering(TestCase):
    """__rich__ output."""

    def setUp(self):
        self.fault = UnexpectedEpilogueError(
            "unexpected epilogue: ('extra',)",
            title="unexpected epilogue",
            code=FaultCode.UNEXPECTED_EPILOGUE,
            hint="remove the extra arguments",
            prog="tool",
        )

    def render(self, fault):
        console = make_console()
        console.print(fault)
        return console.file.getvalue()

    def testColorful(self):
        output = self.render(self.fault)
        self.assertIn("Unexpected Epilogue", output)
        self.assertIn("11122", output)
        self.assertIn("remove the extra arguments", output)

    def testFancyPanel(self):
        output = self.render(self.fault.__replace__(fancy=True, colorful=False))
        self.assertIn("unexpected epilogue: ('extra',)", output)
        self.assertIn("╭", output)
        self.assertEqual(len(output.splitlines()[0]), 100)

    def testUnknownCode(self):
        output = self.render(AargsException("plain", colorful=False))
        self.assertIn("?", output)
        self.assertIn("Error", output)


class TestGetDoc(TestCase):
    def testMissingDocs(self):
        self.assertIsNone(getdoc(FaultCode.MISSING_VALUE))

    def testHostDocs(self):
        docs = {FaultCode.MISSING_VALUE: "value flags need a value"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.MISSING_VALUE), "value flags need a value")

    def testRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11111)


if __name__ == "__main__":
    unittest.main()
