"""
Faults module tests.

Scope
- FaultCode normalization and getdoc() lookups.
- ArgumentException / ArgumentWarning: message, immutable options, __replace__ merging.
- trigger(): raise/warn outside shell mode, render on the stderr console inside it.
- Rich rendering: header layout, hint line, plain vs fancy output.

Conventions
- Rendering is checked against a captured, colorless Console.
"""
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from argsmith import faults
from argsmith.faults import *


def capture():
    return Console(file=io.StringIO(), color_system=None, width=120)


class TestFaultCode(TestCase):

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testNormalizeUsesHostLabels(self):
        with mock.patch.object(__import__("__main__"), "__codes__", {FaultCode.MISSING_VALUE: "E-VALUE"}, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "E-VALUE")
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_OPTION))
        with mock.patch.object(__import__("__main__"), "__docs__", {FaultCode.UNKNOWN_OPTION: "see --help"}, create=True):
            self.assertEqual(getdoc(FaultCode.UNKNOWN_OPTION), "see --help")
        with self.assertRaises(TypeError):
            getdoc(11112)

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))

    def testCodesGroupedByDomain(self):
        groups = {
            range(11110, 11120): (FaultCode.UNKNOWN_OPTION, FaultCode.MISSING_VALUE),
            range(11120, 11122): (FaultCode.UNEXPECTED_POSITIONAL,),
            range(11122, 11130): (
                FaultCode.NOT_ENOUGH_VALUES,
                FaultCode.MISSING_REQUIRED_ARGUMENT,
                FaultCode.BELOW_MINIMUM_VALUE,
                FaultCode.CONVERSION_FAILURE,
            ),
            range(11300, 11400): (FaultCode.UNKNOWN_ARGUMENT, FaultCode.ARGUMENT_TYPE, FaultCode.VALUE_INDEX),
            range(12000, 13000): (FaultCode.DUPLICATED_ARGUMENT,),
        }
        for bounds, codes in groups.items():
            for code in codes:
                with self.subTest(code=code):
                    self.assertIn(code.value, bounds)
        self.assertEqual(sum(map(len, groups.values())), len(FaultCode))


class TestArgumentException(TestCase):

    def setUp(self):
        self.fault = UnknownOptionError(
            "unknown option '--bogus' at first position",
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="did you mean '--bogus-mode'?",
        )

    def testMessage(self):
        self.assertEqual(str(self.fault), "unknown option '--bogus' at first position")
        self.assertEqual(self.fault.message, "unknown option '--bogus' at first position")

    def testOptionsImmutable(self):
        with self.assertRaises(TypeError):
            self.fault.options["hint"] = "other"  # type: ignore[index]

    def testReplaceMergesOptions(self):
        replaced = self.fault.__replace__(index=1, hint="other")
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(replaced.options["index"], 1)
        self.assertEqual(replaced.options["hint"], "other")
        self.assertEqual(replaced.options["code"], FaultCode.UNKNOWN_OPTION)
        self.assertEqual(replaced.message, self.fault.message)
        self.assertNotIn("index", self.fault.options)

    def testAccessorFaultsAreBuiltinCompatible(self):
        self.assertTrue(issubclass(UnknownArgumentError, LookupError))
        self.assertTrue(issubclass(ArgumentTypeError, TypeError))
        self.assertTrue(issubclass(ValueIndexError, IndexError))
        for cls in (UnknownArgumentError, ArgumentTypeError, ValueIndexError, NotEnoughValuesError):
            with self.subTest(cls=cls):
                self.assertTrue(issubclass(cls, ArgumentException))

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(UnknownOptionError) as context:
            trigger(self.fault, shell=False)
        self.assertEqual(context.exception.options["code"], FaultCode.UNKNOWN_OPTION)

    def testTriggerPrintsInShell(self):
        console = capture()
        with mock.patch.object(faults, "console", console):
            trigger(self.fault, shell=True, colorful=False)
        output = console.file.getvalue()
        self.assertIn("[ argsmith — 11112 | Unknown Option ]", output)
        self.assertIn("unknown option '--bogus' at first position", output)
        self.assertIn("→ did you mean '--bogus-mode'?", output)

    def testFancyRendering(self):
        console = capture()
        console.print(self.fault.__replace__(fancy=True, colorful=False))
        output = console.file.getvalue()
        self.assertIn("11112", output)
        self.assertIn("╭", output)

    def testProgramNameFromParser(self):
        console = capture()
        parser = mock.Mock()
        parser.name = "tool"
        console.print(self.fault.__replace__(parser=parser, colorful=False))
        self.assertIn("[ tool — 11112", console.file.getvalue())

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestArgumentWarning(TestCase):

    def setUp(self):
        self.warning = DuplicatedArgumentWarning(
            "argument 'count' was already declared; the last declaration wins",
            title="duplicated argument",
            code=FaultCode.DUPLICATED_ARGUMENT,
        )

    def testWarnsOutsideShell(self):
        with self.assertWarns(DuplicatedArgumentWarning):
            trigger(self.warning, shell=False)

    def testPrintsInShell(self):
        console = capture()
        with mock.patch.object(faults, "console", console):
            trigger(self.warning, shell=True, colorful=False)
        output = console.file.getvalue()
        self.assertIn("12115", output)
        self.assertIn("Duplicated Argument", output)

    def testIsWarning(self):
        self.assertIsInstance(self.warning, ArgumentWarning)
        self.assertIsInstance(self.warning, Warning)
        self.assertEqual(str(self.warning), self.warning.message)


if __name__ == "__main__":
    unittest.main()
