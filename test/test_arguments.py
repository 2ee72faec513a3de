"""
Argument descriptor behavioral tests.

Scope
- Construction: name/short/descr normalization and validation, flag/helper exclusivity.
- Chainable builders: positional, multivalue, minimum, default, store_into.
- Value intake: add_value conversion, threshold rejection, default replacement.
- Read-back: get_value indexing, mirrored read-only properties, repr.

Conventions
- Test method names follow CamelCase per project convention.
- Arguments are built directly here; parser-level behavior lives in test_parser.
"""
import unittest
from types import SimpleNamespace
from unittest import TestCase

from argsmith import Argument, ConversionFailureError, ValueIndexError, FaultCode
from argsmith.utils import Unset


class TestConstruction(TestCase):
    """Identity and classification of freshly declared arguments."""

    def testDashesStripped(self):
        argument = Argument("-n", "--count", "  how many  ", int)
        self.assertEqual(argument.short, "n")
        self.assertEqual(argument.name, "count")
        self.assertEqual(argument.descr, "how many")
        self.assertIs(argument.type, int)

    def testLongOnly(self):
        argument = Argument(Unset, "dry-run")
        self.assertIsNone(argument.short)
        self.assertIsNone(argument.descr)
        self.assertIs(argument.type, str)

    def testInvalidLongNames(self):
        for name in ("", "--", "1abc", "with_underscore", "trailing-", "two words"):
            with self.subTest(name=name), self.assertRaises(ValueError):
                Argument(Unset, name)

    def testLongNameMustBeString(self):
        with self.assertRaises(TypeError):
            Argument(Unset, 42)

    def testInvalidShortNames(self):
        for short in ("", "-", "ab", "-_"):
            with self.subTest(short=short), self.assertRaises(ValueError):
                Argument(short, "name")

    def testFlagAndHelperExclusive(self):
        with self.assertRaises(TypeError):
            Argument(Unset, "both", flag=True, helper=True)

    def testConverterMustBeCallable(self):
        with self.assertRaises(TypeError):
            Argument(Unset, "name", converter="upper")

    def testUnsupportedTypeNeedsConverter(self):
        with self.assertRaises(TypeError):
            Argument(Unset, "number", Unset, complex)
        argument = Argument(Unset, "number", Unset, complex, converter=complex)
        self.assertTrue(argument.add_value("1+2j"))
        self.assertEqual(argument.get_value(), 1 + 2j)

    def testInitialState(self):
        argument = Argument(Unset, "name")
        self.assertFalse(argument.is_flag)
        self.assertFalse(argument.is_helper)
        self.assertFalse(argument.is_positional)
        self.assertFalse(argument.is_multivalue)
        self.assertFalse(argument.is_default)
        self.assertFalse(argument.is_good)
        self.assertTrue(argument.is_empty)
        self.assertEqual(argument.supplied, 0)
        self.assertIsNone(argument.threshold)
        self.assertIsNone(argument.count)

    def testRepr(self):
        argument = Argument("v", "verbose", flag=True)
        self.assertTrue(repr(argument).startswith("argument("))
        self.assertIn("name='verbose'", repr(argument))
        self.assertIn(("is_flag", True), list(argument.__rich_repr__()))


class TestBuilders(TestCase):
    """Chainable builder methods and their constraints."""

    def testChaining(self):
        argument = Argument(Unset, "files").positional().multivalue(2)
        self.assertTrue(argument.is_positional)
        self.assertTrue(argument.is_multivalue)
        self.assertEqual(argument.count, 2)

    def testFlagsCannotBePositional(self):
        with self.assertRaises(TypeError):
            Argument(Unset, "verbose", flag=True).positional()
        with self.assertRaises(TypeError):
            Argument(Unset, "help", helper=True).multivalue()

    def testMultivalueCountValidation(self):
        with self.assertRaises(ValueError):
            Argument(Unset, "files").multivalue(0)
        with self.assertRaises(TypeError):
            Argument(Unset, "files").multivalue(True)
        with self.assertRaises(TypeError):
            Argument(Unset, "files").multivalue("2")

    def testMinimumNumericOnly(self):
        with self.assertRaises(TypeError):
            Argument(Unset, "name").minimum(1)
        with self.assertRaises(TypeError):
            Argument(Unset, "switch", Unset, bool).minimum(0)
        with self.assertRaises(TypeError):
            Argument(Unset, "count", Unset, int).minimum("1")
        self.assertEqual(Argument(Unset, "ratio", Unset, float).minimum(0.5).threshold, 0.5)

    def testDefault(self):
        argument = Argument(Unset, "count", Unset, int).default(4)
        self.assertTrue(argument.is_default)
        self.assertTrue(argument.is_good)
        self.assertEqual(argument.values, [4])
        self.assertEqual(argument.supplied, 0)


class TestValues(TestCase):
    """Conversion, thresholds and storage."""

    def testAddValue(self):
        argument = Argument(Unset, "count", Unset, int)
        self.assertTrue(argument.add_value("3"))
        self.assertTrue(argument.is_good)
        self.assertEqual(argument.get_value(), 3)
        self.assertEqual(argument.supplied, 1)

    def testFirstExplicitValueReplacesDefault(self):
        argument = Argument(Unset, "count", Unset, int).multivalue().default(4)
        argument.add_value("1")
        argument.add_value("2")
        self.assertEqual(argument.values, [1, 2])
        self.assertTrue(argument.is_default)

    def testThresholdRejects(self):
        argument = Argument(Unset, "count", Unset, int).minimum(1)
        self.assertFalse(argument.add_value("0"))
        self.assertFalse(argument.is_good)
        self.assertTrue(argument.is_empty)
        self.assertTrue(argument.add_value("1"))
        self.assertEqual(argument.values, [1])

    def testThresholdKeepsDefault(self):
        argument = Argument(Unset, "ratio", Unset, float).minimum(0.0).default(1.0)
        self.assertFalse(argument.add_value("-0.5"))
        self.assertEqual(argument.values, [1.0])
        self.assertTrue(argument.is_good)

    def testConversionFailure(self):
        argument = Argument(Unset, "count", Unset, int)
        with self.assertRaises(ConversionFailureError) as context:
            argument.add_value("three")
        fault = context.exception
        self.assertEqual(fault.options["code"], FaultCode.CONVERSION_FAILURE)
        self.assertEqual(fault.options["input"], "three")
        self.assertIs(fault.options["argument"], argument)
        self.assertIsInstance(fault.__cause__, ValueError)
        self.assertIn("'three'", str(fault))
        self.assertTrue(argument.is_empty)

    def testFlagStoresTrue(self):
        argument = Argument("v", "verbose", Unset, bool, flag=True)
        argument.add_value("false")
        self.assertIs(argument.get_value(), True)

    def testGetValueOutOfRange(self):
        argument = Argument(Unset, "name")
        with self.assertRaises(ValueIndexError) as context:
            argument.get_value()
        self.assertIsInstance(context.exception, IndexError)
        argument.add_value("x")
        with self.assertRaises(ValueIndexError):
            argument.get_value(1)

    def testValuesAreCopies(self):
        argument = Argument(Unset, "name")
        argument.add_value("x")
        argument.values.append("y")
        self.assertEqual(argument.values, ["x"])

    def testPropertiesReadOnly(self):
        argument = Argument(Unset, "name")
        with self.assertRaises(AttributeError):
            argument.name = "other"


class TestStoreInto(TestCase):
    """External sinks."""

    def testAttributeSinkGetsDefaultAndValues(self):
        namespace = SimpleNamespace()
        argument = Argument(Unset, "count", Unset, int).default(2).store_into(namespace, "count")
        self.assertEqual(namespace.count, 2)
        argument.add_value("5")
        self.assertEqual(namespace.count, 5)
        self.assertEqual(argument.values, [5])

    def testDefaultAfterBinding(self):
        namespace = SimpleNamespace()
        Argument(Unset, "name").store_into(namespace, "name").default("anon")
        self.assertEqual(namespace.name, "anon")

    def testLateDefaultKeepsExplicitValue(self):
        namespace = SimpleNamespace()
        argument = Argument(Unset, "count", Unset, int).store_into(namespace, "count")
        argument.add_value("7")
        argument.default(1)
        self.assertEqual(namespace.count, 7)
        self.assertEqual(argument.values, [7])
        self.assertTrue(argument.is_default)

    def testResetRestoresDefault(self):
        namespace = SimpleNamespace()
        argument = Argument(Unset, "count", Unset, int).default(1).store_into(namespace, "count")
        argument.add_value("7")
        argument.reset()
        self.assertEqual(argument.values, [1])
        self.assertEqual(argument.supplied, 0)
        self.assertEqual(namespace.count, 1)

    def testResetWithoutDefaultEmpties(self):
        sink = []
        argument = Argument(Unset, "tag").store_into(sink)
        argument.add_value("a")
        argument.reset()
        self.assertTrue(argument.is_empty)
        self.assertFalse(argument.is_good)
        self.assertEqual(sink, ["a"])

    def testSequenceSinkGetsExplicitValuesOnly(self):
        sink = []
        argument = Argument(Unset, "tag").multivalue().default("none").store_into(sink)
        self.assertEqual(sink, [])
        argument.add_value("a")
        argument.add_value("b")
        self.assertEqual(sink, ["a", "b"])
        self.assertEqual(argument.values, ["a", "b"])

    def testRejectedValueNotStored(self):
        sink = []
        argument = Argument(Unset, "count", Unset, int).minimum(1).store_into(sink)
        argument.add_value("0")
        self.assertEqual(sink, [])

    def testInvalidSinks(self):
        with self.assertRaises(TypeError):
            Argument(Unset, "name").store_into(("immutable",))
        with self.assertRaises(TypeError):
            Argument(Unset, "name").store_into(SimpleNamespace(), "not an identifier")


if __name__ == "__main__":
    unittest.main()
