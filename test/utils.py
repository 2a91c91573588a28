"""
Tests for the internal helpers.

This module verifies
- the Unset sentinel (singleton, falsy, final, usable in isinstance unions),
- coalesce() fallbacks,
- rename() in both call forms,
- localize() placeholder filling,
- mirror() read-only properties handing out container copies.
"""
import unittest
from unittest import TestCase

from optset.utils import *


class UnsetTest(TestCase):
    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        self.assertIsNot(Unset, None)

    def testCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionWithTypes(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("text", str | Unset))
        self.assertFalse(isinstance(42, str | Unset))


class CoalesceTest(TestCase):
    def testUnsetFallsBack(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesArePreserved(self):
        for value in (None, 0, "", []):
            self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testDirectForm(self):
        function = rename(lambda: None, "named")
        self.assertEqual(function.__name__, "named")
        self.assertEqual(function.__qualname__, "named")

    def testDecoratorForm(self):
        @rename("named")
        def function():
            pass

        self.assertEqual(function.__name__, "named")

    def testBadArguments(self):
        with self.assertRaises(TypeError):
            rename(42, "named")
        with self.assertRaises(TypeError):
            rename(lambda: None, 42)
        with self.assertRaises(TypeError):
            rename()


class LocalizeTest(TestCase):
    def testFillsPlaceholders(self):
        self.assertEqual(localize(identity, "value {name!r}", name="-a"), "value '-a'")

    def testLocalizerRunsBeforeFormatting(self):
        self.assertEqual(localize(str.upper, "{name}", name="x"), "{NAME}")

    def testUnknownPlaceholdersAreKept(self):
        self.assertEqual(localize(identity, "{other} {name}", name="-a"), "{other} -a")

    def testMalformedTranslationIsReturnedAsIs(self):
        self.assertEqual(localize(lambda text: "{", "{name}", name="-a"), "{")
        self.assertEqual(localize(lambda text: "{0}", "{name}", name="-a"), "{0}")


class MirrorTest(TestCase):
    class Holder:
        items = mirror("items")
        pair = mirror("pair")

        def __init__(self):
            self._items = ["a"]
            self._pair = ("a", "b")

    def testContainersAreCopied(self):
        holder = self.Holder()
        holder.items.append("b")
        self.assertEqual(holder.items, ["a"])
        self.assertIs(holder.pair, holder._pair)

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.Holder().items = []

    def testIdentity(self):
        marker = object()
        self.assertIs(identity(marker), marker)


if __name__ == "__main__":
    unittest.main()
