"""
Option context and value collection tests.

Scope
- Index validation of OptionValueCollection against the active option.
- Context attributes observed from within completions during a parse.
"""
import unittest
from unittest import TestCase

from optset import Option, OptionContext, OptionSet, OptionError, OutOfRangeError, FaultCode


class ValueCollectionTest(TestCase):
    def setUp(self):
        self.optionset = OptionSet().add("a=", lambda value: None).add("o:", lambda value: None)
        self.context = OptionContext(self.optionset)

    def testNoActiveOption(self):
        with self.assertRaises(RuntimeError):
            self.context.values[0]

    def testIndexBeyondCount(self):
        self.context.option = self.optionset[0]
        with self.assertRaises(OutOfRangeError) as context:
            self.context.values[2]
        self.assertEqual(context.exception.index, 2)
        self.assertEqual(context.exception.code, FaultCode.VALUE_OUT_OF_RANGE)
        self.assertIsInstance(context.exception, IndexError)

    def testIndexBeyondCountMessage(self):
        self.context.option = self.optionset[0]
        self.context.name = "-a"
        with self.assertRaises(OutOfRangeError) as context:
            self.context.values[3]
        self.assertEqual(str(context.exception), "value index 3 is out of range for option '-a' (count is 1)")

    def testIndexBeyondCountIsLocalized(self):
        optionset = OptionSet(lambda text: "X").add("a=", lambda value: None)
        context = OptionContext(optionset)
        context.option = optionset[0]
        with self.assertRaises(OutOfRangeError) as raised:
            context.values[3]
        self.assertEqual(str(raised.exception), "X")
        self.assertEqual(raised.exception.options["title"], "X")

    def testMissingRequiredValue(self):
        self.context.option = self.optionset[0]
        self.context.name = "-a"
        with self.assertRaises(OptionError) as context:
            self.context.values[0]
        self.assertEqual(str(context.exception), "missing required value for option '-a'")
        self.assertEqual(context.exception.name, "-a")

    def testMissingOptionalValueIsNone(self):
        self.context.option = self.optionset[1]
        self.assertIsNone(self.context.values[0])
        self.assertIsNone(self.context.value)

    def testCollectedValues(self):
        self.context.option = self.optionset[0]
        self.context.values.append("x")
        self.assertEqual(self.context.values[0], "x")
        self.assertEqual(len(self.context.values), 1)
        self.assertIn("x", self.context.values)
        self.assertEqual(list(self.context.values), ["x"])
        self.assertEqual(str(self.context.values), "x")

    def testFreshContext(self):
        self.assertIsNone(self.context.option)
        self.assertIsNone(self.context.name)
        self.assertEqual(self.context.index, -1)
        self.assertIs(self.context.optionset, self.optionset)


class ContextCheckingOption(Option):
    def __init__(self, test, prototype, description, name, value, index):
        super().__init__(prototype, description)
        self.test = test
        self.expected = (name, value, index)
        self.completed = False

    def __complete__(self, context):
        name, value, index = self.expected
        self.test.assertEqual(len(context.values), 1)
        self.test.assertEqual(context.values[0], value)
        self.test.assertEqual(context.name, name)
        self.test.assertEqual(context.index, index)
        self.test.assertIs(context.option, self)
        self.completed = True


class ParseContextTest(TestCase):
    def testContextDuringParse(self):
        options = [
            ContextCheckingOption(self, "a=", "a desc", "/a", "a-val", 1),
            ContextCheckingOption(self, "b", "b desc", "--b+", "--b+", 2),
            ContextCheckingOption(self, "c=", "c desc", "--c", "C", 3),
            ContextCheckingOption(self, "d", "d desc", "/d-", None, 4),
        ]
        optionset = OptionSet()
        for option in options:
            optionset.add(option)
        self.assertEqual(len(optionset), 4)
        self.assertEqual(optionset.parse(["/a", "a-val", "--b+", "--c=C", "/d-"]), [])
        self.assertTrue(all(option.completed for option in options))

    def testContextForwardedToCallback(self):
        seen = []
        optionset = OptionSet().add("n=", lambda value, context: seen.append((value, context.name, context.index)),
                                    type=int, context=True)
        optionset.parse(["x", "--n", "3"])
        self.assertEqual(seen, [(3, "--n", 2)])


if __name__ == "__main__":
    unittest.main()
