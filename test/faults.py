"""
Fault tests.

Scope
- OptionsFault construction, codes, hints and copy.replace() overrides.
- Rich rendering (plain and fancy) with color disabled.
- trigger(): raising outside shell mode, printing and exiting in shell mode.
- getdoc() lookups through the host's __main__.__docs__.
"""
import copy
import unittest
from unittest import TestCase, mock

from rich.console import Console

from optset import OptionsFault, OptionError, ConversionError, FaultCode, trigger, getdoc
from optset import faults


def render(fault):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(fault)
    return capture.get()


class FaultTest(TestCase):
    def testMessageMustBeString(self):
        with self.assertRaises(TypeError):
            OptionsFault(42)

    def testFields(self):
        fault = OptionError("missing", code=FaultCode.MISSING_VALUE, hint="try again", name="-a")
        self.assertEqual(fault.message, "missing")
        self.assertEqual(str(fault), "missing")
        self.assertEqual(fault.code, FaultCode.MISSING_VALUE)
        self.assertEqual(fault.hint, "try again")
        self.assertEqual(fault.name, "-a")

    def testOptionsAreReadOnly(self):
        fault = OptionsFault("message", code=FaultCode.MISSING_VALUE)
        with self.assertRaises(TypeError):
            fault.options["code"] = None

    def testReplaceKeepsTypeAndCause(self):
        cause = ValueError("bad")
        fault = ConversionError("message", value="x", type="int", name="-n")
        fault.__cause__ = cause
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, ConversionError)
        self.assertIs(replaced.__cause__, cause)
        self.assertEqual(replaced.value, "x")
        self.assertTrue(replaced.options["shell"])

    def testPlainRendering(self):
        fault = OptionError(
            "missing required value for option '-a'",
            code=FaultCode.MISSING_VALUE,
            title="missing option value",
            hint="provide a value",
            colorful=False,
        )
        with mock.patch("__main__.__prog__", "tool", create=True):
            output = render(fault)
        self.assertIn("[ tool — 22101 | Missing Option Value ]", output)
        self.assertIn("missing required value for option '-a'", output)
        self.assertIn("→ provide a value", output)

    def testFancyRendering(self):
        fault = OptionError("message", title="oops", fancy=True, colorful=False)
        with mock.patch("__main__.__prog__", "tool", create=True):
            output = render(fault)
        self.assertIn("tool", output)
        self.assertIn("message", output)

    def testCodesCanBeRemapped(self):
        with mock.patch("__main__.__codes__", {FaultCode.MISSING_VALUE: 7}, create=True):
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "7")


class TriggerTest(TestCase):
    def testRaisesOutsideShell(self):
        with self.assertRaises(OptionError):
            trigger(OptionError("message"))

    def testShellPrintsAndExits(self):
        console = Console(color_system=None, force_terminal=False, width=120)
        with mock.patch.object(faults, "console", console), console.capture() as capture:
            with self.assertRaises(SystemExit) as context:
                trigger(OptionError("message", title="failure"), shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("message", capture.get())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("message"))


class GetDocTest(TestCase):
    def testMissingDocs(self):
        self.assertIsNone(getdoc(FaultCode.MISSING_VALUE))

    def testHostDocs(self):
        with mock.patch("__main__.__docs__", {FaultCode.MISSING_VALUE: "docs"}, create=True):
            self.assertEqual(getdoc(FaultCode.MISSING_VALUE), "docs")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(22101)


if __name__ == "__main__":
    unittest.main()
