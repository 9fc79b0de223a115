"""
Faults module behavioral tests (rendering, triggering, and the invoke driver).

Scope
- Validate fault options, replacement and string conversion.
- Validate trigger(): raise in non-shell mode, render and exit in shell mode.
- Validate invoke(): token sources, suggestions and hints for unknown commands.

Conventions
- Test method names follow CamelCase per project convention.
- Shell-mode output is captured by patching the module console.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

from commandeer import Command, Kernel, invoke
from commandeer.faults import (
    CommandException,
    ConfigurationError,
    UnknownCommandError,
    FaultCode,
    trigger,
    getdoc,
)


def _capture():
    return Console(file=io.StringIO(), width=120, color_system=None)


class TestCommandException(TestCase):

    def testMessageAndOptions(self):
        fault = UnknownCommandError("'x' is not a registered command", code=FaultCode.UNKNOWN_COMMAND, input="x")
        self.assertEqual(str(fault), "'x' is not a registered command")
        self.assertEqual(fault.options["input"], "x")
        with self.assertRaises(TypeError):
            fault.options["input"] = "y"  # type: ignore[index]

    def testEmptyMessage(self):
        self.assertEqual(str(CommandException()), "")

    def testReplaceKeepsTypeAndMergesOptions(self):
        fault = ConfigurationError("bad", title="argument order", hint="old")
        other = fault.__replace__(hint="new", shell=False)
        self.assertIsInstance(other, ConfigurationError)
        self.assertIsNot(other, fault)
        self.assertEqual(other.message, "bad")
        self.assertEqual(dict(other.options), {"title": "argument order", "hint": "new", "shell": False})
        self.assertEqual(fault.options["hint"], "old")

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "11101")

    def testGetdoc(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_COMMAND))
        with self.assertRaises(TypeError):
            getdoc(11101)


class TestTrigger(TestCase):

    def setUp(self) -> None:
        self.fault = UnknownCommandError(
            "'gret' is not a registered command",
            title="unknown command",
            code=FaultCode.UNKNOWN_COMMAND,
            input="gret",
        )

    def testRaisesWhenNotInShell(self):
        with self.assertRaises(UnknownCommandError) as context:
            trigger(self.fault, shell=False, hint="did you mean 'greet'?")
        self.assertEqual(context.exception.options["hint"], "did you mean 'greet'?")

    def testRendersAndExitsInShell(self):
        console = _capture()
        with mock.patch("commandeer.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(self.fault, shell=True, colorful=False, prog="tool", hint="did you mean 'greet'?")
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("[ tool — 11101 | Unknown Command ]", output)
        self.assertIn("'gret' is not a registered command", output)
        self.assertIn("did you mean 'greet'?", output)

    def testFancyRendersPanel(self):
        console = _capture()
        with mock.patch("commandeer.faults.console", console):
            with self.assertRaises(SystemExit):
                trigger(self.fault, shell=True, fancy=True, colorful=False, prog="tool")
        output = console.file.getvalue()
        self.assertIn("╭", output)
        self.assertIn("Unknown Command", output)

    def testRejectsPlainExceptions(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestInvoke(TestCase):

    def setUp(self) -> None:
        class Greet(Command):
            name = "greet"

            async def handle(self):
                return "hello"

        class Serve(Command):
            name = "serve"

        self.kernel = Kernel().register([Greet, Serve])

    def testReturnsHandleResult(self):
        self.assertEqual(invoke(self.kernel, "greet", shell=False), "hello")
        self.assertEqual(invoke(self.kernel, ["greet"], shell=False), "hello")

    def testReadsSysArgv(self):
        with mock.patch("sys.argv", ["tool", "greet"]):
            self.assertEqual(invoke(self.kernel, shell=False), "hello")

    def testUnknownCommandCarriesSuggestions(self):
        with self.assertRaises(UnknownCommandError) as context:
            invoke(self.kernel, "gret", shell=False)
        options = context.exception.options
        self.assertEqual(options["suggestions"], ["greet"])
        self.assertEqual(options["hint"], "did you mean 'greet'?")

    def testUnknownCommandWithoutSuggestions(self):
        with self.assertRaises(UnknownCommandError) as context:
            invoke(self.kernel, "database:migrate", shell=False)
        self.assertEqual(context.exception.options["suggestions"], [])
        self.assertEqual(context.exception.options["hint"], "check the command name; 2 commands are registered")

    def testShellModeExits(self):
        console = _capture()
        with mock.patch("commandeer.faults.console", console):
            with self.assertRaises(SystemExit) as context:
                invoke(self.kernel, "gret", colorful=False)
        self.assertEqual(context.exception.code, 1)
        self.assertIn("did you mean 'greet'?", console.file.getvalue())

    def testCommandErrorsAreNotIntercepted(self):
        class Fail(Command):
            name = "fail"

            async def handle(self):
                raise RuntimeError("boom")

        self.kernel.register([Fail])
        with self.assertRaises(RuntimeError):
            invoke(self.kernel, "fail")

    def testRejectsBadPrompt(self):
        with self.assertRaises(TypeError):
            invoke(self.kernel, 3)
        with self.assertRaises(TypeError):
            invoke(self.kernel, ["greet", 3])
        with self.assertRaises(TypeError):
            invoke(object())


if __name__ == '__main__':
    unittest.main()
