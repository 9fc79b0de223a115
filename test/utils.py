"""
Utils module behavioral tests (sentinel, coalesce, rename, mirror).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from commandeer.utils import Unset, UnsetType, coalesce, rename, mirror


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsey(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):
                pass

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))


class TestRename(TestCase):

    def testFunctionForm(self):
        def f():
            pass

        rename(f, "g")
        self.assertEqual((f.__name__, f.__qualname__), ("g", "g"))

    def testDecoratorForm(self):
        @rename("handler")
        def f():
            pass

        self.assertEqual(f.__name__, "handler")

    def testBadArguments(self):
        with self.assertRaises(TypeError):
            rename(3, "x")
        with self.assertRaises(TypeError):
            rename(lambda: None, 3)
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def setUp(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")
            tags = mirror("tags")
            label = mirror("label")

            def __init__(self):
                self._items = [1, 2]
                self._table = {"a": 1}
                self._tags = {"x"}
                self._label = "name"

        self.holder = Holder()

    def testReadOnlyViews(self):
        self.assertEqual(self.holder.items, (1, 2))
        self.assertIsInstance(self.holder.table, MappingProxyType)
        self.assertEqual(self.holder.tags, frozenset({"x"}))
        self.assertEqual(self.holder.label, "name")

    def testNoSetter(self):
        with self.assertRaises(AttributeError):
            self.holder.items = []

    def testViewsFollowBackingField(self):
        self.holder._table["b"] = 2
        self.assertEqual(dict(self.holder.table), {"a": 1, "b": 2})


class TestVersion(TestCase):

    def testVersionInfoMatchesVersion(self):
        import commandeer

        self.assertEqual(".".join(map(str, commandeer.version_info[:3])), commandeer.__version__)
        self.assertEqual(commandeer.version_info.releaselevel, "final")


if __name__ == '__main__':
    unittest.main()
