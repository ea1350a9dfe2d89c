"""
Tests for the utils module.

This module verifies:
- Unset: singleton identity, falsy semantics, representation, copy/pickle identity, finality.
- coalesce: only Unset is replaced.
- rename: function and decorator forms, argument validation.
- mirror: read-only properties handing out copies of containers.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from pennant.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyPreservesIdentity(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testUnion(self) -> None:
        self.assertIsInstance("x", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(1, str | Unset)

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})


class CoalesceTest(TestCase):
    def testReplacesUnsetOnly(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", []):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class RenameTest(TestCase):
    def testFunctionForm(self) -> None:
        def f():
            pass

        self.assertIs(rename(f, "g"), f)
        self.assertEqual(f.__name__, "g")
        self.assertEqual(f.__qualname__, "g")

    def testDecoratorForm(self) -> None:
        @rename("g")
        def f():
            pass

        self.assertEqual(f.__name__, "g")

    def testBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1, "g")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename()
        with self.assertRaises(TypeError):
            rename(len, "g")


class MirrorTest(TestCase):
    def testReadOnlyCopy(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, {"a": [2]}]

        holder = Holder()
        holder.items.append(3)
        holder.items[1]["a"].append(4)
        self.assertEqual(holder.items, [1, {"a": [2]}])
        with self.assertRaises(AttributeError):
            holder.items = []

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == "__main__":
    unittest.main()
