"""
Tests for the shared utilities.

This module verifies the guarantees the other modules rely on:
- The `Unset` sentinel is a falsy, final singleton distinct from None.
- coalesce() only replaces `Unset`.
- mirror() exposes read-only views of private state.
- pluralize() and ordinal() produce the copy used in listings and faults.
"""
import copy
import unittest
from unittest import TestCase

from bstools.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)

    def testFalsyButNotNone(self) -> None:
        """
        The sentinel is falsy without being equal to other falsy values.
        """
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionInIsinstance(self) -> None:
        """
        The sentinel takes part in PEP 604 unions on either side.
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", Unset | str)

    def testFinalClass(self) -> None:
        """
        The class is final: attempts to subclass must fail with TypeError.
        """
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class HelpersTest(TestCase):
    """
    Test suite for coalesce(), rename() and mirror().
    """

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))

    def testRename(self) -> None:
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")
        with self.assertRaises(TypeError):
            rename(len, "length")

    def testMirrorIsReadOnly(self) -> None:
        """
        mirror() returns frozen views and refuses assignment.
        """
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a", "b"]
                self._table = {"a": 1}

        holder = Holder()
        self.assertEqual(holder.items, ("a", "b"))
        with self.assertRaises(TypeError):
            holder.table["b"] = 2
        with self.assertRaises(AttributeError):
            holder.items = ()


class CopyTest(TestCase):
    """
    Test suite for pluralize() and ordinal().
    """

    def testPluralize(self) -> None:
        self.assertEqual(pluralize(1, "option"), "1 option")
        self.assertEqual(pluralize(0, "option"), "0 options")
        self.assertEqual(pluralize(2, "entry"), "2 entries")
        self.assertEqual(pluralize(3, "directory"), "3 directories")
        self.assertEqual(pluralize(2, "alias"), "2 aliases")
        self.assertEqual(pluralize(2, "day"), "2 days")

    def testPluralizeRejectsWrongTypes(self) -> None:
        with self.assertRaises(TypeError):
            pluralize("2", "option")

    def testOrdinalWords(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(2), "second")
        self.assertEqual(ordinal(10), "tenth")

    def testOrdinalSuffixes(self) -> None:
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == '__main__':
    unittest.main()
