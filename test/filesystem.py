"""
Filesystem probe and environment tests.

Scope
- Validate that probing and listing are total over missing paths.
- Validate segment checks used to keep walks inside a runner root.
- Validate environment lookup and home preparation.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import TestCase

from bstools.environment import Environment, prepare
from bstools.filesystem import Kind, children, ensure, probe, segment
from bstools.runners import runners


class TestProbe(TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def testKinds(self):
        (self.root / "file").write_text("")
        (self.root / "directory").mkdir()

        self.assertIs(probe(self.root / "file"), Kind.FILE)
        self.assertIs(probe(self.root / "directory"), Kind.DIRECTORY)
        self.assertIs(probe(self.root / "missing"), Kind.ABSENT)

    @unittest.skipUnless(hasattr(os, "symlink"), "requires symlinks")
    def testSymlinksAreFollowed(self):
        (self.root / "target").mkdir()
        (self.root / "link").symlink_to(self.root / "target")
        (self.root / "broken").symlink_to(self.root / "nowhere")

        self.assertIs(probe(self.root / "link"), Kind.DIRECTORY)
        self.assertIs(probe(self.root / "broken"), Kind.ABSENT)

    def testChildren(self):
        (self.root / "file").write_text("")
        (self.root / "directory").mkdir()

        entries = {entry.name: entry for entry in children(self.root)}
        self.assertEqual(set(entries), {"file", "directory"})
        self.assertTrue(entries["directory"].is_directory)
        self.assertFalse(entries["file"].is_directory)
        self.assertEqual(entries["file"].path, self.root / "file")

    @unittest.skipUnless(hasattr(os, "symlink"), "requires symlinks")
    def testChildrenOfSymlinkLoop(self):
        (self.root / "loop").symlink_to(self.root / "loop")

        self.assertEqual(children(self.root / "loop"), [])
        self.assertIs(probe(self.root / "loop"), Kind.ABSENT)

    def testChildrenOfMissingOrFile(self):
        (self.root / "file").write_text("")

        self.assertEqual(children(self.root / "missing"), [])
        self.assertEqual(children(self.root / "file"), [])

    def testSegment(self):
        self.assertTrue(segment("deploy"))
        self.assertTrue(segment("tool.jar"))
        self.assertTrue(segment("..hidden"))
        for name in ("", ".", "..", "a/b", "a\0b"):
            self.assertFalse(segment(name), repr(name))

    def testEnsureIsIdempotent(self):
        ensure(self.root / "a" / "b")
        ensure(self.root / "a" / "b")
        self.assertTrue((self.root / "a" / "b").is_dir())


class TestEnvironment(TestCase):

    def testLookup(self):
        environment = Environment({"BS_PYTHON": "/usr/bin/python3", "BS_JAVA": ""})

        self.assertEqual(environment.get("BS_PYTHON"), "/usr/bin/python3")
        self.assertIsNone(environment.get("BS_JAVA"))
        self.assertIsNone(environment.get("BS_HOME"))
        self.assertIn("BS_PYTHON", environment)
        self.assertNotIn("BS_JAVA", environment)

    def testDefaultsToProcessEnvironment(self):
        self.assertEqual(Environment().get("PATH"), os.environ.get("PATH") or None)

    def testRejectsNonMappings(self):
        with self.assertRaises(TypeError):
            Environment(["BS_HOME"])

    def testPrepareCreatesLayout(self):
        with tempfile.TemporaryDirectory() as directory:
            home = Path(directory) / "fresh"
            self.assertEqual(prepare(home, runners(home)), home)
            self.assertEqual(
                sorted(path.name for path in home.iterdir()),
                ["commands", "data", "executables", "java", "python"],
            )


if __name__ == "__main__":
    unittest.main()
