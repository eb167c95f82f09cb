"""
Environment lookup and home preparation.

The dispatcher never reads os.environ itself: an Environment is handed to it
at construction time, so tests can pass a plain dict instead.
"""
import os
from collections.abc import Mapping
from pathlib import Path

from .filesystem import ensure
from .utils import Unset, coalesce

# Environment variable names
HOME = "BS_HOME"
PYTHON = "BS_PYTHON"
JAVA = "BS_JAVA"

DATA = "data"

# what each variable must hold, quoted by MissingVariableError hints
PURPOSES = {
    HOME: "a directory path; within the directory, commands and data will be stored",
    PYTHON: "the path to the python executable to use when executing commands",
    JAVA: "the path to the java executable to use when executing commands",
}


class Environment:
    """
    read-only lookup capability over a mapping of variables.

    an empty value is treated the same as an unset one: neither names an
    interpreter or a directory.
    """

    def __init__(self, variables=Unset, /):
        variables = coalesce(variables, os.environ)
        if not isinstance(variables, Mapping):
            raise TypeError("environment variables must be a mapping")
        self._variables = variables

    def get(self, name, /):
        if not isinstance(name, str):
            raise TypeError("environment variable name must be a string")
        return self._variables.get(name) or None

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"environment({len(self._variables)} variables)"


def prepare(home, runners, /):
    """
    create the data directory and every runner root under `home`.

    this runs once, before any resolution, so the resolver only ever reads.
    returns the home as a Path.
    """
    home = Path(home)
    ensure(home / DATA)
    for runner in runners:
        ensure(runner.root)
    return home


__all__ = (
    "HOME",
    "PYTHON",
    "JAVA",
    "DATA",
    "PURPOSES",
    "Environment",
    "prepare",
)
