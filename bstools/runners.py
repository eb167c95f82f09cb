"""
Runner registry: the fixed, ordered set of command trees under a home.

A runner pairs a root directory with an execution strategy. Strategies form a
closed set of small immutable records; the dispatcher pattern-matches on them,
so adding a runner type is one new record plus one new `case`.

Layout under a home directory

    $BS_HOME/
        executables/   DirectExecutable
        python/        InterpretedScript(BS_PYTHON)
        commands/      CommandAlias
        java/          ArchiveRuntime(BS_JAVA, "-jar")
"""
from dataclasses import dataclass
from pathlib import Path

from . import environment
from .utils import mirror

# Runners
EXECUTABLES = "executables"
PYTHON = "python"
COMMANDS = "commands"
JAVA = "java"


@dataclass(frozen=True, slots=True)
class DirectExecutable:
    """run the command file itself."""


@dataclass(frozen=True, slots=True)
class InterpretedScript:
    """run the command file through the interpreter named by `variable`."""
    variable: str


@dataclass(frozen=True, slots=True)
class CommandAlias:
    """read the command file as a one-line command template."""


@dataclass(frozen=True, slots=True)
class ArchiveRuntime:
    """hand the command file to the launcher named by `variable`, after `flag`."""
    variable: str
    flag: str


Strategy = DirectExecutable | InterpretedScript | CommandAlias | ArchiveRuntime


class Runner:
    """
    immutable runner descriptor: name, root directory, execution strategy.

    attributes are exposed through read-only properties; there is no setter
    and the backing fields are private.
    """
    __introspectable__ = ("name", "root", "strategy")
    __slots__ = ("_name", "_root", "_strategy")

    name = mirror("name")
    root = mirror("root")
    strategy = mirror("strategy")

    def __init__(self, name, root, strategy, /):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("runner 'name' must be a non-empty string")
        if not isinstance(strategy, Strategy):
            raise TypeError("runner 'strategy' must be one of DirectExecutable, InterpretedScript, "
                            "CommandAlias or ArchiveRuntime")
        self._name = name
        self._root = Path(root).absolute()
        self._strategy = strategy

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "runner(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __eq__(self, other):
        if not isinstance(other, Runner):
            return NotImplemented
        return (self.name, self.root, self.strategy) == (other.name, other.root, other.strategy)

    def __hash__(self):
        return hash((self.name, self.root, self.strategy))


def runners(home, /):
    """
    build the registry for `home`, in precedence order.

    the order fixes how options from different runners interleave when
    names tie; it never decides which of two matching commands wins.
    """
    home = Path(home)
    return (
        Runner(EXECUTABLES, home / EXECUTABLES, DirectExecutable()),
        Runner(PYTHON, home / PYTHON, InterpretedScript(environment.PYTHON)),
        Runner(COMMANDS, home / COMMANDS, CommandAlias()),
        Runner(JAVA, home / JAVA, ArchiveRuntime(environment.JAVA, "-jar")),
    )


__all__ = (
    "EXECUTABLES",
    "PYTHON",
    "COMMANDS",
    "JAVA",
    "DirectExecutable",
    "InterpretedScript",
    "CommandAlias",
    "ArchiveRuntime",
    "Strategy",
    "Runner",
    "runners",
)
