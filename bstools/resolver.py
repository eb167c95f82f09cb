"""
Command resolution and option enumeration.

Resolution walks each runner's tree, consuming arguments as path segments,
until it lands on a non-directory entry. The per-runner results feed a small
state machine (Search) that makes "a second runner also matched" an explicit,
fatal transition instead of a side effect of loop order.

    SEARCHING --match-----> RESOLVED --match--> AMBIGUOUS  (terminal, fatal)
    SEARCHING --exhausted-> NOT_FOUND                      (terminal, caller enumerates)
    RESOLVED  --exhausted-> RESOLVED

Enumeration answers "what can follow these arguments?" across all runners and
keeps "no runner knows this prefix" (None) apart from "known but empty" ([]).
"""
import builtins
from enum import Enum
from pathlib import Path
from typing import NamedTuple

from . import filesystem
from .faults import AmbiguousCommandError, FaultCode, getdoc
from .filesystem import Kind
from .runners import Runner


class ResolvedCommand(NamedTuple):
    command_path: Path
    remaining_args: tuple[str, ...]
    runner: Runner


class Resolution(Enum):
    SEARCHING = "searching"
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"
    NOT_FOUND = "not-found"


class Search:
    """
    state machine over per-runner walk results for one argument list.

    feed every runner's result to match()/miss() in registry order, then call
    finish(). a second match moves to AMBIGUOUS and raises immediately; the
    first match is kept as the result otherwise.
    """

    def __init__(self, args, /):
        self._args = tuple(args)
        self._state = Resolution.SEARCHING
        self._result = None
        self._matches = []

    @property
    def state(self):
        return self._state

    @property
    def result(self):
        return self._result

    @property
    def matches(self):
        return tuple(self._matches)

    def match(self, command, /):
        if self._state in (Resolution.AMBIGUOUS, Resolution.NOT_FOUND):
            raise RuntimeError("search already finished in state %r" % self._state.value)
        self._matches.append(command)
        if self._state is Resolution.SEARCHING:
            self._state = Resolution.RESOLVED
            self._result = command
            return
        self._state = Resolution.AMBIGUOUS
        self._result = None
        input = " ".join(self._args)
        raise AmbiguousCommandError(
            "more than one command exists for arguments %r; commands must be unique" % input,
            title="ambiguous command",
            code=FaultCode.AMBIGUOUS_COMMAND,
            input=input,
            args=self._args,
            candidates=tuple(str(match.command_path) for match in self._matches),
            hint="remove or rename one of: %s" % ", ".join(str(match.command_path) for match in self._matches),
            docs=getdoc(FaultCode.AMBIGUOUS_COMMAND),
        )

    def miss(self):
        if self._state in (Resolution.AMBIGUOUS, Resolution.NOT_FOUND):
            raise RuntimeError("search already finished in state %r" % self._state.value)

    def finish(self):
        if self._state is Resolution.SEARCHING:
            self._state = Resolution.NOT_FOUND
        return self._result


def walk(runner, args, /):
    """
    try to resolve `args` inside one runner's tree.

    returns a ResolvedCommand when a non-directory entry is reached, or None
    when a segment is missing or the arguments run out on directories.
    """
    position = runner.root
    for index, arg in builtins.enumerate(args):
        if not filesystem.segment(arg):
            return None
        position = position / arg
        match filesystem.probe(position):
            case Kind.ABSENT:
                return None
            case Kind.DIRECTORY:
                continue
            case Kind.FILE:
                return ResolvedCommand(position, tuple(args[index + 1:]), runner)
    return None


def resolve(runners, args, /):
    """
    resolve `args` to exactly one command across all runners.

    returns
    - ResolvedCommand when exactly one runner matches.
    - None when no runner matches (including for an empty `args`).

    raises
    - AmbiguousCommandError when two or more runners match.
    """
    args = tuple(args)
    search = Search(args)
    if not args:
        return search.finish()
    for runner in runners:
        command = walk(runner, args)
        if command is None:
            search.miss()
        else:
            search.match(command)
    return search.finish()


def locate(runner, prefix, /):
    """
    walk `prefix` as plain segments under one runner.

    returns the reached path, or None when any segment is missing.
    """
    position = runner.root
    for arg in prefix:
        if not filesystem.segment(arg):
            return None
        position = position / arg
        if filesystem.probe(position) is Kind.ABSENT:
            return None
    return position


def enumerate(runners, prefix=(), /):
    """
    list the entries available after `prefix`, merged across runners.

    behavior
    - empty prefix: every runner's root entries (a missing root adds nothing).
    - non-empty prefix: entries under the prefix path of every runner where
      all segments exist; a prefix ending on a file lists as nothing.
    - entries are sorted by name; the sort is stable, so equal names keep
      registry order.

    returns
    - list[Entry], possibly empty, when at least one runner knows the prefix.
    - None when no runner knows the prefix.
    """
    prefix = tuple(prefix)
    entries = []
    found = False
    for runner in runners:
        if not prefix:
            entries.extend(filesystem.children(runner.root))
            found = True
            continue
        position = locate(runner, prefix)
        if position is None:
            continue
        found = True
        entries.extend(filesystem.children(position))

    if not found:
        return None
    return sorted(entries, key=lambda entry: entry.name)


__all__ = (
    "ResolvedCommand",
    "Resolution",
    "Search",
    "walk",
    "resolve",
    "locate",
    "enumerate",
)
