"""
Invocation building and process dispatch.

Scope
- Invocation: the fully built process call (executable + argv).
- read_alias() / substitute(): the alias file contract. An alias file holds one
  line of text with zero or more '%s' placeholders; each placeholder takes the
  next unused argument, the result is split on single spaces into a command
  and its argv, and leftover arguments are appended.
- Dispatcher: turns a ResolvedCommand into an Invocation according to its
  runner's strategy, then spawns it through an injected capability.

Notes
- The space split after substitution is naive on purpose: it honours no
  quoting, so an argument holding spaces becomes several argv entries.
- Building never spawns. Every fatal configuration fault is raised by
  build(), so nothing is launched when the alias or the environment is wrong.
"""
import builtins
import contextlib
import signal
import subprocess
import threading
from typing import NamedTuple

from .environment import Environment, PURPOSES
from .faults import (
    FaultCode,
    MissingVariableError,
    MultilineAliasError,
    MissingAliasArgumentError,
    EmptyAliasError,
    UnreadableAliasError,
    SpawnError,
    getdoc,
)
from .runners import DirectExecutable, InterpretedScript, CommandAlias, ArchiveRuntime
from .utils import Unset, coalesce, ordinal, pluralize

TOKEN = "%s"


class Invocation(NamedTuple):
    executable: str
    argv: tuple[str, ...]


def read_alias(path, /):
    """
    read an alias file and return its single line.

    one trailing line terminator (LF, CRLF or CR) is tolerated; any other
    terminator makes the file multi-line, which is rejected before any
    substitution happens.
    """
    try:
        with open(path, encoding="utf-8", newline="") as stream:
            text = stream.read()
    except (OSError, UnicodeDecodeError) as error:
        raise UnreadableAliasError(
            "unable to read the command file %r" % str(path),
            title="unreadable alias",
            code=FaultCode.UNREADABLE_ALIAS,
            path=str(path),
            reason=str(error),
            hint="make sure the file is readable text (utf-8)",
            docs=getdoc(FaultCode.UNREADABLE_ALIAS),
        ) from error

    line = text
    for terminator in ("\r\n", "\n", "\r"):
        if line.endswith(terminator):
            line = line.removesuffix(terminator)
            break

    if "\n" in line or "\r" in line:
        raise MultilineAliasError(
            "command file %r contains more than one line; only single line commands are supported" % str(path),
            title="multi-line alias",
            code=FaultCode.MULTILINE_ALIAS,
            path=str(path),
            alias=text,
            hint="keep the whole command on the first line of the file",
            docs=getdoc(FaultCode.MULTILINE_ALIAS),
        )
    return line


def substitute(alias, args=(), /):
    """
    expand an alias line with `args` and split it into an Invocation.

    steps
    - split the line on '%s'; between consecutive pieces insert the next
      unused argument, in order.
    - split the expanded text on single spaces: the first non-empty token is
      the executable, every token after it is argv (empty ones included).
    - append the arguments no placeholder consumed.

    raises
    - MissingAliasArgumentError when there are more '%s' tokens than arguments.
    - EmptyAliasError when the expanded text has no command token.

    example
    - substitute("echo %s and %s", ["a", "b", "c"])
      → Invocation("echo", ("a", "and", "b", "c"))
    """
    args = tuple(args)
    pieces = alias.split(TOKEN)
    expanded = pieces[0]
    consumed = 0

    for position, piece in builtins.enumerate(pieces[1:], 1):
        if consumed >= len(args):
            raise MissingAliasArgumentError(
                "the following command expects an argument to replace its %s %s token: %s" % (
                    ordinal(position), TOKEN, alias
                ),
                title="missing alias argument",
                code=FaultCode.MISSING_ALIAS_ARGUMENT,
                alias=alias,
                index=position,
                expected=len(pieces) - 1,
                given=len(args),
                hint="provide %s to execute the command" % pluralize(len(pieces) - 1, "argument"),
                docs=getdoc(FaultCode.MISSING_ALIAS_ARGUMENT),
            )
        expanded += args[consumed] + piece
        consumed += 1

    tokens = expanded.split(" ")
    start = 0
    while start < len(tokens) and not tokens[start]:
        start += 1

    if start == len(tokens):
        raise EmptyAliasError(
            "the command %r has nothing to execute" % alias,
            title="empty alias",
            code=FaultCode.EMPTY_ALIAS,
            alias=alias,
            hint="write the command to run on the first line of the file (for example: echo %s)",
            docs=getdoc(FaultCode.EMPTY_ALIAS),
        )

    return Invocation(tokens[start], tuple(tokens[start + 1:]) + args[consumed:])


def launch(invocation, /):
    """
    launch an invocation and wait for it.

    standard streams are inherited and no timeout is imposed. the terminal
    delivers Ctrl-C to the child directly; while waiting, this process ignores
    SIGINT so the child decides how to stop and its status is still returned.
    launch failures raise OSError (or ValueError for an unusable argv).
    """
    with subprocess.Popen([invocation.executable, *invocation.argv]) as process:
        with _sigint_ignored():
            return process.wait()


@contextlib.contextmanager
def _sigint_ignored():
    # handlers can only be changed from the main thread
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.getsignal(signal.SIGINT)
    if previous is None:  # installed outside python; cannot be restored
        yield
        return
    signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


class Dispatcher:
    """
    strategy-aware builder and launcher for resolved commands.

    parameters
    - environment: Environment | Mapping | Unset
      where interpreter and launcher paths are looked up (defaults to os.environ).
    - spawn: Callable[[Invocation], int] | Unset
      process launcher (defaults to launch(), which waits on a subprocess.Popen).
    """

    def __init__(self, environment=Unset, spawn=Unset, /):
        environment = coalesce(environment, Environment())
        if not isinstance(environment, Environment):
            environment = Environment(environment)
        spawner = coalesce(spawn, launch)
        if not callable(spawner):
            raise TypeError("dispatcher 'spawn' must be callable")
        self._environment = environment
        self._spawn = spawner

    @property
    def environment(self):
        return self._environment

    def _require(self, variable):
        value = self._environment.get(variable)
        if value is None:
            raise MissingVariableError(
                "mandatory environment variable %r does not exist" % variable,
                title="missing environment variable",
                code=FaultCode.MISSING_VARIABLE,
                variable=variable,
                hint="set %r to %s and try again" % (variable, PURPOSES.get(variable, "a value")),
                docs=getdoc(FaultCode.MISSING_VARIABLE),
            )
        return value

    def build(self, command, /):
        """
        build the Invocation for a ResolvedCommand without launching anything.

        - DirectExecutable:  command_path *remaining
        - InterpretedScript: $interpreter command_path *remaining
        - ArchiveRuntime:    $launcher flag command_path *remaining
        - CommandAlias:      substitute(read_alias(command_path), remaining)
        """
        path = str(command.command_path)
        args = tuple(command.remaining_args)

        match command.runner.strategy:
            case DirectExecutable():
                return Invocation(path, args)
            case InterpretedScript(variable=variable):
                return Invocation(self._require(variable), (path, *args))
            case ArchiveRuntime(variable=variable, flag=flag):
                return Invocation(self._require(variable), (flag, path, *args))
            case CommandAlias():
                return substitute(read_alias(command.command_path), args)
            case strategy:
                raise TypeError("unsupported runner strategy %r" % (strategy,))

    def dispatch(self, command, /):
        """
        build and launch a ResolvedCommand; returns the child's exit status.

        raises the build faults unchanged and SpawnError when the process
        cannot be created. there is no retry.
        """
        invocation = self.build(command)
        try:
            return self._spawn(invocation)
        except (OSError, ValueError) as error:  # ValueError: NUL inside argv
            raise SpawnError(
                "failed to launch process %r: %s" % (invocation.executable, getattr(error, "strerror", None) or error),
                title="launch failure",
                code=FaultCode.SPAWN_FAILURE,
                executable=invocation.executable,
                argv=invocation.argv,
                errno=getattr(error, "errno", None),
                hint="check that %r exists and is executable" % invocation.executable,
                docs=getdoc(FaultCode.SPAWN_FAILURE),
            ) from error


__all__ = (
    "TOKEN",
    "Invocation",
    "read_alias",
    "substitute",
    "launch",
    "Dispatcher",
)
