"""
bstools command layer: resolve CLI arguments, dispatch or list, and render.

What this module provides
- Tool: binds a home directory's runner registry to a dispatcher and exposes
  the caller-facing contract execute(args) -> Outcome, plus rich rendering of
  option listings and faults.
- Outcomes: Dispatched, OptionsToDisplay, NoMatchInvalid. Ambiguity and every
  other fatal condition are faults, not outcomes.
- Factories and helpers:
  • tool(home, ...): build a Tool for a home directory (prepares its layout).
  • invoke(tool, prompt): run a Tool end-to-end from argv or a prompt string.
  • main(): console entry point; reads BS_HOME and exits with a status.

Core ideas
- Library mode (shell=False): faults are raised, outcomes are returned.
- Shell mode (shell=True): faults are printed to stderr and exit the process;
  listings are printed to stdout.

Exit statuses in shell mode
- dispatched: the child's exit status.
- options listed, or an empty directory reported: 0.
- no command and nothing to list for the arguments: 2.
- any other fault: 1.

Quick start
    from bstools import tool, invoke

    invoke(tool("/home/me/.bs", shell=True), "scripts deploy --force")
"""
import shlex
import sys
from collections.abc import Iterable
from collections import defaultdict
from pathlib import Path
from typing import NamedTuple

from rich.console import Console, Group
from rich.padding import Padding
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import environment, resolver
from .dispatch import Dispatcher
from .environment import Environment
from .faults import *
from .resolver import ResolvedCommand
from .runners import Runner, runners
from .utils import Unset, coalesce, mirror, pluralize


class Dispatched(NamedTuple):
    command: ResolvedCommand
    status: int


class OptionsToDisplay(NamedTuple):
    args: tuple[str, ...]
    entries: list  # list[filesystem.Entry], sorted by name

    @property
    def names(self):
        return [entry.name for entry in self.entries]


class NoMatchInvalid(NamedTuple):
    args: tuple[str, ...]


class Tool:
    """
    High-level dispatcher object over one runner registry.

    Responsibilities
    - Resolution: execute(args) resolves across runners and, on a match,
      hands the command to the dispatcher.
    - Fallback: when nothing resolves, enumerate what follows the arguments.
    - Rendering: option listings and faults via rich (see _lister/trigger).

    Runtime flags
    - shell: print-and-exit instead of raise-and-return.
    - fancy: wrap renders in panels.
    - colorful: apply the style palette (overridable via __styles__ in __main__).
    """
    __introspectable__ = (
        "name",
        "home",
        "runners",
        "shell",
        "fancy",
        "colorful",
    )

    name = mirror("name")
    home = mirror("home")
    runners = mirror("runners")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(
            self,
            runners,
            /,
            dispatcher=Unset,
            *,
            name=Unset,
            home=Unset,
            shell=Unset,
            fancy=Unset,
            colorful=Unset,
    ):
        runners = tuple(runners)
        if not all(isinstance(runner, Runner) for runner in runners):
            raise TypeError("tool 'runners' must be an iterable of runners")
        dispatcher = coalesce(dispatcher, Dispatcher())
        if not isinstance(dispatcher, Dispatcher):
            raise TypeError("tool 'dispatcher' must be a dispatcher")
        self._runners = runners
        self._dispatcher = dispatcher
        self._name = coalesce(name, Path(sys.argv[0]).name or "bs")
        self._home = coalesce(home, None)
        self._shell = bool(coalesce(shell, False))
        self._fancy = bool(coalesce(fancy, False))
        self._colorful = bool(coalesce(colorful, False))

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "tool(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    @property
    def dispatcher(self):
        return self._dispatcher

    def trigger(self, fault, /, **options):
        """
        surface a fault with this tool's runtime flags merged in.

        in shell mode exceptions print and exit with their status, warnings
        print and return; otherwise exceptions raise and warnings warn.
        """
        trigger(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def resolve(self, args, /):
        return resolver.resolve(self.runners, args)

    def enumerate(self, prefix=(), /):
        return resolver.enumerate(self.runners, prefix)

    def execute(self, args, /):
        """
        run one resolution-then-dispatch pass.

        returns
        - Dispatched(command, status) when a command resolved and ran.
        - OptionsToDisplay(args, entries) when nothing resolved but the
          arguments name a known prefix (entries may be empty).
        - NoMatchInvalid(args) when no runner knows the arguments at all.

        raises
        - AmbiguousCommandError, and every dispatcher fault, unchanged.
        """
        args = tuple(args)
        if args:
            command = self.resolve(args)
            if command is not None:
                return Dispatched(command, self._dispatcher.dispatch(command))

        entries = self.enumerate(args)
        if entries is None:
            return NoMatchInvalid(args)
        return OptionsToDisplay(args, entries)

    def _lister(self, outcome):
        """
        Render an option listing to stdout.

        Palette keys
        - options-label, count, directory-name, command-name, panel-title

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        console = Console()
        styles = defaultdict(str, {
            "options-label": "bold #FFFFFF",  # Pure white header
            "count": "#9CA3AF",  # Muted gray
            "directory-name": "bold #00E6FF",  # CYAN for namespaces
            "command-name": "bold #22C55E",  # GREEN for runnable entries
            "panel-title": "bold #FF4D94",  # MAGENTA-PINK
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        table = Table.grid(padding=(0, 4))
        table.add_column(no_wrap=True)
        for entry in outcome.entries:
            if entry.is_directory:
                table.add_row(Text(entry.name + "/", styler("directory-name")))
            else:
                table.add_row(Text(entry.name, styler("command-name")))

        header = Text.assemble(
            ("available options", styler("options-label")),
            " ",
            ("(%s)" % pluralize(len(outcome.entries), "option"), styler("count")),
        )

        if self.fancy:
            title = " ".join((self.name, *outcome.args))
            console.print(Panel(table, title=Text(title, styler("panel-title")), title_align="left", subtitle=header))
            return

        console.print(Group(header, Padding(table, (0, 0, 0, 4))))

    def report(self, outcome, /):
        """
        turn an outcome into output and an exit status (shell-mode semantics).

        - Dispatched → the child's status.
        - OptionsToDisplay with entries → listing, 0.
        - OptionsToDisplay without entries → EmptyDirectoryWarning, 0.
        - NoMatchInvalid → InvalidCommandError (status 2).
        """
        match outcome:
            case Dispatched(status=status):
                return status
            case OptionsToDisplay(entries=entries) if entries:
                self._lister(outcome)
                return 0
            case OptionsToDisplay(args=args):
                if args:
                    message = "the %r directory is empty" % args[-1]
                    hint = "try adding commands to the directory"
                else:
                    message = "%s contains no commands" % coalesce(self.home, "the home directory")
                    hint = "try adding commands under one of: %s" % ", ".join(runner.name for runner in self.runners)
                self.trigger(EmptyDirectoryWarning(
                    message,
                    title="empty directory",
                    code=FaultCode.EMPTY_DIRECTORY,
                    args=args,
                    hint=hint,
                    docs=getdoc(FaultCode.EMPTY_DIRECTORY),
                ))
                return 0
            case NoMatchInvalid(args=args):
                self.trigger(InvalidCommandError(
                    "the command %r is not valid" % " ".join(args),
                    title="invalid command",
                    code=FaultCode.INVALID_COMMAND,
                    status=2,
                    input=" ".join(args),
                    args=args,
                    hint="run '%s' without arguments to see the available options" % self.name,
                    docs=getdoc(FaultCode.INVALID_COMMAND),
                ))
                return 2
            case _:
                raise TypeError("report() argument must be an outcome")

    def __invoke__(self, prompt=Unset):
        """
        Execute this tool with a token stream and report the outcome.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, passed through untouched.

        Returns
        - the exit status (see report()). In shell mode fatal faults exit
          the process instead of returning.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        try:
            outcome = self.execute(tokens)
        except CommandException as fault:
            return self.trigger(fault)
        return self.report(outcome)


def tool(home, /, environ=Unset, spawn=Unset, **options):
    """
    Build a Tool for a home directory.

    Behavior
    - Builds the runner registry for `home` and creates the data directory
      and every runner root (the only filesystem writes the tool performs).
    - Wires a Dispatcher over `environ` (defaults to os.environ) and `spawn`
      (defaults to subprocess-backed launching).
    - Remaining keyword options go to Tool (name, shell, fancy, colorful).
    """
    registry = runners(home)
    home = environment.prepare(home, registry)
    return Tool(registry, Dispatcher(environ, spawn), home=home, **options)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for tools.

    Parameters
    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a str (shlex-split) or an Iterable[str].

    Returns
    - whatever __invoke__ returns (an exit status for Tool).
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)
    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


def main(prompt=Unset, /, environ=Unset):
    """
    Console entry point (`bs`).

    - BS_HOME must name the home directory; when it is missing a
      MissingHomeError is rendered and the process exits with status 1.
    - Runs in shell mode with colors; exits with the status of the run.
    """
    variables = Environment(environ)
    home = variables.get(environment.HOME)
    options = {"name": "bs", "shell": True, "colorful": True}

    if home is None:
        trigger(MissingHomeError(
            "mandatory environment variable %r does not exist" % environment.HOME,
            title="missing home",
            code=FaultCode.MISSING_HOME,
            variable=environment.HOME,
            hint="set %r to %s; if this is a new installation, an empty directory may be used" % (
                environment.HOME, environment.PURPOSES[environment.HOME]
            ),
            docs=getdoc(FaultCode.MISSING_HOME),
        ), **options)

    sys.exit(invoke(tool(home, variables, **options), prompt))


__all__ = (
    "Dispatched",
    "OptionsToDisplay",
    "NoMatchInvalid",
    "Tool",
    "tool",
    "invoke",
    "main",
)
