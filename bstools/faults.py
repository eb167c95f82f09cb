"""
bstools faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Input-first messages: every message quotes the offending input (the full
  argument string, the alias text, the variable name) so the operator can
  fix it without reading code.
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The resolver and dispatcher raise faults directly (they have no runtime
  context); the command layer re-surfaces them through trigger(fault, **ctx).
- In non-shell mode, exceptions are raised; in shell mode, they are rendered via rich.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the tool (stable identifiers).

    grouping (by high-level domain)
    - resolution (2110x)
      • INVALID_COMMAND, AMBIGUOUS_COMMAND
    - environment (2111x)
      • MISSING_HOME, MISSING_VARIABLE
    - aliases (2112x)
      • MULTILINE_ALIAS, MISSING_ALIAS_ARGUMENT, EMPTY_ALIAS, UNREADABLE_ALIAS
    - processes (2113x)
      • SPAWN_FAILURE
    - warnings (22xxx)
      • EMPTY_DIRECTORY

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- resolution errors (21xxx) ---
    INVALID_COMMAND             = 21101
    AMBIGUOUS_COMMAND           = 21102

    # --- environment errors (21xxx) ---
    MISSING_HOME                = 21111
    MISSING_VARIABLE            = 21112

    # --- alias errors (21xxx) ---
    MULTILINE_ALIAS             = 21121
    MISSING_ALIAS_ARGUMENT      = 21122
    EMPTY_ALIAS                 = 21123
    UNREADABLE_ALIAS            = 21124

    # --- process errors (21xxx) ---
    SPAWN_FAILURE               = 21131

    # --- warnings (22xxx) ---
    EMPTY_DIRECTORY             = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _renderer(fault, palette, kind):
    """
    shared rich layout for exceptions and warnings.

    header: "[ prog — code | title ]", body: message, footer: "→ hint".
    when fancy, the body is boxed in a Panel titled by the header.
    """
    main = __import__("__main__")
    options = fault.options
    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    tool = options.get("tool")
    prog = text(getattr(main, "__prog__", getattr(tool, "name", "bs")), styler("prog-name"))

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(kind + "-title")),
        " ]"
    )
    message = text(fault.message, styler(kind + "-message"))
    renders = [message]
    if options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))
    if options.get("docs"):
        renders.append(text(options["docs"], styler("docs")))

    if fancy:
        return Panel(Group(*renders), title=header, title_align="left", width=console.width - 4)

    return Group(header, *renders)


class CommandException(Exception):
    """
    base type for every fatal fault.

    options
    - title, code, hint, docs: rendering copy (see _renderer).
    - status: process exit status used in shell mode (defaults to 1).
    - tool, shell, fancy, colorful: runtime context merged in by trigger().
    - anything else is context for the reporter (input, args, alias, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _renderer(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "#6B6F7A",
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(self.options.get("status", 1))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidCommandError(CommandException): ...
class AmbiguousCommandError(CommandException): ...
class MissingHomeError(CommandException): ...
class MissingVariableError(CommandException): ...
class MultilineAliasError(CommandException): ...
class MissingAliasArgumentError(CommandException): ...
class EmptyAliasError(CommandException): ...
class UnreadableAliasError(CommandException): ...
class SpawnError(CommandException): ...


class CommandWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _renderer(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
            "docs": "#6B6F7A",
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyDirectoryWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - tool, shell, fancy, colorful, status, title, code, hint, docs, and any other
      context the reporter may want to show (e.g., input/args/alias).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "InvalidCommandError",
    "AmbiguousCommandError",
    "MissingHomeError",
    "MissingVariableError",
    "MultilineAliasError",
    "MissingAliasArgumentError",
    "EmptyAliasError",
    "UnreadableAliasError",
    "SpawnError",
    "CommandWarning",
    "EmptyDirectoryWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
