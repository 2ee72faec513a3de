"""
argsmith faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  raised while declaring arguments, parsing a token vector or reading values back.
- ArgumentException / ArgumentWarning: base types that carry a message plus an
  immutable options mapping and know how to render themselves with rich.
- trigger(): central entry point to surface any fault (print in shell mode,
  raise or warn otherwise).
- getdoc(): optional description lookup for a code from the host application.

UX goals
- Position-first messages: parse faults name the ordinal position of the
  offending token (“unknown option '--bogus' at second position”).
- Soft but technical language: short titles, one-sentence bodies, a single hint.

Integration
- The parser builds a fault, merges its runtime options (parser, shell, fancy,
  colorful) and calls trigger(). In shell mode the fault is rendered on stderr
  and parsing reports failure; otherwise the fault is raised to the caller.
- Host customization lives in __main__: __styles__ (palette), __codes__ (code
  labels), __docs__ (per-code docs) and __prog__ (program name in headers).
"""
import warnings
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
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - options (1111x)
      • UNKNOWN_OPTION, MISSING_VALUE
    - positionals (1112x, low)
      • UNEXPECTED_POSITIONAL
    - validation (1112x, high)
      • NOT_ENOUGH_VALUES, MISSING_REQUIRED_ARGUMENT, BELOW_MINIMUM_VALUE,
        CONVERSION_FAILURE
    - accessors (113xx)
      • UNKNOWN_ARGUMENT, ARGUMENT_TYPE, VALUE_INDEX
    - warnings (12xxx)
      • DUPLICATED_ARGUMENT

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- option errors (1111x) ---
    UNKNOWN_OPTION              = 11112
    MISSING_VALUE               = 11117

    # --- positional errors (1112x) ---
    UNEXPECTED_POSITIONAL       = 11121

    # --- validation errors (1112x) ---
    NOT_ENOUGH_VALUES           = 11122
    MISSING_REQUIRED_ARGUMENT   = 11125
    BELOW_MINIMUM_VALUE         = 11126
    CONVERSION_FAILURE          = 11127

    # --- accessor errors (113xx) ---
    UNKNOWN_ARGUMENT            = 11301
    ARGUMENT_TYPE               = 11302
    VALUE_INDEX                 = 11303

    # --- warnings (12xxx) ---
    DUPLICATED_ARGUMENT         = 12115

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    """
    assemble the rich renderable shared by exceptions and warnings.

    layout: "[ prog — code | title ]" header, the message, then an optional
    "→ hint" line; wrapped in a Panel when the fault carries fancy=True.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    parser = options.get("parser")
    prog = text(getattr(main, "__prog__", getattr(parser, "name", "argsmith")), styler("prog-name"))

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
        " | ",
        text(str(options.get("title", title)).title(), styler("title")),
        " ]"
    )
    message = text(fault.message or "", styler("message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")

    return Group(header, *renders)


class ArgumentException(Exception):
    """
    base type of every argsmith error.

    carries the human-readable message plus an immutable options mapping with
    the context the reporter may want to show (title, code, hint, argument,
    input, index, suggestions, docs, exception, parser, shell, fancy, colorful).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error")

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# --- parse faults ---
class UnknownOptionError(ArgumentException): ...
class MissingValueError(ArgumentException): ...
class UnexpectedPositionalError(ArgumentException): ...
class MissingRequiredArgumentError(ArgumentException): ...
class BelowMinimumValueError(ArgumentException): ...
class ConversionFailureError(ArgumentException): ...
class NotEnoughValuesError(ArgumentException): ...

# --- accessor faults ---
class UnknownArgumentError(ArgumentException, LookupError): ...
class ArgumentTypeError(ArgumentException, TypeError): ...
class ValueIndexError(ArgumentException, IndexError): ...


class ArgumentWarning(Warning):
    """
    base type of every argsmith warning (non-fatal, parsing continues).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning")

    def __str__(self):
        return self.message if isinstance(self.message, str) else ""

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=4)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicatedArgumentWarning(ArgumentWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the stderr rich console; otherwise
      exceptions are raised and warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgumentException",
    "UnknownOptionError",
    "MissingValueError",
    "UnexpectedPositionalError",
    "MissingRequiredArgumentError",
    "BelowMinimumValueError",
    "ConversionFailureError",
    "NotEnoughValuesError",
    "UnknownArgumentError",
    "ArgumentTypeError",
    "ValueIndexError",
    "ArgumentWarning",
    "DuplicatedArgumentWarning",
    "trigger",
    "getdoc",
)
