"""
Pennant faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing failure,
  grouped by domain so logs and searches stay predictable.
- FlagException: base type carrying a message plus read-only options, able to
  render itself through rich in a friendly, lowercased and actionable way.
- trigger(): central entry point to surface a fault (raise, or render and exit).
- getdoc(): optional description lookup for a code from the host application.

Tone
- Short titles, one-sentence bodies, a single clear hint.
- Lowercased copy with readable styling (configurable via __styles__ in __main__).

Integration
- The tokenizer, validators and flag set raise these exceptions directly.
- invoke() surfaces them in shell mode: help on stdout, the fault on stderr, exit 1.
"""
import copy
import os.path
import sys
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
    canonical fault codes (stable identifiers).

    grouping
    - quoting (2110x)
      • HALF_QUOTED_STRING, MALFORMED_QUOTE
    - declarations (2120x)
      • INVALID_FLAG_NAME, DUPLICATED_FLAG
    - tokens (2130x)
      • UNKNOWN_FLAG, UNEXPECTED_POSITIONAL
    - values (2140x)
      • SINGLE_VALUE_EXPECTED, REPEATED_FLAG, FLAG_ASSIGNMENT, NOT_AN_INTEGER,
        NOT_A_FLOAT, MALFORMED_URL, INVALID_CHOICE
    - delegated (2150x)
      • FLAG_VALUE, POSITIONAL_VALUE (wrappers naming where a value failed)
    """
    # --- quoting errors ---
    HALF_QUOTED_STRING          = 21101
    MALFORMED_QUOTE             = 21102

    # --- declaration errors ---
    INVALID_FLAG_NAME           = 21201
    DUPLICATED_FLAG             = 21202

    # --- token errors ---
    UNKNOWN_FLAG                = 21301
    UNEXPECTED_POSITIONAL       = 21302

    # --- value errors ---
    SINGLE_VALUE_EXPECTED       = 21401
    REPEATED_FLAG               = 21402
    FLAG_ASSIGNMENT             = 21403
    NOT_AN_INTEGER              = 21404
    NOT_A_FLOAT                 = 21405
    MALFORMED_URL               = 21406
    INVALID_CHOICE              = 21407

    # --- delegated errors ---
    FLAG_VALUE                  = 21501
    POSITIONAL_VALUE            = 21502

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    """
    program name shown in fault headers: explicit option, then __prog__ in __main__,
    then the basename of argv[0].
    """
    if (prog := options.get("prog", Unset)) is not Unset:
        return prog
    try:
        fallback = os.path.basename(sys.argv[0]) or "pennant"
    except IndexError:
        fallback = "pennant"
    return getattr(__import__("__main__"), "__prog__", fallback)


def _palette(defaults, colorful):
    """
    build a (styler, text) pair for a renderer.

    - defaults: the renderer's own palette, overridden by __styles__ in __main__.
    - colorful: when False every style is dropped and fragments become plain Text.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))

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

    return styler, text


class FlagException(Exception):
    """
    base class of every user-facing failure.

    - message: one lowercased sentence.
    - options: read-only keyword context (hint, token, flag, ...), plus the
      runtime switches understood by rendering (shell, fancy, colorful, prog).
    - code/title: class-level defaults, overridable through options.
    """
    code = Unset
    title = "error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        styler, text = _palette({
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, self.options.get("colorful", True))

        code = self.options.get("code", self.code)
        title = self.options.get("title", self.title)
        fancy = self.options.get("fancy", False)

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(code.normalize() if code else "?", styler("code")),
            " | ",
            text(title.title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left", width=console.width - 4)

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class HalfQuotedStringError(FlagException):
    code = FaultCode.HALF_QUOTED_STRING
    title = "half-quoted string"

class MalformedQuoteError(FlagException):
    code = FaultCode.MALFORMED_QUOTE
    title = "malformed quoted value"

class InvalidFlagNameError(FlagException):
    code = FaultCode.INVALID_FLAG_NAME
    title = "invalid flag name"

class DuplicateFlagError(FlagException):
    code = FaultCode.DUPLICATED_FLAG
    title = "duplicated flag"

class UnknownFlagError(FlagException):
    code = FaultCode.UNKNOWN_FLAG
    title = "unknown flag"

class UnexpectedPositionalError(FlagException):
    code = FaultCode.UNEXPECTED_POSITIONAL
    title = "unexpected positional arguments"

class SingleValueError(FlagException):
    code = FaultCode.SINGLE_VALUE_EXPECTED
    title = "single value expected"

class RepeatedFlagError(FlagException):
    code = FaultCode.REPEATED_FLAG
    title = "repeated flag"

class FlagAssignmentError(FlagException):
    code = FaultCode.FLAG_ASSIGNMENT
    title = "flag cannot take a value"

class NotAnIntegerError(FlagException):
    code = FaultCode.NOT_AN_INTEGER
    title = "not an integer"

class NotAFloatError(FlagException):
    code = FaultCode.NOT_A_FLOAT
    title = "not a float"

class MalformedUrlError(FlagException):
    code = FaultCode.MALFORMED_URL
    title = "malformed url"

class InvalidChoiceError(FlagException):
    code = FaultCode.INVALID_CHOICE
    title = "invalid choice"

class FlagValueError(FlagException):
    code = FaultCode.FLAG_VALUE
    title = "invalid flag value"

class PositionalValueError(FlagException):
    code = FaultCode.POSITIONAL_VALUE
    title = "invalid positional arguments"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagException).
    - options are merged into a copy of the fault via copy.replace before triggering.
    - with shell=True the fault is rendered on stderr and the process exits with 1;
      otherwise it is raised.
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

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FlagException",
    "HalfQuotedStringError",
    "MalformedQuoteError",
    "InvalidFlagNameError",
    "DuplicateFlagError",
    "UnknownFlagError",
    "UnexpectedPositionalError",
    "SingleValueError",
    "RepeatedFlagError",
    "FlagAssignmentError",
    "NotAnIntegerError",
    "NotAFloatError",
    "MalformedUrlError",
    "InvalidChoiceError",
    "FlagValueError",
    "PositionalValueError",
    "FaultCode",
    "trigger",
    "getdoc",
)
