"""
Optset faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the library
  raises. Codes are grouped by domain (construction, parsing, conversion) so
  hosts can search logs and docs predictably.
- OptionsFault: base type that carries message + options and knows how to render
  itself (rich), copy itself with overrides (copy.replace), and surface itself
  (raise, or print and exit in shell mode).
- trigger(): central entry point to surface a fault with runtime options.
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- ConstructionError: malformed option descriptor or duplicated alias (registration time).
- OptionError: a parse could not complete (missing/extra values, bad bundles).
- ConversionError: a value could not be converted to the requested type.
- OutOfRangeError: a callback read a value index beyond the option's count.

Integration
- OptionSet.parse() always raises.
- invoke() surfaces faults through trigger(), which prints them via rich in shell mode.
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

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - construction (211xx)
      • EMPTY_PROTOTYPE, EMPTY_NAME, CONFLICTING_TERMINATORS, NEGATIVE_COUNT,
        VALUELESS_COUNT, MISPLACED_SEPARATORS, EMPTY_SEPARATOR, DUPLICATED_NAME,
        REJECTED_PROTOTYPE
    - parsing (221xx)
      • MISSING_VALUE, TOO_MANY_VALUES, BUNDLED_VALUE_OPTION, BUNDLED_UNREGISTERED,
        VALUE_OUT_OF_RANGE
    - conversion (231xx)
      • UNCONVERTIBLE_VALUE, UNKNOWN_CONVERTER
    """
    # --- construction errors (211xx) ---
    EMPTY_PROTOTYPE         = 21101
    EMPTY_NAME              = 21102
    CONFLICTING_TERMINATORS = 21103
    NEGATIVE_COUNT          = 21104
    VALUELESS_COUNT         = 21105
    MISPLACED_SEPARATORS    = 21106
    EMPTY_SEPARATOR         = 21107
    DUPLICATED_NAME         = 21108
    REJECTED_PROTOTYPE      = 21109

    # --- parsing errors (221xx) ---
    MISSING_VALUE           = 22101
    TOO_MANY_VALUES         = 22102
    BUNDLED_VALUE_OPTION    = 22103
    BUNDLED_UNREGISTERED    = 22104
    VALUE_OUT_OF_RANGE      = 22105

    # --- conversion errors (231xx) ---
    UNCONVERTIBLE_VALUE     = 23101
    UNKNOWN_CONVERTER       = 23102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class OptionsFault(Exception):
    """
    base type of every fault raised by optset.

    a fault is a message plus a read-only mapping of options. well-known keys:
    - code: FaultCode of the fault.
    - title: short, lowercased headline used when rendering.
    - hint: one actionable sentence shown under the message.
    - shell/fancy/colorful: rendering switches merged in by trigger().
    subclasses expose their specific keys (name, value, type, ...) as properties.
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

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

        prog = text(getattr(main, "__prog__", os.path.basename(sys.argv[0] if sys.argv else "") or "optset"), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else self.code

        header = Text.assemble(
            "[ ",
            prog,
            *((" — ", text(code, styler("code"))) if code is not None else ()),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class ConstructionError(OptionsFault, ValueError):
    """malformed option descriptor, or an alias clash on registration."""

    @property
    def prototype(self):
        return self.options.get("prototype")


class OptionError(OptionsFault):
    """a parse could not complete; `name` is the offending option as typed."""

    @property
    def name(self):
        return self.options.get("name")


class ConversionError(OptionError):
    """a value could not be converted; the converter's failure is the __cause__."""

    @property
    def value(self):
        return self.options.get("value")

    @property
    def type(self):
        return self.options.get("type")


class OutOfRangeError(OptionsFault, IndexError):
    @property
    def index(self):
        return self.options.get("index")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see OptionsFault).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console and the process exits; otherwise
      the fault is raised.
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
    are FaultCode instances and values are short documentation strings; None
    when not found.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "OptionsFault",
    "ConstructionError",
    "OptionError",
    "ConversionError",
    "OutOfRangeError",
    "trigger",
    "getdoc",
)
