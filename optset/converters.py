"""
Optset value converters.

A converter registry maps a type tag to a function turning one command-line
string into a value of that type, plus the default value used when an optional
option was given without a value.

Overview
- ConverterRegistry: register/unregister/lookup/convert; a registry may have a
  parent it falls back to, which is how every OptionSet gets its own registry on
  top of the shared built-ins without leaking registrations between sets.
- default_converters: the module-level registry holding the built-ins.
- converter(type, default=None): decorator registering a function on `default_converters`.
- unsigned, char: type tags for non-negative integers and single characters.

Built-ins
    str       passthrough             default None
    int       int(text)               default 0
    unsigned  int(text) >= 0          default 0
    float     float(text)             default 0.0
    complex   complex(text)           default 0j
    Decimal   Decimal(text)           default Decimal(0)
    Fraction  Fraction(text)          default Fraction(0)
    bool      true/false/yes/no/on/off/1/0 (any case)   default False
    char      exactly one character   default None
    Path      Path(text)              default None
    Enum      member by name (any Enum subclass without its own converter)   default None

Failure contract
- a type without a converter fails with ConversionError when first converted,
  never when it is registered on an option.
- any exception raised by a converter is wrapped into ConversionError, which
  carries the original string, the type name and the option name; the original
  exception stays available as __cause__.

Example
    >>> registry = ConverterRegistry(default_converters)
    >>> registry.convert("42", int, name="-n")
    42
    >>> registry.convert(None, int, name="-n")
    0
"""
import builtins
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from pathlib import Path
from typing import NewType

from .faults import FaultCode, ConversionError
from .utils import *

unsigned = NewType("unsigned", int)
char = NewType("char", str)

_BOOLEANS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


def _typename(type, /):
    return getattr(type, "__name__", repr(type))


def _boolean(text, /):
    try:
        return _BOOLEANS[text.strip().lower()]
    except KeyError:
        raise ValueError("%r is not a boolean" % text) from None


def _unsigned(text, /):
    if (value := int(text)) < 0:
        raise ValueError("%r is negative" % text)
    return unsigned(value)


def _char(text, /):
    if len(text) != 1:
        raise ValueError("%r is not a single character" % text)
    return char(text)


class ConverterRegistry:
    """
    Type tag → (converter, default) mapping with an optional parent fallback.

    Type tags are any hashable object: classes, NewType aliases, or plain
    markers chosen by the host. Lookup tries this registry, then its parents,
    then the Enum rule (member by name).
    """

    parent = mirror("parent")

    def __init__(self, parent=Unset, /):
        if not isinstance(parent, ConverterRegistry | Unset):
            raise TypeError("converter registry parent must be a ConverterRegistry")
        self._parent = parent
        self._entries = {}

    def register(self, type, converter, /, *, default=None):
        """
        Register converter (str -> value) for type, replacing any previous entry
        of this registry. Returns the registry to allow chaining.
        """
        if not callable(converter):
            raise TypeError("converter must be callable")
        self._entries[type] = (converter, default)
        return self

    def unregister(self, type, /):
        """
        Remove the entry of this registry for type (parents are untouched).
        Raises KeyError when this registry has no such entry.
        """
        del self._entries[type]

    def lookup(self, type, /):
        """
        Return the (converter, default) pair for type, or None when no registry
        in the chain knows it.
        """
        registry = self
        while registry is not Unset:
            try:
                return registry._entries[type]
            except KeyError:
                registry = registry._parent
        if isinstance(type, builtins.type) and issubclass(type, Enum):
            return (lambda text: type[text]), None
        return None

    def __contains__(self, type):
        return self.lookup(type) is not None

    def convert(self, value, type, /, *, name=Unset, localizer=Unset):
        """
        Convert value (a string, or None for an absent optional value) to type.

        parameters
        - value: str | None
        - type: the target type tag.
        - name: display name of the option being completed (used in faults).
        - localizer: message formatting hook applied to fault messages.

        returns
        - the converted value, or the registered default when value is None.

        raises
        - ConversionError when no converter exists or the converter fails.
        """
        localizer = coalesce(localizer, identity)
        name = coalesce(name)

        if (entry := self.lookup(type)) is None:
            raise ConversionError(
                localize(
                    localizer,
                    "no converter registered for type {type} (option {name!r})",
                    type=_typename(type), name=name
                ),
                code=FaultCode.UNKNOWN_CONVERTER,
                title=localize(localizer, "unknown converter"),
                hint=localize(
                    localizer,
                    "register one with converter({type}) or OptionSet.converters.register()",
                    type=_typename(type)
                ),
                value=value,
                type=_typename(type),
                name=name,
            )

        converter, default = entry
        if value is None:
            return default
        try:
            return converter(value)
        except Exception as error:
            raise ConversionError(
                localize(
                    localizer,
                    "could not convert string {value!r} to type {type} for option {name!r}",
                    value=value, type=_typename(type), name=name
                ),
                code=FaultCode.UNCONVERTIBLE_VALUE,
                title=localize(localizer, "unconvertible value"),
                hint=str(error),
                value=value,
                type=_typename(type),
                name=name,
            ) from error

    def __repr__(self):
        return "converter-registry(types=%r, parent=%r)" % (list(map(_typename, self._entries)), self._parent)


default_converters = ConverterRegistry()
default_converters.register(str, str)
default_converters.register(int, int, default=0)
default_converters.register(unsigned, _unsigned, default=unsigned(0))
default_converters.register(float, float, default=0.0)
default_converters.register(complex, complex, default=0j)
default_converters.register(Decimal, Decimal, default=Decimal(0))
default_converters.register(Fraction, Fraction, default=Fraction(0))
default_converters.register(bool, _boolean, default=False)
default_converters.register(char, _char)
default_converters.register(Path, Path)


def converter(type, /, *, default=None):
    """
    Decorator registering a function as the converter of type on default_converters.

        @converter(Color, default=Color.RED)
        def color(text):
            return Color[text.upper()]
    """

    @rename("converter")
    def wrapper(function):
        default_converters.register(type, function, default=default)
        return function

    return wrapper


__all__ = (
    "ConverterRegistry",
    "default_converters",
    "converter",
    "unsigned",
    "char",
)
