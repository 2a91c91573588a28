"""
Optset utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the options, context and option-set layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated completions for clean tracebacks.

- localize(localizer, template, **fields)
  • Localize a fault message, then fill its placeholders, tolerating translations
    that drop or rename them.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr), handing
    out copies of containers so descriptors stay immutable from the outside.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used wherever None is a legitimate user value (a description, a default,
    an absent option value) and the API still needs to tell “not provided”
    apart from “provided as None”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0 or "" are preserved as-is.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name) -> decorator

    Only metadata changes; behavior is untouched. Built-in callables that
    refuse attribute updates raise TypeError.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Copy container values so callers can't reach the backing storage.

    - tuple: returned as-is (already immutable at the top level).
    - other Sequence (non-string): new list.
    - Mapping: new dict.
    - Set: new set.
    - anything else: returned as-is.
    """
    if isinstance(object, tuple):
        return object
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(object)
    elif isinstance(object, Mapping):
        return dict(object)
    elif isinstance(object, Set):
        return set(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns a copy
    for container types (see _immortalize).

    Example
    - Given self._names, declare names = mirror("names") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def identity(object, /):
    """
    Return the argument unchanged (the default message localizer).
    """
    return object


class _Placeholders(dict):
    def __missing__(self, key):
        return "{" + key + "}"


def localize(localizer, template, /, **fields):
    """
    Run template through localizer, then fill its {fields}.

    Translations may drop, repeat or rename placeholders: unknown ones are
    left as written, and a translation that is not a valid format string is
    returned unformatted.

        >>> localize(identity, "missing value for {name!r}", name="-a")
        "missing value for '-a'"
    """
    text = localizer(template)
    try:
        return text.format_map(_Placeholders(fields))
    except (ValueError, IndexError, AttributeError):
        return text


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "identity",
    "localize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
