r"""
Optset option descriptors.

Overview
- ValueArity: whether an option takes no value, an optional value, or a required one.
- Option: an immutable descriptor built from an alias prototype such as
  "h|?|help", "D|define=" or "color:".

Prototype grammar
- aliases are joined with '|' and are written without their indicator ('-', '--', '/').
- a trailing '=' on an alias marks the option as requiring a value; a trailing ':'
  marks the value as optional. Every alias carrying a terminator must agree on it.
- aliases keep their registration order; help text lists them in that order.

Values
- count: how many values a single invocation consumes (default 1). A value-less
  option may use 0.
- separators: substrings splitting one token into several values; only meaningful
  when count > 1 (e.g. "-Dkey=value" with count=2 and separators=("=",)).

Completion
- Option.invoke(context) runs the completion (the bound callback, or __complete__
  when subclassed) and then resets the context. It is the single reset point of
  a parse.

Example
    >>> option = Option("D|define=", "define a symbol", count=2, separators=("=",))
    >>> option.names, option.arity, option.count
    (['D', 'define'], <ValueArity.REQUIRED: 'required'>, 2)
"""
import functools
import operator
from enum import Enum

from .faults import FaultCode, ConstructionError
from .utils import *


class ValueArity(Enum):
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


_TERMINATORS = {"=": ValueArity.REQUIRED, ":": ValueArity.OPTIONAL}


def _split_prototype(prototype, /):
    """
    Internal: split a prototype into bare aliases and derive the value arity.

    The terminator of an alias is the first '=' or ':' found after its first
    character (so a lone ":" or "=" is a legitimate one-character alias with no
    terminator). Everything from the terminator on is dropped from the alias.

    Raises
    - ConstructionError: empty prototype, empty alias, conflicting terminators.
    """
    if not prototype:
        raise ConstructionError(
            "option prototype cannot be the empty string",
            code=FaultCode.EMPTY_PROTOTYPE,
            title="empty prototype",
            prototype=prototype,
        )

    names = []
    terminator = None
    for name in prototype.split("|"):
        if not name:
            raise ConstructionError(
                "empty option names are not supported in prototype %r" % prototype,
                code=FaultCode.EMPTY_NAME,
                title="empty option name",
                hint="remove the doubled '|' from the prototype",
                prototype=prototype,
            )
        end = min((index for index in (name.find(marker, 1) for marker in "=:") if index > 0), default=-1)
        if end > 0:
            if terminator is not None and terminator != name[end]:
                raise ConstructionError(
                    "conflicting option types in prototype %r: %r vs. %r" % (prototype, terminator, name[end]),
                    code=FaultCode.CONFLICTING_TERMINATORS,
                    title="conflicting option types",
                    hint="use either '=' (required value) or ':' (optional value) on every alias",
                    prototype=prototype,
                )
            terminator = name[end]
            name = name[:end]
        names.append(name)

    return names, _TERMINATORS.get(terminator, ValueArity.NONE)


class Option:
    """
    Immutable option descriptor.

    Construction
    - Option(prototype, description=Unset, /, callback=Unset, count=1, separators=Unset)
    - callback, when given, receives the OptionContext once the option completed;
      a descriptor without callback completes silently.

    Read-only properties
    - prototype, names (copy), description, arity, count, separators (tuple), callback.

    Errors
    - TypeError for wrongly typed arguments.
    - ConstructionError for malformed prototypes and inconsistent count/separators.
    """

    __introspectable__ = (
        "names",
        "description",
        "arity",
        "count",
        "separators",
    )

    prototype = mirror("prototype")
    description = mirror("description")
    arity = mirror("arity")
    count = mirror("count")
    separators = mirror("separators")
    callback = mirror("callback")

    def __init__(self, prototype, description=Unset, /, callback=Unset, count=1, separators=Unset):
        if not isinstance(prototype, str):
            raise TypeError("option prototype must be a string")
        if not isinstance(description, str | Unset | None):
            raise TypeError("option description must be a string")
        if callback is not Unset and not callable(callback):
            raise TypeError("option callback must be callable")
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError("option count must be an integer")

        names, arity = _split_prototype(prototype)

        if count < 0:
            raise ConstructionError(
                "option count cannot be negative (got %d)" % count,
                code=FaultCode.NEGATIVE_COUNT,
                title="negative value count",
                prototype=prototype,
            )
        if count == 0 and arity is not ValueArity.NONE:
            raise ConstructionError(
                "cannot provide a count of 0 for an option taking a %s value" % arity.value,
                code=FaultCode.VALUELESS_COUNT,
                title="count of zero",
                hint="drop the '=' or ':' terminator, or use a count of at least 1",
                prototype=prototype,
            )

        separators = tuple(coalesce(separators, ()))
        if separators and count <= 1:
            raise ConstructionError(
                "cannot provide separators if count is 0 or 1",
                code=FaultCode.MISPLACED_SEPARATORS,
                title="separators without multiple values",
                prototype=prototype,
            )
        for separator in separators:
            if not isinstance(separator, str):
                raise TypeError("option separators must be strings")
            elif not separator:
                raise ConstructionError(
                    "option separators cannot be the empty string",
                    code=FaultCode.EMPTY_SEPARATOR,
                    title="empty separator",
                    prototype=prototype,
                )

        self._prototype = prototype
        self._names = tuple(names)
        self._description = coalesce(description)
        self._arity = arity
        self._count = count
        self._separators = separators
        self._callback = callback

    @property
    def names(self):
        # Aliases come out as a fresh list so callers can't reorder the descriptor.
        return list(self._names)

    def __complete__(self, context, /):
        """
        Completion behavior: forward the context to the bound callback.

        Subclasses may override this instead of binding a callback.
        """
        if self._callback is Unset:
            return
        self._callback(context)

    def invoke(self, context, /):
        """
        Complete this option for the given context, then reset the context.

        The reset (option, name and collected values cleared) happens even when
        the completion raises, so the context is never left half-consumed.
        """
        try:
            self.__complete__(context)
        finally:
            context.option = None
            context.name = None
            context.values.clear()

    def __str__(self):
        return self._prototype

    def __repr__(self):
        return f"option({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


__all__ = (
    "ValueArity",
    "Option",
)
