"""
Per-parse state: the option context and its value collection.

An OptionContext is created fresh by every OptionSet.parse() call (through the
set's matching policy) and dropped when the call returns. It records
- option: the Option currently accumulating values (None when idle),
- name: the token text that matched it, indicator included ("--color", "/d-"),
- values: the values collected so far (OptionValueCollection),
- index: the 0-based position of the token being scanned,
- optionset: the OptionSet the parse runs against.

The value collection lets completions probe positions safely:
- an index beyond the option's count is an OutOfRangeError;
- a missing position of a required option is an OptionError naming the option;
- a missing position of an optional option reads as None.
"""
from collections.abc import Sequence

from .faults import FaultCode, OptionError, OutOfRangeError
from .options import ValueArity
from .utils import *


def _localizer(context, /):
    return context.optionset.localizer if context.optionset is not None else identity


def missing_value(context, /):
    """
    build the fault reported when a required option ran out of values.
    """
    localizer = _localizer(context)
    return OptionError(
        localize(localizer, "missing required value for option {name!r}", name=context.name),
        code=FaultCode.MISSING_VALUE,
        title=localize(localizer, "missing option value"),
        hint=localize(localizer, "provide a value (for example: {name}=VALUE or {name} VALUE)", name=context.name),
        name=context.name,
    )


class OptionValueCollection(Sequence):
    """
    Ordered values collected for the active option of a context.

    len() and iteration cover the values actually collected; indexing follows
    the option's declared count (see the module documentation).
    """

    def __init__(self, context, /):
        self._context = context
        self._values = []

    def _validate(self, index):
        context = self._context
        if context.option is None:
            raise RuntimeError("option context has no active option")
        if index < 0 or index >= context.option.count:
            localizer = _localizer(context)
            raise OutOfRangeError(
                localize(
                    localizer,
                    "value index {index} is out of range for option {name!r} (count is {count})",
                    index=index, name=context.name, count=context.option.count
                ),
                code=FaultCode.VALUE_OUT_OF_RANGE,
                title=localize(localizer, "value index out of range"),
                hint=localize(localizer, "{name} takes {count} value(s)", name=context.name, count=context.option.count),
                index=index,
            )
        if context.option.arity is ValueArity.REQUIRED and index >= len(self._values):
            raise missing_value(context)

    def __getitem__(self, index):
        if not isinstance(index, int):
            raise TypeError("option values are indexed by integers")
        self._validate(index)
        return self._values[index] if index < len(self._values) else None

    def __setitem__(self, index, value):
        self._values[index] = value

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __contains__(self, value):
        return value in self._values

    def append(self, value, /):
        self._values.append(value)

    def extend(self, values, /):
        self._values.extend(values)

    def clear(self):
        self._values.clear()

    def tolist(self):
        return list(self._values)

    def __str__(self):
        return ", ".join(map(str, self._values))

    def __repr__(self):
        return "option-values(%r)" % self._values


class OptionContext:
    """
    Mutable state of one parse call.

    Attributes
    - option: Option | None
    - name: str | None
    - index: int (token position; -1 before the first token)
    - optionset: the originating OptionSet (read-only)
    - values: OptionValueCollection (read-only attribute, mutable content)
    - value: shortcut for values[0]
    """

    def __init__(self, optionset=None, /):
        self._optionset = optionset
        self._values = OptionValueCollection(self)
        self.option = None
        self.name = None
        self.index = -1

    @property
    def optionset(self):
        return self._optionset

    @property
    def values(self):
        return self._values

    @property
    def value(self):
        return self._values[0]

    def __repr__(self):
        return "option-context(option=%r, name=%r, values=%r, index=%d)" % (
            self.option, self.name, self._values.tolist(), self.index
        )

    def __rich_repr__(self):
        yield "option", self.option
        yield "name", self.name
        yield "values", self._values.tolist()
        yield "index", self.index


__all__ = (
    "OptionValueCollection",
    "OptionContext",
)
