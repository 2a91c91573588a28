r"""
Optset matching policies.

An OptionSet never matches tokens by itself: it holds a matching policy by
reference and hands it every token together with the per-parse OptionContext.
Swapping the policy customizes matching without subclassing the set.

Protocol (MatchingPolicy)
- admit(optionset, option): validate an option before it is registered.
- context(optionset): create the OptionContext of one parse call.
- split(token): break a token into (indicator, name, value) or return None.
- parse(optionset, token, context) -> bool: consume one token; False means the
  token is not an option and must be handed back to the caller.

DefaultPolicy (Getopt::Long style)
1. a token arriving while an option is pending is that option's value, whatever
   it looks like ("-a -b" gives "-b" to a required "-a").
2. tokens are split with (--|-|/)<name>([:=]<value>)?; anything else is not an option.
3. the name is resolved in a fixed order:
   a. exact alias            "-v", "--color=auto", "/h"
   b. boolean toggle         "-v+" (value is the whole token), "-v-" (value None)
   c. bundle, '-' only       "-abc" → -a -b -c ; "-DNAME" → -D with value NAME
   d. otherwise the token is not an option.
4. values are split by the option's separators and accumulated; the option
   completes as soon as it has `count` values, and more than `count` is an error.

CaseInsensitivePolicy
- only admits lower-case prototypes and lower-cases option names before
  delegating to another policy (the default one unless given).
"""
import re
from typing import Protocol

from .context import OptionContext
from .faults import FaultCode, ConstructionError, OptionError
from .options import ValueArity
from .utils import *


class MatchingPolicy(Protocol):
    def admit(self, optionset, option, /) -> None: ...
    def context(self, optionset, /) -> OptionContext: ...
    def split(self, token, /) -> tuple[str, str, str | None] | None: ...
    def parse(self, optionset, token, context, /) -> bool: ...


class DefaultPolicy:
    """
    Getopt::Long-style matching (see the module documentation for the rules).
    """

    pattern = re.compile(r"(?P<indicator>--|-|/)(?P<name>[^:=]+)(?:[:=](?P<value>.*))?", re.DOTALL)

    def admit(self, optionset, option, /):
        return None

    def context(self, optionset, /):
        return OptionContext(optionset)

    def split(self, token, /):
        """
        return (indicator, name, value) for an option-like token, else None.

        value is None when the token has no '=' or ':' part and may be an empty
        string ("-a=" → ("-", "a", "")).
        """
        if not (match := self.pattern.fullmatch(token)):
            return None
        return match["indicator"], match["name"], match["value"]

    def parse(self, optionset, token, context, /):
        if context.option is not None:
            self._accumulate(optionset, token, context)
            return True

        if (parts := self.split(token)) is None:
            return False
        indicator, name, value = parts

        if (option := optionset.get(name)) is not None:
            context.option = option
            context.name = indicator + name
            if option.arity is ValueArity.NONE:
                # value-less options report the alias they were called by
                context.values.append(name)
                option.invoke(context)
            elif value is not None:
                self._accumulate(optionset, value, context)
            return True

        if self._toggle(optionset, token, name, context):
            return True
        return self._bundle(optionset, token, indicator, name, context)

    def _toggle(self, optionset, token, name, context):
        if name[-1] not in "+-":
            return False
        if (option := optionset.get(name[:-1])) is None or option.arity is not ValueArity.NONE:
            return False
        context.option = option
        context.name = token
        context.values.append(token if name[-1] == "+" else None)
        option.invoke(context)
        return True

    def _bundle(self, optionset, token, indicator, name, context):
        if indicator != "-":
            return False
        if (option := optionset.get(name[0])) is None:
            return False

        if option.arity is not ValueArity.NONE:
            # -DNAME: everything after the option character is its value
            context.option = option
            context.name = indicator + name[0]
            self._accumulate(optionset, token[len(indicator) + 1:], context)
            return True

        localizer = optionset.localizer
        bundle = []
        for character in name:
            alias = indicator + character
            if (option := optionset.get(character)) is None:
                raise OptionError(
                    localize(localizer, "cannot bundle unregistered option {name!r}", name=alias),
                    code=FaultCode.BUNDLED_UNREGISTERED,
                    title=localize(localizer, "unregistered bundled option"),
                    hint=localize(
                        localizer,
                        "only registered single-character options can be bundled in {token!r}",
                        token=token
                    ),
                    name=alias,
                )
            if option.arity is not ValueArity.NONE:
                raise OptionError(
                    localize(localizer, "cannot bundle option {name!r} that requires a value", name=alias),
                    code=FaultCode.BUNDLED_VALUE_OPTION,
                    title=localize(localizer, "bundled option takes a value"),
                    hint=localize(localizer, "pass {name} on its own (for example: {name} VALUE)", name=alias),
                    name=alias,
                )
            bundle.append((alias, option))

        for alias, option in bundle:
            context.option = option
            context.name = alias
            context.values.append(name)
            option.invoke(context)
        return True

    def _accumulate(self, optionset, value, context):
        option = context.option
        if option.separators:
            context.values.extend(re.split("|".join(map(re.escape, option.separators)), value))
        else:
            context.values.append(value)

        if len(context.values) == option.count:
            option.invoke(context)
        elif len(context.values) > option.count:
            localizer = optionset.localizer
            raise OptionError(
                localize(
                    localizer,
                    "found {found} option values when expecting {expected}",
                    found=len(context.values), expected=option.count
                ),
                code=FaultCode.TOO_MANY_VALUES,
                title=localize(localizer, "too many option values"),
                hint=localize(
                    localizer, "{name} takes exactly {expected} value(s)", name=context.name, expected=option.count
                ),
                name=context.name,
            )


class CaseInsensitivePolicy:
    """
    Matching policy lower-casing option names before delegating.

    Prototypes must be written in lower case; anything else is rejected at
    registration so that no alias becomes unreachable.
    """

    delegate = mirror("delegate")

    def __init__(self, delegate=Unset, /):
        self._delegate = DefaultPolicy() if delegate is Unset else delegate

    def admit(self, optionset, option, /):
        if option.prototype.lower() != option.prototype:
            localizer = optionset.localizer
            raise ConstructionError(
                localize(localizer, "prototypes must be lower-case (got {prototype!r})", prototype=option.prototype),
                code=FaultCode.REJECTED_PROTOTYPE,
                title=localize(localizer, "rejected prototype"),
                hint=localize(localizer, "write the prototype as {prototype!r}", prototype=option.prototype.lower()),
                prototype=option.prototype,
            )
        self._delegate.admit(optionset, option)

    def context(self, optionset, /):
        return self._delegate.context(optionset)

    def split(self, token, /):
        return self._delegate.split(token)

    def parse(self, optionset, token, context, /):
        if context.option is not None or (parts := self.split(token)) is None:
            return self._delegate.parse(optionset, token, context)
        indicator, name, value = parts
        return self._delegate.parse(
            optionset,
            indicator + name.lower() + ("=" + value if value is not None else ""),
            context
        )


__all__ = (
    "MatchingPolicy",
    "DefaultPolicy",
    "CaseInsensitivePolicy",
)
