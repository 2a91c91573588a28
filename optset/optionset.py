r"""
Optset option sets.

An OptionSet is an ordered, mutable sequence of Option descriptors plus an
alias index used by the matching policy. It drives a parse, renders the
option descriptions, and carries the runtime flags used when a fault surfaces.

Overview
- OptionSet: registry (MutableSequence of Option), parse driver, help text.
- invoke(optionset, prompt): run a parse on sys.argv[1:] or a prompt string.

Registration
- add(option) / add(prototype, callback) / add(prototype, description, callback)
- @optionset.option(prototype, description) decorates a callback.
- aliases are unique across the set; adding, replacing or removing an option
  updates the alias index atomically (a failed insertion leaves no alias behind).

Typed callbacks
    >>> defines = {}
    >>> options = OptionSet().add("D=", "define a symbol", defines.__setitem__,
    ...                           type=(str, int), separators=("=",))
    >>> options.parse(["-Dlevel=3", "file.txt"])
    ['file.txt']
    >>> defines
    {'level': 3}

Help text
    >>> options.write_option_descriptions(sys.stdout)
      -D=VALUE                   define a symbol
"""
import shlex
import sys
from collections import defaultdict
from collections.abc import MutableSequence

from rich.text import Text

from .context import missing_value
from .converters import ConverterRegistry, default_converters
from .faults import FaultCode, ConstructionError, OptionsFault, trigger
from .options import ValueArity, Option
from .policies import DefaultPolicy
from .utils import *

OPTION_WIDTH = 29


class OptionSet(MutableSequence):
    """
    Ordered option registry and parse driver.

    Construction
    - OptionSet(localizer=Unset, /, *, policy=Unset, converters=Unset,
                shell=False, fancy=False, colorful=True)
    - localizer: str -> str hook applied to every user-visible message.
    - policy: MatchingPolicy (DefaultPolicy by default).
    - converters: ConverterRegistry (a fresh child of the built-ins by default).
    - shell, fancy, colorful: fault rendering flags used by invoke().
    """

    localizer = mirror("localizer")
    policy = mirror("policy")
    converters = mirror("converters")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def __init__(
        self,
        localizer=Unset,
        /, *,
        policy=Unset,
        converters=Unset,
        shell=False,
        fancy=False,
        colorful=True
    ):
        if localizer is not Unset and not callable(localizer):
            raise TypeError("option set localizer must be callable")
        if not isinstance(converters, ConverterRegistry | Unset):
            raise TypeError("option set converters must be a ConverterRegistry")

        self._localizer = coalesce(localizer, identity)
        self._policy = DefaultPolicy() if policy is Unset else policy
        self._converters = ConverterRegistry(default_converters) if converters is Unset else converters
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._options = []
        self._index = {}

    # registry

    def _register(self, option):
        if not isinstance(option, Option):
            raise TypeError("option set items must be Option instances")
        self._policy.admit(self, option)

        added = []
        try:
            for name in option.names:
                if name in self._index:
                    raise ConstructionError(
                        localize(self._localizer, "option name {name!r} is already registered", name=name),
                        code=FaultCode.DUPLICATED_NAME,
                        title=localize(self._localizer, "duplicated option name"),
                        hint=localize(self._localizer, "every alias may belong to a single option"),
                        prototype=option.prototype,
                    )
                self._index[name] = option
                added.append(name)
        except ConstructionError:
            for name in added:
                del self._index[name]
            raise

    def _unregister(self, option):
        for name in option.names:
            del self._index[name]

    def __getitem__(self, index):
        return self._options[index]

    def __setitem__(self, index, option):
        if isinstance(index, slice):
            raise TypeError("option sets do not support slice assignment")
        previous = self._options[index]
        self._unregister(previous)
        try:
            self._register(option)
        except Exception:
            self._register(previous)
            raise
        self._options[index] = option

    def __delitem__(self, index):
        for option in (self._options[index] if isinstance(index, slice) else [self._options[index]]):
            self._unregister(option)
        del self._options[index]

    def __len__(self):
        return len(self._options)

    def insert(self, index, option):
        self._register(option)
        self._options.insert(index, option)

    def reverse(self):
        # aliases stay bound to the same options, only the help order changes
        self._options.reverse()

    def get(self, name, /):
        """
        Return the option registered under the bare alias name, or None.
        """
        if not isinstance(name, str):
            raise TypeError("option names must be strings")
        return self._index.get(name)

    def add(self, source, /, *parameters, type=str, count=Unset, separators=Unset, context=False):
        """
        Register an option and return the set.

        Forms
        - add(option)
        - add(prototype, callback, *, type=str, count=Unset, separators=Unset, context=False)
        - add(prototype, description, callback, ...)

        type is a type tag or a tuple of type tags, one per value; count
        defaults to the tuple length (1 otherwise). The callback receives the
        converted values, then the OptionContext when context is true.
        """
        match (source, *parameters):
            case (Option() as option,):
                if type is not str or count is not Unset or separators is not Unset or context:
                    raise TypeError("add() keywords only apply to prototypes")
                self.append(option)
                return self
            case (str() as prototype, callback):
                description = Unset
            case (str() as prototype, description, callback):
                pass
            case _:
                raise TypeError("add() takes an Option, or a prototype, an optional description and a callback")

        if not callable(callback):
            raise TypeError("option callback must be callable")

        if isinstance(type, tuple):
            types = type
            count = coalesce(count, len(types))
            if len(types) != count:
                raise TypeError("add() got %d types for %r values" % (len(types), count))
        else:
            count = coalesce(count, 1)
            types = (type,) * count if isinstance(count, int) else ()

        self.append(Option(prototype, description, self._completion(callback, types, context), count, separators))
        return self

    def _completion(self, callback, types, forward, /):
        @rename("complete")
        def complete(context):
            values = [
                self._converters.convert(
                    context.values[index], type, name=context.name, localizer=self._localizer
                )
                for index, type in enumerate(types)
            ]
            if forward:
                callback(*values, context)
            else:
                callback(*values)

        return complete

    def option(self, prototype, description=Unset, /, **options):
        """
        Decorator registering the function as the callback of prototype.

            @options.option("v|verbose", "increase verbosity")
            def verbose(name):
                ...
        """

        @rename("option")
        def wrapper(callback):
            self.add(prototype, description, callback, **options)
            return callback

        return wrapper

    # parsing

    def parse(self, tokens, /):
        """
        Match tokens against the registered options.

        Returns the tokens that are not options (or follow a "--" terminator)
        in their original order. Raises OptionError/ConversionError; callbacks
        invoked before a failure are not rolled back.
        """
        if isinstance(tokens, str):
            raise TypeError("parse() expects a sequence of tokens, not a string")

        context = self._policy.context(self)
        unprocessed = []
        process = True
        for token in tokens:
            context.index += 1
            if not process:
                unprocessed.append(token)
            elif context.option is None and token == "--":
                process = False
            elif not self._policy.parse(self, token, context):
                unprocessed.append(token)

        if context.option is not None:
            if context.option.arity is ValueArity.REQUIRED:
                raise missing_value(context)
            context.option.invoke(context)
        return unprocessed

    # descriptions

    def _layout(self):
        for option in self._options:
            names = option.names
            head = ("  -" if len(names[0]) == 1 else "      --") + names[0] + "".join(
                (", -" if len(name) == 1 else ", --") + name for name in names[1:]
            )
            match option.arity:
                case ValueArity.REQUIRED:
                    value = self._localizer("=VALUE")
                case ValueArity.OPTIONAL:
                    value = self._localizer("[=VALUE]")
                case _:
                    value = ""
            written = len(head) + len(value)
            padding = " " * (OPTION_WIDTH - written) if written < OPTION_WIDTH else "\n" + " " * OPTION_WIDTH
            description = self._localizer(option.description if option.description is not None else "")
            yield head, value, padding, description

    def write_option_descriptions(self, sink, /):
        """
        Write one help entry per option to sink (anything with a write method).
        """
        for head, value, padding, description in self._layout():
            sink.write(head + value + padding + description + "\n")

    def __rich__(self):
        colorful = self._colorful
        styles = defaultdict(str, {
            "option-name": "bold #00E5FF",  # neon cyan aliases
            "option-value": "#FFD166",  # amber value placeholder
            "option-description": "#C8C8D0",  # soft light gray description
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        return Text("\n").join(
            Text.assemble(
                (head, styler("option-name")),
                (value, styler("option-value")),
                padding,
                (description, styler("option-description")),
            )
            for head, value, padding, description in self._layout()
        )

    def __repr__(self):
        return "option-set(%r)" % self._options


def invoke(optionset, prompt=Unset, /):
    """
    Parse the process arguments (or prompt) with optionset.

    parameters
    - optionset: OptionSet to run.
    - prompt: Unset for sys.argv[1:], a command-line string (split with
      shlex), or a sequence of tokens.

    returns
    - the unprocessed tokens.

    behavior
    - faults propagate, unless the set is in shell mode: they are then printed
      to stderr with rich and the process exits with status 1.
    """
    if not isinstance(optionset, OptionSet):
        raise TypeError("invoke() first argument must be an OptionSet")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    else:
        tokens = list(prompt)

    try:
        return optionset.parse(tokens)
    except OptionsFault as fault:
        if not optionset.shell:
            raise
        trigger(fault, shell=True, fancy=optionset.fancy, colorful=optionset.colorful)


__all__ = (
    "OptionSet",
    "invoke",
)
