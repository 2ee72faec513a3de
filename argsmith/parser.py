"""
argsmith parser: declare arguments, parse a token vector, read values back.

What this module provides
- ArgParser: the registry of declared arguments (indexed by long name, with a
  short-alias index), the tokenizer/resolver state machine that walks the raw
  token vector, the validation pass, typed accessors and help rendering.

Quick start
    from argsmith import ArgParser

    parser = ArgParser("tool")
    parser.add_help()
    parser.add_flag("-v", "--verbose", descr="chatty output")
    parser.add_int_argument("-n", "--count", descr="repetitions").minimum(1).default(1)
    parser.add_string_argument("--files", descr="input files").positional().multivalue()

    if not parser.parse(["tool", "-vn", "3", "a.txt", "b.txt"]):
        raise SystemExit(1)
    if parser.help_requested:
        parser.print_help()
    else:
        parser.get_int("count")      # 3
        parser.get_values("files")   # ("a.txt", "b.txt")

Token rules
- "--name=value": inline value routed to "name".
- "--name": flag → True; helper → stop with help requested; otherwise the next
  token (not starting with "-") is the value, and multi-value arguments keep
  consuming tokens until the next switch.
- "-x=value": inline value for the single short alias "x".
- "-abc": chain of short aliases. Flags are set, a helper stops parsing and a
  value-taking alias borrows the following token(s) before the scan of the
  chain resumes with the next character.
- anything else (including "-" alone): positional. Positional arguments are
  filled in declaration order; extra tokens go to the last positional when it
  is multi-value.

Faults
- The first fault stops the parse. In shell mode (default) it is rendered on
  stderr, kept in `fault` and parse() returns False; with shell=False it is
  raised to the caller.
"""
import difflib
import logging
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import Argument
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


def _split_names(names):
    """
    Separate dashed declaration names into (short, long).

    Exactly one long name ("--name") is required; at most one short alias ("-n").
    """
    short = Unset
    long = Unset
    for name in names:
        if not isinstance(name, str):
            raise TypeError("argument names must be strings")
        if name.startswith("--"):
            if long is not Unset:
                raise ValueError("argument declares more than one long name: %r and %r" % (long, name))
            long = name
        elif name.startswith("-"):
            if short is not Unset:
                raise ValueError("argument declares more than one short name: %r and %r" % (short, name))
            short = name
        else:
            raise ValueError("argument name %r must start with '-' or '--'" % name)
    if long is Unset:
        raise TypeError("argument must declare a long name (for example: --name)")
    return short, long


def _is_switch(token):
    # "-" alone is a value (conventionally stdin/stdout), not a switch
    return token.startswith("-") and token != "-"


class ArgParser:
    """
    Registry, parsing state machine and accessor layer for one program.

    Parameters
    - name: str
      Program name, used in the usage banner and in fault headers.
    - shell: bool (keyword-only, default True)
      Render faults on stderr and return False from parse(); when False, faults
      are raised and warnings go through the warnings module.
    - fancy: bool (keyword-only, default False)
      Wrap help and faults in a rich Panel.
    - colorful: bool (keyword-only, default True)
      Style help and faults; when False, plain text is rendered.
    """

    def __init__(self, name, /, *, shell=True, fancy=False, colorful=True):
        if not isinstance(name, str):
            raise TypeError("parser 'name' must be a string")
        if not (name := name.strip()):
            raise ValueError("parser 'name' cannot be empty")

        self._name = name
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        self._arguments = {}
        self._aliases = {}
        self._help = False
        self._fault = None

        self._tokens = deque()
        self._index = 0

    name = mirror("name")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    @property
    def arguments(self):
        """
        Read-only view of the registry (long name -> Argument).
        """
        return MappingProxyType(self._arguments)

    @property
    def aliases(self):
        """
        Read-only view of the alias index (short char -> long name).
        """
        return MappingProxyType(self._aliases)

    @property
    def help_requested(self):
        return self._help

    @property
    def fault(self):
        """
        The fault that stopped the last parse, or None.
        """
        return self._fault

    def __rich_repr__(self):
        yield "name", self._name
        yield "arguments", tuple(self._arguments.values())
        yield "help_requested", self._help

    def __repr__(self):
        return "arg-parser(name=%r, arguments=%r)" % (self._name, tuple(self._arguments))

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.
        """
        fault = fault.__replace__(
            **options,
            parser=self,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
        )
        if isinstance(fault, ArgumentException):
            self._fault = fault
        trigger(fault)

    # --- registry / builder surface ---

    def add_argument(self, *names, descr=Unset, type=str, flag=False, helper=False, converter=Unset):
        """
        Declare an argument and return it for chaining.

        Parameters
        - names: "--long" (required) and optionally "-s".
        - descr: description used in help.
        - type: value type (int, float, str, bool or any type with a converter).
        - flag: presence-only argument.
        - helper: help trigger.
        - converter: explicit converter callable.

        Notes
        - Declaring a long name twice keeps the last declaration and emits a
          DuplicatedArgumentWarning; the same applies to a reused short alias.
        """
        short, long = _split_names(names)
        argument = Argument(short, long, descr, type, flag=flag, helper=helper, converter=converter)

        if (previous := self._arguments.get(argument.name)) is not None:
            self.trigger(DuplicatedArgumentWarning(
                "argument %r was already declared; the last declaration wins" % argument.name,
                title="duplicated argument",
                code=FaultCode.DUPLICATED_ARGUMENT,
                argument=argument,
                previous=previous,
                hint="declare each long name once",
                docs=getdoc(FaultCode.DUPLICATED_ARGUMENT),
            ))
            if previous.short is not None and self._aliases.get(previous.short) == previous.name:
                del self._aliases[previous.short]

        if argument.short is not None:
            if (owner := self._aliases.get(argument.short)) not in (None, argument.name):
                self.trigger(DuplicatedArgumentWarning(
                    "short alias %r of %r was already bound to %r; the last declaration wins" % (
                        "-" + argument.short, argument.name, owner
                    ),
                    title="duplicated alias",
                    code=FaultCode.DUPLICATED_ARGUMENT,
                    argument=argument,
                    hint="give each argument its own short alias",
                    docs=getdoc(FaultCode.DUPLICATED_ARGUMENT),
                ))
            self._aliases[argument.short] = argument.name

        self._arguments[argument.name] = argument
        logger.debug("declared %r", argument)
        return argument

    def add_int_argument(self, *names, descr=Unset, converter=Unset):
        return self.add_argument(*names, descr=descr, type=int, converter=converter)

    def add_float_argument(self, *names, descr=Unset, converter=Unset):
        return self.add_argument(*names, descr=descr, type=float, converter=converter)

    def add_string_argument(self, *names, descr=Unset, converter=Unset):
        return self.add_argument(*names, descr=descr, type=str, converter=converter)

    def add_bool_argument(self, *names, descr=Unset, converter=Unset):
        return self.add_argument(*names, descr=descr, type=bool, converter=converter)

    def add_flag(self, *names, descr=Unset):
        return self.add_argument(*names, descr=descr, type=bool, flag=True)

    def add_help(self, *names, descr="show help message"):
        """
        Declare the help trigger (defaults to -h/--help).
        """
        return self.add_argument(*(names or ("-h", "--help")), descr=descr, type=bool, helper=True)

    def store_values(self, container, type, /):
        """
        Bind every declared argument whose value type is `type` to append into container.
        """
        for argument in self._arguments.values():
            if argument.type is type:
                argument.store_into(container)
        return container

    # --- tokenizer / resolver ---

    def parse(self, argv=Unset, /):
        """
        Parse an invocation; the first token is the program name and is skipped.

        Parameters
        - argv:
          • Unset: read sys.argv.
          • str: shell-like string, split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Returns
        - True when every token resolved and validation passed, or when the
          help trigger matched (see help_requested).
        - False on the first fault (shell mode); the fault is kept in `fault`.

        Notes
        - Each call starts from the declared state: values from a previous parse
          are dropped and defaults are restored before the tokens are read.

        Raises
        - ArgumentException subclasses instead of returning False when shell=False.
        - TypeError: when argv is not a string or an iterable of strings.
        """
        if argv is Unset:
            tokens = list(sys.argv)
        elif isinstance(argv, str):
            tokens = shlex.split(argv)
        elif isinstance(argv, Iterable):
            tokens = list(argv)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")

        self._tokens = deque(tokens[1:])
        self._index = 0
        self._help = False
        self._fault = None
        for argument in self._arguments.values():
            argument.reset()

        try:
            self._parseargs()
        except ArgumentException as fault:
            self.trigger(fault)
            return False
        return True

    def _next(self):
        self._index += 1
        return self._tokens.popleft()

    def _parseargs(self):
        """
        walk the token deque; the first fault raised inside stops everything.

        states
        - scanning: classify the next token.
        - inside-long-option: _parse_long().
        - inside-short-chain: _parse_short().
        - inside-positional-scan: _parse_positional().
        - help-requested: a helper matched; return without validation.
        - validated: every token consumed, _validate() passed.
        """
        while self._tokens:
            token = self._next()
            if token.startswith("--"):
                self._parse_long(token)
            elif _is_switch(token):
                self._parse_short(token)
            else:
                self._parse_positional(token)

            if self._help:
                logger.debug("help requested at %s position", ordinal(self._index))
                return

        self._validate()

    def _parse_long(self, token):
        name, separator, value = token[2:].partition("=")
        argument = self._lookup(name)

        if argument.is_helper:
            self._help = True
        elif separator:
            self._add(argument, value, "--" + name)
        elif argument.is_flag:
            self._add(argument, "true", token)
        else:
            self._consume(argument, token, "missing value for option %r at %s position")

    def _parse_short(self, token):
        chain = token[1:]

        if "=" in chain:
            name, _, value = chain.partition("=")
            if len(name) != 1:
                raise UnknownOptionError(
                    "unknown short option %r at %s position" % ("-" + name, ordinal(self._index)),
                    title="unknown option",
                    code=FaultCode.UNKNOWN_OPTION,
                    input="-" + name,
                    index=self._index,
                    hint="inline values take a single short alias (for example: -n=3)",
                    docs=getdoc(FaultCode.UNKNOWN_OPTION),
                )
            if (argument := self._alias(name)).is_helper:
                self._help = True
            else:
                self._add(argument, value, "-" + name)
            return

        # value-taking aliases borrow the next tokens, then the chain scan resumes
        start = self._index
        for short in chain:
            argument = self._alias(short, index=start)
            if argument.is_flag:
                self._add(argument, "true", "-" + short)
            elif argument.is_helper:
                self._help = True
                return
            else:
                self._consume(argument, "-" + short, "short option %r requires a value at %s position", index=start)

    def _parse_positional(self, token):
        positionals = [argument for argument in self._arguments.values() if argument.is_positional]

        # first slot without an explicit value, else the last one when it accepts more
        argument = next((argument for argument in positionals if not argument.supplied), None)
        if argument is None and positionals and positionals[-1].is_multivalue:
            argument = positionals[-1]

        if argument is None:
            raise UnexpectedPositionalError(
                "unexpected positional argument %r at %s position" % (token, ordinal(self._index)),
                title="unexpected positional",
                code=FaultCode.UNEXPECTED_POSITIONAL,
                input=token,
                index=self._index,
                hint="remove this extra value%s" % self._helpful(" or run '%s --%s' to see the expected usage"),
                docs=getdoc(FaultCode.UNEXPECTED_POSITIONAL),
            )

        self._add(argument, token, token)
        while argument.is_multivalue and self._tokens and not _is_switch(self._tokens[0]):
            self._add(argument, self._next(), token)

    def _consume(self, argument, input, message, *, index=Unset):
        """
        take the value token(s) following a value-taking option.

        index is the position of the option token itself; inside a short chain
        it differs from the current position once a value was borrowed.
        """
        start = coalesce(index, self._index)
        if not self._tokens or _is_switch(self._tokens[0]):
            raise MissingValueError(
                message % (input, ordinal(start)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                argument=argument,
                input=input,
                index=start,
                hint="pass a value after a space (for example: %s <value>)" % input,
                docs=getdoc(FaultCode.MISSING_VALUE),
            )

        self._add(argument, self._next(), input)
        while argument.is_multivalue and self._tokens and not _is_switch(self._tokens[0]):
            self._add(argument, self._next(), input)

    def _add(self, argument, value, input):
        try:
            stored = argument.add_value(value)
        except ConversionFailureError as fault:
            raise ConversionFailureError(
                "invalid %s value %r for %r at %s position" % (
                    getattr(argument.type, "__name__", argument.type), value, input, ordinal(self._index)
                ),
                **{**fault.options, "input": input, "value": value, "index": self._index},
            ) from fault.options.get("exception")

        if not stored:
            raise BelowMinimumValueError(
                "value %r for %r at %s position is below the minimum of %r" % (
                    value, input, ordinal(self._index), argument.threshold
                ),
                title="below minimum value",
                code=FaultCode.BELOW_MINIMUM_VALUE,
                argument=argument,
                input=input,
                index=self._index,
                hint="pass a value greater than or equal to %r" % argument.threshold,
                docs=getdoc(FaultCode.BELOW_MINIMUM_VALUE),
            )
        logger.debug("%r <- %r (%s position)", argument.name, value, ordinal(self._index))

    def _lookup(self, name):
        try:
            return self._arguments[name]
        except KeyError:
            pass

        suggestions = difflib.get_close_matches(name, self._arguments.keys(), 5)
        try:
            hint = "did you mean %r?%s" % (
                "--" + suggestions[0], self._helpful(" you can also run '%s --%s' to see all options")
            )
        except IndexError:
            hint = self._helpful("run '%s --%s' to see all available options").strip() or None
        raise UnknownOptionError(
            "unknown option %r at %s position" % ("--" + name, ordinal(self._index)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input="--" + name,
            index=self._index,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_OPTION),
        )

    def _alias(self, short, *, index=Unset):
        index = coalesce(index, self._index)
        try:
            return self._arguments[self._aliases[short]]
        except KeyError:
            raise UnknownOptionError(
                "unknown short option %r at %s position" % ("-" + short, ordinal(index)),
                title="unknown option",
                code=FaultCode.UNKNOWN_OPTION,
                input="-" + short,
                index=index,
                hint=self._helpful("run '%s --%s' to see all available options").strip() or None,
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            ) from None

    def _helpful(self, template):
        """
        fill a "run '<prog> --help'" hint when a help trigger is declared.
        """
        for argument in self._arguments.values():
            if argument.is_helper:
                return template % (self._name, argument.name)
        return ""

    def _validate(self):
        for name, argument in self._arguments.items():
            if argument.is_helper or argument.is_flag:
                continue
            if not argument.is_good:
                raise MissingRequiredArgumentError(
                    "argument %r is missing and has no default value" % name,
                    title="missing required argument",
                    code=FaultCode.MISSING_REQUIRED_ARGUMENT,
                    argument=argument,
                    input=name,
                    hint=(
                        "pass a value for %r" % name if argument.is_positional
                        else "add --%s <value>" % name
                    ),
                    docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
                )
            # a default stands in for the values until the first explicit one
            if argument.count is not None and 0 < argument.supplied < argument.count:
                raise NotEnoughValuesError(
                    "argument %r expects at least %d value(s) but got %d" % (name, argument.count, argument.supplied),
                    title="not enough values",
                    code=FaultCode.NOT_ENOUGH_VALUES,
                    argument=argument,
                    input=name,
                    hint="pass %d more value(s) for %r" % (argument.count - argument.supplied, name),
                    docs=getdoc(FaultCode.NOT_ENOUGH_VALUES),
                )
        logger.debug("validated %d argument(s)", len(self._arguments))

    # --- accessor layer ---

    def argument(self, name, /):
        """
        Return the declared argument with long name `name`.

        Raises
        - UnknownArgumentError: when no argument has that long name.
        """
        try:
            return self._arguments[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, self._arguments.keys(), 5)
            raise UnknownArgumentError(
                "no argument named %r" % name,
                title="unknown argument",
                code=FaultCode.UNKNOWN_ARGUMENT,
                input=name,
                suggestions=suggestions,
                parser=self,
                hint="did you mean %r?" % suggestions[0] if suggestions else "look values up by long name without dashes",
                docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
            ) from None

    def _typed(self, name, type, index):
        argument = self.argument(name)
        if argument.type is not type:
            raise ArgumentTypeError(
                "argument %r holds %s values, not %s" % (
                    name, getattr(argument.type, "__name__", argument.type), type.__name__
                ),
                title="argument type mismatch",
                code=FaultCode.ARGUMENT_TYPE,
                argument=argument,
                input=name,
                parser=self,
                hint="use the accessor matching the declared type",
                docs=getdoc(FaultCode.ARGUMENT_TYPE),
            )
        return argument.get_value(index)

    def get_int(self, name, /, index=0):
        return self._typed(name, int, index)

    def get_float(self, name, /, index=0):
        return self._typed(name, float, index)

    def get_string(self, name, /, index=0):
        return self._typed(name, str, index)

    def get_bool(self, name, /, index=0):
        return self._typed(name, bool, index)

    def get_flag(self, name, /, index=0):
        """
        Return whether flag `name` was given (False when absent).

        Raises
        - UnknownArgumentError: unknown name.
        - ArgumentTypeError: `name` is not a flag.
        - ValueIndexError: the flag was given, but not at `index`.
        """
        argument = self.argument(name)
        if not argument.is_flag:
            raise ArgumentTypeError(
                "argument %r is not a flag" % name,
                title="argument type mismatch",
                code=FaultCode.ARGUMENT_TYPE,
                argument=argument,
                input=name,
                parser=self,
                hint="use get_%s() for value-bearing arguments" % (
                    {int: "int", float: "float", str: "string", bool: "bool"}.get(argument.type, "values")
                ),
                docs=getdoc(FaultCode.ARGUMENT_TYPE),
            )
        if argument.is_empty:
            return False
        return argument.get_value(index)

    def get_values(self, name, /):
        """
        Return every stored value of `name` as a tuple.
        """
        return tuple(self.argument(name).values)

    # --- help ---

    def _signature(self, argument):
        metavar = "<%s>" % (argument.name if argument.is_positional else getattr(argument.type, "__name__", "value"))
        if argument.is_multivalue:
            metavar = "%s [%s ...]" % (metavar, metavar)

        if argument.is_positional:
            return metavar
        names = ", ".join(name for name in (
            "-" + argument.short if argument.short is not None else None,
            "--" + argument.name,
        ) if name)
        if argument.is_flag or argument.is_helper:
            return names
        return "%s %s" % (names, metavar)

    def help_description(self):
        """
        Return the plain-text usage banner.

        Layout
            usage: <prog> [options] <positional> ...

            options:
              -h, --help          show help message
              -n, --count <int>   repetitions (default: 1)
        """
        positionals = [argument for argument in self._arguments.values() if argument.is_positional]
        usage = " ".join(["usage:", self._name, "[options]", *map(self._signature, positionals)])

        rows = [(self._signature(argument), argument) for argument in self._arguments.values()]
        width = max((len(signature) for signature, _ in rows), default=0) + 2

        lines = [usage, "", "options:"]
        for signature, argument in rows:
            descr = argument.descr or ""
            if argument.is_default and not argument.is_flag:
                descr = ("%s (default: %r)" % (descr, argument.values[0])).strip()
            lines.append(("  " + signature.ljust(width) + descr).rstrip())
        return "\n".join(lines) + "\n"

    def print_help(self, console=Unset, /):
        """
        Render the usage banner with rich.

        Palette keys (override with a __styles__ mapping in __main__)
        - usage-label, program-name, group-label, option-name, flag-name,
          positional-name, metavar, argument-description, panel-title
        """
        console = coalesce(console, Console())
        styles = {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "group-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "flag-name": "bold #22C55E",
            "positional-name": "bold #36C5F0",
            "metavar": "bold #FFD600",
            "argument-description": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {})

        def styler(style):
            return styles.get(style, "") if self._colorful else ""

        usage, _, *lines = self.help_description().splitlines()
        renders = [Text.assemble(
            ("usage", styler("usage-label")), ": ", (self._name, styler("program-name")),
            usage.removeprefix("usage: " + self._name),
        )]

        body = Text()
        body.append(lines[0], styler("group-label"))
        for line, argument in zip(lines[1:], self._arguments.values()):
            signature = self._signature(argument)
            offset = line.index(signature) + len(signature)
            if argument.is_positional:
                style = "positional-name"
            elif argument.is_flag or argument.is_helper:
                style = "flag-name"
            else:
                style = "option-name"
            body.append("\n")
            body.append(line[:offset], styler(style))
            body.append(line[offset:], styler("argument-description"))
        renders.append(body)

        renderable = Group(*renders)
        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", f"{self._name} HELP".upper(), " ]", style=styler("panel-title")),
                title_align="left",
            )
        console.print(renderable)


__all__ = (
    "ArgParser",
)
