r"""
argsmith argument descriptors.

Overview
- Argument[_T]: the typed descriptor and value sink for one declared option or
  positional slot. One generic class covers every value type; the parser only
  relies on its type-erased operations (is_flag, is_helper, is_positional,
  is_multivalue, is_good, add_value), and the typed accessors check `type`.

Identity
- name: the long name (canonical unique key, stored without dashes).
- short: optional single-character alias (stored without the dash), or None.

Classification
- is_flag: presence-only; never consumes a value token, presence stores True.
- is_helper: help trigger; matching it stops parsing with "help requested".
- is_positional: matched by bare tokens rather than by name.
- is_multivalue: may consume several consecutive value tokens.

Values
- threshold: per-value lower bound (numeric types only); smaller values are
  rejected by add_value() without being stored.
- count: minimum number of explicitly supplied values for a multi-value argument,
  checked by the parser's validation pass. Kept apart from threshold.
- default: stored at declaration time; it makes the argument usable but is not an
  explicit value, and the first explicit value replaces it.
- store_into(): mirrors values into caller-owned storage.

Builders are chainable:
    >>> parser.add_int_argument("-n", "--count").minimum(1).default(4)
    >>> parser.add_string_argument("--files").positional().multivalue(2)
"""
import builtins
import functools
import logging
import operator
import re
from collections.abc import MutableSequence
from numbers import Real

from .converters import converter as _converter
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class ArgumentType(type):
    """
    Metaclass that turns arguments into introspectable descriptors.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument(short='v', name='verbose', type=<class 'bool'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    r"""
    Internal: validate and normalize the identity of an argument.

    - name: required string; a leading "--" is stripped. What remains must match
      r"[^\W\d_](-?[^\W_]+)*" (unicode letters allowed, no underscores, no
      leading digit), the usual shell-style long option spelling.
    - short: Unset or a string; a leading "-" is stripped. What remains must be
      exactly one letter or digit. Unset becomes None.
    - descr: Unset or a string; surrounding whitespace is trimmed and an empty
      description becomes None.

    Raises
    - TypeError: on non-string names or descriptions.
    - ValueError: on malformed names.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    name = name.removeprefix("--")
    if not re.fullmatch(r"[^\W\d_](-?[^\W_]+)*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid shell-style long option name, got {name!r}")
    metadata["name"] = name

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    if isinstance(short, str):
        short = short.removeprefix("-")
        if not re.fullmatch(r"[^\W_]", short):
            raise ValueError(f"{cls.__typename__} 'short' must be a single letter or digit, got {short!r}")
    metadata["short"] = coalesce(short)

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr, "").strip() or None


class Argument[_T](metaclass=ArgumentType):
    """
    Typed descriptor and value sink for one declared command-line argument.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the private fields (values is returned as a copy).
    """

    __introspectable__ = (
        "short",
        "name",
        "descr",
        "type",
        "is_flag",
        "is_helper",
        "is_positional",
        "is_multivalue",
        "is_default",
        "is_good",
        "threshold",
        "count",
        "values",
    )

    def __init__(
            self,
            short=Unset,
            name=Unset,
            descr=Unset,
            /,
            type=str,
            *,
            flag=False,
            helper=False,
            converter=Unset,
    ):
        """
        Construct an argument.

        Parameters
        - short: Unset | str
          Single-character alias, with or without its leading "-".
        - name: str
          Long name, with or without its leading "--". Required.
        - descr: Unset | str
          Short description rendered in help.
        - type: type
          Value type; drives the default converter and the typed accessors.
        - flag: bool
          Presence-only argument.
        - helper: bool
          Help trigger. A helper is never a flag.
        - converter: Unset | Callable[[str], _T]
          Explicit converter. Must raise ValueError/TypeError on bad tokens.
        """
        metadata = {"short": short, "name": name, "descr": descr}
        # 'type' is a parameter here, so the class is reached through builtins
        _sanitize_names(builtins.type(self), metadata)

        if flag and helper:
            raise TypeError(f"{self.__typename__} cannot be both a flag and a helper")
        if converter is not Unset and not callable(converter):
            raise TypeError(f"{self.__typename__} 'converter' must be callable")

        self._short = metadata["short"]
        self._name = metadata["name"]
        self._descr = metadata["descr"]
        self._type = type
        self._converter = coalesce(converter) or _converter(type, flag=flag or helper)
        self._is_flag = bool(flag)
        self._is_helper = bool(helper)
        self._is_positional = False
        self._is_multivalue = False
        self._is_default = False
        self._is_good = False
        self._threshold = None
        self._count = None
        self._values = []
        self._supplied = 0
        self._fallback = Unset
        self._sink = Unset

    @property
    def is_empty(self):
        return not self._values

    @property
    def supplied(self):
        """
        Number of values explicitly supplied on the command line (defaults excluded).
        """
        return self._supplied

    def positional(self):
        """
        Mark this argument as positional (matched by bare tokens).
        """
        if self._is_flag or self._is_helper:
            raise TypeError(f"{type(self).__typename__} {self._name!r} cannot be positional: flags and helpers are named")
        self._is_positional = True
        return self

    def multivalue(self, count=Unset, /):
        """
        Allow several consecutive value tokens.

        Parameters
        - count: Unset | int
          Minimum number of explicitly supplied values (>= 1), checked after parsing.
        """
        if self._is_flag or self._is_helper:
            raise TypeError(f"{type(self).__typename__} {self._name!r} cannot be multi-value")
        if count is not Unset:
            if not isinstance(count, int) or isinstance(count, bool):
                raise TypeError(f"{type(self).__typename__} 'count' must be an integer")
            if count < 1:
                raise ValueError(f"{type(self).__typename__} 'count' must be a positive integer")
            self._count = count
        self._is_multivalue = True
        return self

    def minimum(self, threshold, /):
        """
        Reject every converted value strictly less than threshold.

        Only meaningful for ordered numeric value types (int, float).
        """
        if not issubclass(self._type, Real) or issubclass(self._type, bool):
            raise TypeError(f"{type(self).__typename__} {self._name!r} of type {self._type.__name__} cannot have a minimum")
        if not isinstance(threshold, Real) or isinstance(threshold, bool):
            raise TypeError(f"{type(self).__typename__} 'threshold' must be a number")
        self._threshold = threshold
        return self

    def default(self, value, /):
        """
        Store a default value now and mark the argument usable.
        """
        self._is_default = True
        self._is_good = True
        self._fallback = value
        # explicit values win over a late default, in values and in the sink
        if not self._supplied:
            self._values[:] = [value]
            self._store(value, default=True)
        logger.debug("argument %r defaulted to %r", self._name, value)
        return self

    def reset(self):
        """
        Forget explicitly supplied values, going back to the default (if any).

        Values already appended to a bound sequence sink stay there; an attribute
        sink gets the default written again.
        """
        self._supplied = 0
        self._is_good = self._is_default
        if self._is_default:
            self._values[:] = [self._fallback]
            self._store(self._fallback, default=True)
        else:
            self._values.clear()
        return self

    def store_into(self, sink, attribute=Unset, /):
        """
        Mirror values into caller-owned storage in addition to this argument.

        Forms
        - store_into(namespace, "attr"): setattr(namespace, "attr", value) for
          each value; an existing default is written immediately.
        - store_into(list_like): each explicitly supplied value is appended.
        """
        if attribute is not Unset:
            if not isinstance(attribute, str) or not attribute.isidentifier():
                raise TypeError(f"{type(self).__typename__} store attribute must be an identifier")
        elif not isinstance(sink, MutableSequence):
            raise TypeError(f"{type(self).__typename__} store sink must be a mutable sequence or an (object, attribute) pair")

        self._sink = (sink, attribute)
        if self._is_default and not self._supplied:
            self._store(self._values[0], default=True)
        return self

    def add_value(self, token, /):
        """
        Convert and store one raw token.

        Returns
        - True when stored.
        - False when the converted value is below the threshold (nothing stored).

        Raises
        - ConversionFailureError: when the converter rejects the token.
        """
        try:
            value = self._converter(token)
        except (ValueError, TypeError) as exception:
            raise ConversionFailureError(
                "invalid %s value %r for argument %r" % (getattr(self._type, "__name__", self._type), token, self._name),
                title="conversion failure",
                code=FaultCode.CONVERSION_FAILURE,
                argument=self,
                input=token,
                hint=str(exception) or "check the expected value type",
                docs=getdoc(FaultCode.CONVERSION_FAILURE),
                exception=exception,
            ) from exception

        if self._threshold is not None and value < self._threshold:
            logger.debug("argument %r rejected %r below threshold %r", self._name, value, self._threshold)
            return False

        if not self._supplied:
            # the first explicit value replaces the default
            self._values.clear()
        self._values.append(value)
        self._supplied += 1
        self._is_good = True
        self._store(value)
        return True

    def get_value(self, index=0, /):
        """
        Return the stored value at index.

        Raises
        - ValueIndexError: when no value is stored at index.
        """
        try:
            return self._values[index]
        except IndexError:
            raise ValueIndexError(
                "argument %r has no value at index %d" % (self._name, index),
                title="value index out of range",
                code=FaultCode.VALUE_INDEX,
                argument=self,
                index=index,
                hint="argument %r holds %d value(s)" % (self._name, len(self._values)),
                docs=getdoc(FaultCode.VALUE_INDEX),
            ) from None

    def _store(self, value, *, default=False):
        match self._sink:
            case UnsetType():
                return
            case (sink, UnsetType()):
                if not default:
                    sink.append(value)
            case (sink, attribute):
                setattr(sink, attribute, value)


__all__ = (
    "Argument",
)

# Not part of the public API.
del ArgumentType
