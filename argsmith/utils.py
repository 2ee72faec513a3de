"""
argsmith utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the arguments, faults and parser layers.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the higher-level argument and parsing code.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated accessors for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with
    copies for containers, so stored argument values cannot be mutated from outside.

- ordinal(number)
  • Human-friendly ordinal labels ("first", "second", "11th") for position-first messages.

Usage guidance
- Prefer Unset for API defaults when None is a meaningful user value; materialize with coalesce().
- Use mirror() to expose internal state safely as read-only properties.

Quick examples
    >>> one = coalesce(Unset, "fallback")  # "fallback"
    >>> two = coalesce(None, "fallback")    # None  (None is preserved)
    >>> ordinal(3)
    'third'
"""
import builtins
import functools
import operator
from collections.abc import Sequence, Mapping, Set
from typing import final


def _union(left, right):
    try:
        return left | right
    except TypeError:
        return NotImplemented


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None” (for example, an
    argument declared without a short alias, or a default that was never set).

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Sealed: subclassing raises TypeError.
    - One instance per process: UnsetType() always yields Unset.
    - Usable in unions: isinstance(value, str | Unset).
    """
    __slots__ = ()
    __instance = None

    def __new__(cls):
        if cls.__instance is None:
            cls.__instance = super().__new__(cls)
        return cls.__instance

    def __or__(self, other, /):
        return _union(type(self), other)

    def __ror__(self, other, /):
        return _union(other, type(self))

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType is sealed and cannot be subclassed")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable   (updates in place)
    - rename(name) -> decorator

    Raises
    - TypeError: on a non-callable target, a non-string name, a callable whose
      names cannot be updated, or a wrong number of arguments.
    """
    if not 1 <= len(parameters) <= 2:
        raise TypeError("rename() takes 1 or 2 arguments but %d were given" % len(parameters))
    *target, name = parameters
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")

    if not target:
        def decorator(callable):
            return rename(callable, name)

        decorator.__name__ = decorator.__qualname__ = "rename"
        return decorator

    callable, = target
    if not builtins.callable(callable):
        raise TypeError("rename() target must be callable")
    try:
        callable.__name__ = callable.__qualname__ = name
    except (AttributeError, TypeError):
        raise TypeError("rename() target %r cannot be renamed" % (callable,)) from None
    return callable


def _immortalize(object):
    """
    Copy container values so callers never hold the backing store.

    Strings and bytes are returned as-is, mappings become dicts and sequences
    become lists (both copied recursively), sets are copied shallowly since
    their members are already hashable.
    """
    match object:
        case str() | bytes():
            return object
        case Mapping():
            return {key: _immortalize(value) for key, value in object.items()}
        case Set():
            return set(object)
        case Sequence():
            return [_immortalize(item) for item in object]
        case _:
            return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance and returns a copy
    for container types (see _immortalize).

    Example
    - Given self._values, declare values = mirror("values") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    read = operator.attrgetter("_" + name)
    return property(rename(lambda self: _immortalize(read(self)), name))


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing in messages.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
)
