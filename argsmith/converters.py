"""
argsmith value converters.

A converter is any callable taking the raw token (a str) and returning the
typed value. Converters signal a bad token by raising ValueError or TypeError,
exactly like the builtin int/float constructors; the argument layer wraps that
into a ConversionFailureError so nothing here ever terminates the process.

Built-ins
- to_int / to_float: strict numeric parsing (surrounding whitespace rejected).
- to_string: identity.
- to_bool: "true"/"1"/"yes"/"on" and "false"/"0"/"no"/"off" (case-insensitive).
- to_flag: presence-only, always True whatever the token says.

converter(type, *, flag=False) resolves the default converter for a value type.
"""
import re

_INTEGER = re.compile(r"[+-]?\d+")
_TRUTHY = frozenset(("true", "1", "yes", "on"))
_FALSY = frozenset(("false", "0", "no", "off"))


def to_int(token, /):
    if not _INTEGER.fullmatch(token):
        raise ValueError("invalid integer literal %r" % token)
    return int(token)


def to_float(token, /):
    if token != token.strip():
        raise ValueError("invalid number literal %r" % token)
    return float(token)


def to_string(token, /):
    return str(token)


def to_bool(token, /):
    if (lowered := token.lower()) in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError("invalid boolean literal %r" % token)


def to_flag(token, /):
    # presence alone sets the value
    return True


def converter(type, /, *, flag=False):
    """
    Return the built-in converter for a value type.

    Parameters
    - type: int | float | str | bool
    - flag: when True (flags and help triggers) the presence-only converter is
      returned regardless of the type.

    Raises
    - TypeError: when no built-in converter exists for the type; pass an
      explicit converter to the argument declaration instead.
    """
    if flag:
        return to_flag
    try:
        return {
            int: to_int,
            float: to_float,
            str: to_string,
            bool: to_bool,
        }[type]
    except (KeyError, TypeError):
        raise TypeError("no built-in converter for %r; pass an explicit converter" % (type,)) from None


__all__ = (
    "to_int",
    "to_float",
    "to_string",
    "to_bool",
    "to_flag",
    "converter",
)
