"""
Pennant validators: typed conversion of raw flag occurrences.

Overview
- Validator[_T]
  • A named callable: values (one raw, already-dequoted string per occurrence of
    the flag, in input order) -> _T, raising a FlagException on bad input.
  • The name is what help output shows as the flag's type.

- Built-ins
  • single / string: exactly one occurrence, returned verbatim.
  • boolean: presence switch; absent -> False, bare -> True.
  • integer / float: one occurrence of digits (and dots for float). Signs and
    exponents are rejected.
  • url: one occurrence parsed into a pydantic AnyUrl.

- Combinators (return new validators with derived names)
  • multiple(inner)          -> "inner[]"
  • optional(inner)          -> "inner (optional)"
  • default_value(inner, d)  -> "inner (default: d)"
  • enumerable(possible)     -> '("a" | "b")'

- validator(function, name) / @validator("name")
  • Build a Validator out of a plain function.

Quick example:
    >>> from pennant import validators as v
    >>> v.multiple(v.integer)(["1", "2"])
    [1, 2]
    >>> v.optional(v.integer).name
    'integer (optional)'
"""
import builtins
import difflib
import json
import re
from collections.abc import Iterable

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .faults import *
from .utils import *

_INTEGER = re.compile(r"[0-9]+")
_FLOAT = re.compile(r"[0-9.]+")
_URL = TypeAdapter(AnyUrl)


class Validator[_T]:
    """
    A conversion function paired with a display name.

    Calling a validator with the list of raw occurrences returns the converted
    value or raises. Validators are immutable; combinators wrap them into new ones.
    """

    def __init__(self, function, name, /):
        if not callable(function):
            raise TypeError("validator 'function' must be callable")
        if not isinstance(name, str):
            raise TypeError("validator 'name' must be a string")
        elif not (name := name.strip()):
            raise ValueError("validator 'name' cannot be empty")
        self._function = function
        self._name = name

    name = mirror("name")
    function = mirror("function")

    def __call__(self, values, /):
        return self._function(list(values))

    def __repr__(self):
        return "validator(%r)" % self._name

    def __rich_repr__(self):
        yield "name", self._name


def validator(*parameters):
    """
    Build a Validator from a plain function.

    - validator(function) -> Validator named after function.__name__
    - validator(function, name) -> Validator named name
    - @validator("name") -> decorator form
    """
    match len(parameters):
        case 2:
            return Validator(*parameters)
        case 1 if isinstance(parameters[0], str):
            name, = parameters

            @rename("validator")
            def wrapper(function, /):
                if not callable(function):
                    raise TypeError("@validator() must be applied to a callable")
                return Validator(function, name)

            return wrapper
        case 1:
            function, = parameters
            if not callable(function):
                raise TypeError("validator() argument must be a callable or a string")
            return Validator(function, getattr(function, "__name__", type(function).__name__))
        case _:
            raise TypeError("validator takes 1 to 2 arguments but %d were given" % len(parameters))


def as_validator(object, /):
    """
    Return object as a Validator, wrapping plain callables under their __name__.
    """
    if isinstance(object, Validator):
        return object
    if not callable(object):
        raise TypeError("validators must be callable")
    return validator(object)


@validator("single")
def single(values):
    if len(values) != 1:
        raise SingleValueError(
            "expected a single value for the given argument (got %d)" % len(values),
            hint="give this flag exactly once, with a value",
            values=tuple(values),
        )
    return values[0]


# Alias of single, named for help output.
string = Validator(single.function, "string")


@validator("boolean")
def boolean(values):
    if len(values) > 1:
        raise RepeatedFlagError(
            "a boolean flag cannot be specified more than once",
            hint="keep a single occurrence of the flag",
            values=tuple(values),
        )
    if not values:
        return False
    if values[0] != "":
        raise FlagAssignmentError(
            "a boolean flag should not be given a value (got %r)" % values[0],
            hint="remove everything from '=' on; presence alone enables the flag",
            values=tuple(values),
        )
    return True


@validator("integer")
def integer(values):
    text = single(values)
    if not _INTEGER.fullmatch(text):
        raise NotAnIntegerError(
            "%r is not an integer" % text,
            hint="use digits only (for example: 8080)",
            token=text,
        )
    try:
        return int(text)
    except ValueError as error:
        raise NotAnIntegerError("%r is not an integer: %s" % (text, error), token=text) from error


@validator("float")
def float(values):
    text = single(values)
    if not _FLOAT.fullmatch(text):
        raise NotAFloatError(
            "%r is not a float" % text,
            hint="use digits and a decimal point only (for example: 23.2)",
            token=text,
        )
    try:
        return builtins.float(text)
    except ValueError as error:
        # "." or "1.2.3" pass the character check but are not numbers.
        raise NotAFloatError(
            "%r is not a float" % text,
            hint="use at most one decimal point and at least one digit",
            token=text,
        ) from error


@validator("url")
def url(values):
    text = single(values)
    try:
        return _URL.validate_python(text)
    except ValidationError as error:
        reason = error.errors()[0]["msg"] if error.errors() else str(error)
        raise MalformedUrlError(
            "%r is not a valid url: %s" % (text, reason[:1].lower() + reason[1:]),
            hint="give an absolute url (for example: https://example.com)",
            token=text,
        ) from error


def multiple(inner, /):
    """
    Validate every occurrence on its own with inner, keeping input order.
    """
    inner = as_validator(inner)

    @validator(inner.name + "[]")
    def multiple(values):
        return [inner([value]) for value in values]

    return multiple


def optional(inner, /):
    """
    None when the flag is absent, inner's result otherwise.
    """
    inner = as_validator(inner)

    @validator(inner.name + " (optional)")
    def optional(values):
        if not values:
            return None
        return inner(values)

    return optional


def default_value(inner, default, /):
    """
    default when the flag is absent, inner's result otherwise.
    """
    inner = as_validator(inner)

    @validator("%s (default: %s)" % (inner.name, default))
    def default_value(values):
        if not values:
            return default
        return inner(values)

    return default_value


def enumerable(possible, /):
    """
    A single value restricted to a fixed, non-empty set of strings.

    Raises ValueError right away when possible is empty.
    """
    if isinstance(possible, str) or not isinstance(possible, Iterable):
        raise TypeError("enumerable() argument must be an iterable of strings")
    sanitized = []
    for choice in possible:
        if not isinstance(choice, str):
            raise TypeError("enumerable() choices must be strings")
        if choice in sanitized:
            raise ValueError("enumerable() choices cannot contain duplicates")
        sanitized.append(choice)
    if not sanitized:
        raise ValueError("enumerable() must have at least one possible value")
    possible = tuple(sanitized)
    display = "(%s)" % " | ".join(map(json.dumps, possible))

    @validator(display)
    def enumerable(values):
        value = single(values)
        if value in possible:
            return value
        suggestions = difflib.get_close_matches(value, possible, 1)
        raise InvalidChoiceError(
            "value %r is not a part of enum %s" % (value, display),
            hint="did you mean %r?" % suggestions[0] if suggestions else "pick one of %s" % display,
            token=value,
            choices=possible,
        )

    return enumerable


__all__ = (
    # Types
    "Validator",

    # Factories
    "validator",
    "as_validator",

    # Built-ins
    "single",
    "string",
    "boolean",
    "integer",
    "float",
    "url",

    # Combinators
    "multiple",
    "optional",
    "default_value",
    "enumerable",
)
