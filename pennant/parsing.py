r"""
Pennant tokenizer: split raw arguments into flag occurrences and positionals.

Accepted forms (values may be wrapped in JSON-style double quotes):

| Args | Occurrences |
| --- | --- |
| `-flag` | `[""]` |
| `-flag value` | `["value"]` |
| `-flag=value` | `["value"]` |
| `"-flag value"` (one token) | `["value"]` |
| `-flag=v1 -flag v2 -flag` | `["v1", "v2", ""]` |

`--flag` works wherever `-flag` does. Flag names only contain ASCII letters,
digits, `_` and `-`. Tokens not consumed as a flag or as a flag's value are
positionals. Empty tokens are skipped, and so are tokens naming no flag
(`-`, `--`).

Each token is scanned one character at a time through ParseState:

    INITIAL --'-'--> FLAG_INITIAL --['-']--> FLAG --'=' or ' '--> VALUE
"""
import difflib
import re
from enum import IntEnum

from .faults import InvalidFlagNameError, UnknownFlagError
from .quoting import dequote

FLAG_NAME = re.compile(r"[A-Za-z0-9_-]+")
_CHARSET = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-")


class ParseState(IntEnum):
    INITIAL = 0
    FLAG_INITIAL = 1
    FLAG = 2
    VALUE = 3


def _ordinal(number):
    """
    Human-friendly ordinal for a 1-based token position ("first", "12th", ...).
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

    # 11th, 12th, 13th (and 111th, 112th, 113th, ...)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def tokenize(flags, args, /):
    """
    Bucket raw argument tokens into per-flag occurrences and positionals.

    Parameters
    - flags: iterable of declared flags (anything with a `name`).
    - args: iterable of raw string tokens, without the program name.

    Returns
    - (occurrences, positionals): occurrences maps every declared flag name to the
      ordered list of its dequoted values (empty list when absent); positionals is
      the ordered list of dequoted leftover tokens.

    Raises (on the first offending token, nothing is returned)
    - InvalidFlagNameError: a character outside [A-Za-z0-9_-] in a flag name.
    - UnknownFlagError: a flag name that was not declared.
    - HalfQuotedStringError / MalformedQuoteError: from dequote().

    Notes
    - A flag token without an inline value (`-name`) takes the next token as its
      value unless that token starts with '-'; at the end of input, or before
      another flag, its value is "".
    - Fresh containers are built on every call; nothing is kept between calls.
    """
    occurrences = {flag.name: [] for flag in flags}
    positionals = []
    pending = None  # flag name waiting for the next token as its value

    for position, token in enumerate(args, start=1):
        if not isinstance(token, str):
            raise TypeError("tokenize() arguments must be strings")
        if not token:
            continue

        state = ParseState.INITIAL
        name = ""
        value = ""
        index = 0
        while index < len(token):
            char = token[index]
            match state:
                case ParseState.INITIAL:
                    if char != "-":
                        break
                    state = ParseState.FLAG_INITIAL
                    if pending is not None:
                        occurrences[pending].append("")
                        pending = None
                case ParseState.FLAG_INITIAL:
                    state = ParseState.FLAG
                    if char != "-":
                        # Re-read this character as the first one of the name.
                        continue
                case ParseState.FLAG:
                    if char == "=" or char == " ":
                        state = ParseState.VALUE
                    elif char not in _CHARSET:
                        raise InvalidFlagNameError(
                            "invalid character in flag name: %r (%r at %s position)" % (
                                char, token, _ordinal(position)
                            ),
                            hint="flag names only contain letters, digits, '_' and '-'",
                            token=token,
                            index=position,
                        )
                    else:
                        name += char
                case ParseState.VALUE:
                    value = token[index:]
                    break
            index += 1

        if state is ParseState.INITIAL:
            # The whole token is data: either the pending flag's value or a positional.
            if pending is not None:
                occurrences[pending].append(dequote(token))
                pending = None
            else:
                positionals.append(dequote(token))
            continue

        if not name:
            continue

        if name not in occurrences:
            suggestions = difflib.get_close_matches(name, occurrences.keys(), 5)
            raise UnknownFlagError(
                "unknown flag %r at %s position" % (token, _ordinal(position)),
                hint="did you mean '-%s'?" % suggestions[0] if suggestions else "check the declared flags in the help",
                token=token,
                index=position,
                suggestions=tuple(suggestions),
            )

        if state is ParseState.VALUE:
            occurrences[name].append(dequote(value))
        else:
            pending = name

    if pending is not None:
        occurrences[pending].append("")

    return occurrences, positionals


__all__ = (
    "ParseState",
    "tokenize",
    "FLAG_NAME",
)
