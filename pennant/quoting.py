r"""
Double-quote handling for flag values and positionals.

A token wrapped in double quotes is a JSON string literal: the quotes are
stripped and its escapes decoded exactly as json.loads would.

    >>> dequote('"what \\n in the world?"')
    'what \n in the world?'
    >>> dequote("plain")
    'plain'
"""
import json

from .faults import HalfQuotedStringError, MalformedQuoteError


def dequote(text, /):
    """
    Strip one layer of double quotes from text, decoding JSON escapes.

    - "" and a lone '"' give "".
    - '"..."' is decoded as a JSON string literal.
    - a quote on one end only is a HalfQuotedStringError.
    - anything else is returned unchanged.
    """
    if not isinstance(text, str):
        raise TypeError("dequote() argument must be a string")
    if text == "" or text == '"':
        return ""

    start, end = text[0] == '"', text[-1] == '"'
    if start and end:
        try:
            return json.loads(text)
        except json.JSONDecodeError as error:
            raise MalformedQuoteError(
                "cannot decode quoted value %s: %s at column %d" % (text, error.msg, error.colno),
                hint="escape inner quotes and backslashes (for example: \"say \\\"hi\\\"\")",
                token=text,
            ) from error
    if start or end:
        raise HalfQuotedStringError(
            "encountered half-quoted string %s" % text,
            hint="wrap the value in double quotes on both ends (for example: \"%s\")" % text.strip('"'),
            token=text,
        )
    return text


__all__ = (
    "dequote",
)
