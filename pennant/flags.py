r"""
Pennant flag sets: declare flags, parse arguments, read results from cells.

What this module provides
- Cell[_T]: the slot a flag's parsed value is written into. Callers keep the cell
  returned at declaration time and read `cell.value` after parsing; it holds
  Unset until the first successful parse.
- Flag[_T]: a declared flag (name, help, validator, cell). Read-only once built.
- FlagSet[_P]: the registry plus orchestration (tokenize, validate, write cells,
  validate positionals) and help rendering (plain text and rich).
- invoke(flagset, prompt): process entry wrapper; prints help and the fault,
  then exits with status 1 on bad input.

Quick start
    from pennant import FlagSet, invoke, validators as v

    flags = FlagSet(v.validator(list, "string[]"))
    port = flags.flag(v.integer, "port", "port to listen on")
    verbose = flags.flag(v.default_value(v.boolean, False), "verbose", "chatty output")

    if __name__ == "__main__":
        files = invoke(flags)  # reads sys.argv[1:]
        print(port.value, verbose.value, files)

Design notes
- Parsing is all-or-nothing: cells are written only after every flag and the
  positionals validated, so a failed parse leaves the previous values in place.
- Occurrences are rebuilt on every parse; a FlagSet can be parsed repeatedly.
- Not thread-safe: one parse at a time per FlagSet.
"""
import re
import shlex
import sys
from collections.abc import Iterable

from rich.box import ROUNDED
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .faults import *
from .faults import _palette, _prog
from .parsing import tokenize
from .utils import *
from .validators import as_validator


class Cell[_T]:
    """
    Mutable slot shared between a Flag and the caller that declared it.
    """
    __slots__ = ("value",)

    def __init__(self, value=Unset, /):
        self.value = value

    def __repr__(self):
        return "cell(value=%r)" % (self.value,)

    def __rich_repr__(self):
        yield "value", self.value


class Flag[_T]:
    """
    A declared flag.

    - name: [A-Za-z0-9_-]+, matched exactly (given as `-name` or `--name`).
    - help: free text for the help output.
    - validator: turns the flag's raw occurrences into its value.
    - cell: where FlagSet.parse writes that value.
    """

    def __init__(self, validator, name, help="", /, *, cell=Unset):
        if not isinstance(name, str):
            raise TypeError("flag 'name' must be a string")
        if not name:
            raise InvalidFlagNameError(
                "flag name cannot be empty",
                hint="use letters, digits, '_' and '-' (for example: dry-run)",
                flag=name,
            )
        if match := re.search(r"[^A-Za-z0-9_-]", name):
            raise InvalidFlagNameError(
                "invalid character in flag name: %r (%r)" % (match[0], name),
                hint="use letters, digits, '_' and '-' (for example: dry-run)",
                flag=name,
            )
        if not isinstance(help, str):
            raise TypeError("flag 'help' must be a string")
        if not isinstance(cell, Cell | Unset):
            raise TypeError("flag 'cell' must be a cell")

        self._name = name
        self._help = help.strip()
        self._validator = as_validator(validator)
        self._cell = coalesce(cell, Cell())

    name = mirror("name")
    help = mirror("help")
    validator = mirror("validator")
    cell = mirror("cell")

    def __repr__(self):
        return "flag(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "validator", self._validator
        yield "help", self._help


class FlagSet[_P]:
    """
    Registry of flags plus the parse pipeline.

    Parameters
    - positionals: None | Validator | callable
      Validator for the leftover tokens; parse() returns its result. When None,
      any leftover token is an UnexpectedPositionalError and parse() returns None.
    - *flags: pre-built Flag objects, registered in order.
    - colorful: style the rich help and rendered faults.
    - fancy: wrap the rich help and rendered faults in panels.
    - prog: program name for usage lines and fault headers (defaults to
      __prog__ in __main__, then argv[0]).
    """

    def __init__(self, positionals=None, /, *flags, colorful=True, fancy=False, prog=Unset):
        if not isinstance(prog, str | Unset):
            raise TypeError("flag set 'prog' must be a string")
        self._positionals = None if positionals is None else as_validator(positionals)
        self._flags = []
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._prog = prog
        for flag in flags:
            if not isinstance(flag, Flag):
                raise TypeError("flag set extra arguments must be flags")
            self._attach(flag)

    positionals = mirror("positionals")
    flags = mirror("flags")
    colorful = mirror("colorful")
    fancy = mirror("fancy")
    prog = mirror("prog")

    def _attach(self, flag):
        for existing in self._flags:
            if existing.name == flag.name:
                raise DuplicateFlagError(
                    "a flag with name %r already exists" % flag.name,
                    hint="pick another name for one of the two flags",
                    flag=flag.name,
                )
        self._flags.append(flag)

    def flag(self, validator, name, help="", /):
        """
        Declare a flag and return the cell its parsed value will be written into.

        Raises
        - InvalidFlagNameError: empty name or a character outside [A-Za-z0-9_-].
        - DuplicateFlagError: the name is already declared.
        - TypeError: validator is not callable.
        """
        flag = Flag(validator, name, help)
        self._attach(flag)
        return flag.cell

    register = flag

    def parse(self, args, /):
        """
        Parse and validate args (without the program name).

        - every declared flag's validator runs over its occurrences, in
          declaration order; failures become FlagValueError naming the flag.
        - the positionals validator (if any) runs over the leftovers; failures
          become PositionalValueError.
        - cells are written only once everything succeeded.

        Returns the positionals result, or None when no positionals validator
        is configured.
        """
        if isinstance(args, str) or not isinstance(args, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")

        occurrences, remainder = tokenize(self._flags, args)

        results = []
        for flag in self._flags:
            try:
                results.append(flag.validator(occurrences[flag.name]))
            except Exception as error:
                raise FlagValueError(
                    "failed to parse flag '--%s': %s" % (flag.name, error),
                    hint=self._hint(error, "check the value given to '--%s'" % flag.name),
                    flag=flag.name,
                    values=tuple(occurrences[flag.name]),
                ) from error

        if self._positionals is not None:
            try:
                positionals = self._positionals(remainder)
            except Exception as error:
                raise PositionalValueError(
                    "failed to parse positional arguments: %s" % error,
                    hint=self._hint(error, "expected %s" % self._positionals.name),
                    values=tuple(remainder),
                ) from error
        elif remainder:
            raise UnexpectedPositionalError(
                "got additional positional arguments [%s]" % ", ".join(map(repr, remainder)),
                hint="remove them, or quote values meant for a flag (for example: -name \"value\")",
                values=tuple(remainder),
            )
        else:
            positionals = None

        for flag, result in zip(self._flags, results):
            flag.cell.value = result

        return positionals

    @staticmethod
    def _hint(error, fallback):
        if isinstance(error, FlagException):
            return error.options.get("hint", fallback)
        return fallback

    def help(self):
        """
        Plain-text usage: positionals shape (if any), then one tab-separated
        line per flag (name, type, help), flags separated by a blank line.
        """
        text = "Usage:\n"
        if self._positionals is not None:
            text += "\tPositionals:\t%s\n\n" % self._positionals.name
        text += "\n".join(
            "\t-%s\t%s\t%s\n" % (flag.name, flag.validator.name, flag.help)
            for flag in self._flags
        )
        return text

    def __rich__(self):
        styler, text = _palette({
            "usage-label": "bold #00E6FF",  # cyan signature info
            "program-name": "bold #FF4D94",  # magenta-pink brand pop
            "usage-section": "bold #36C5F0",  # sky-blue
            "group-label": "bold #FFFFFF",  # pure white headers
            "flag-name": "bold #22C55E",  # green flags
            "type-name": "bold #FFD600",  # amber types
            "argument-description": "#9CA3AF",  # muted gray
            "panel-title": "bold #FF4D94",
        }, self._colorful)

        prog = _prog({"prog": self._prog})
        usage = [text(prog, styler("program-name"))]
        if self._flags:
            usage.append(text("[flags]", styler("usage-section")))
        if self._positionals is not None:
            usage.append(text(self._positionals.name, styler("type-name")))
        renders = [Text.assemble(text("usage: ", styler("usage-label")), Text(" ").join(usage))]

        if self._positionals is not None:
            renders += [
                Text(""),
                text("positionals:", styler("group-label")),
                Text.assemble("  ", text(self._positionals.name, styler("type-name"))),
            ]

        if self._flags:
            table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 2, 0, 0))
            table.add_column(no_wrap=True)
            table.add_column(no_wrap=True)
            table.add_column()
            for flag in self._flags:
                table.add_row(
                    Text.assemble("  ", text("-" + flag.name, styler("flag-name"))),
                    text(flag.validator.name, styler("type-name")),
                    text(flag.help, styler("argument-description")),
                )
            renders += [Text(""), text("flags:", styler("group-label")), table]

        if self._fancy:
            return Panel(Group(*renders), box=ROUNDED, title=text(prog, styler("panel-title")), title_align="left")
        return Group(*renders)

    def __repr__(self):
        return "flag-set(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "positionals", self._positionals
        yield "flags", tuple(self._flags)


def invoke(flagset, prompt=Unset, /):
    """
    Parse a prompt for a flag set the way a program entry point would.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.

    Behavior
    - Returns the positionals result on success.
    - On a FlagException: prints the help on stdout, the fault on stderr, and
      exits with status 1.

    Raises
    - TypeError: when flagset is not a FlagSet or prompt has an invalid type.
    """
    if not isinstance(flagset, FlagSet):
        raise TypeError("invoke() first argument must be a flag set")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() argument must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    try:
        return flagset.parse(tokens)
    except FlagException as fault:
        Console().print(flagset)
        trigger(fault, shell=True, colorful=flagset.colorful, fancy=flagset.fancy, prog=flagset.prog)


__all__ = (
    "Cell",
    "Flag",
    "FlagSet",
    "invoke",
)
