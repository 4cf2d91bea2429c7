"""
Variable substitution — find and replace named placeholders in templates.

Simple string replacement — no Jinja, no escaping.  A placeholder is
``prefix + name + suffix``; for the square syntax that is ``[NAME]``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

_NAME_CHARS = r"[A-Za-z0-9_.\-]+"


@dataclass(frozen=True)
class VariableSyntax:
    """A placeholder delimiter pair and the pattern matching it."""

    prefix: str
    suffix: str
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        regex = re.escape(self.prefix) + "(" + _NAME_CHARS + ")" + re.escape(self.suffix)
        object.__setattr__(self, "pattern", re.compile(regex))

    def create(self, name: str) -> str:
        """Build the placeholder text for ``name``."""
        return f"{self.prefix}{name}{self.suffix}"


SQUARE = VariableSyntax("[", "]")
CURLY = VariableSyntax("${", "}")

SYNTAXES: dict[str, VariableSyntax] = {
    "square": SQUARE,
    "curly": CURLY,
}


def find_variables(text: str, syntax: VariableSyntax = SQUARE) -> list[str]:
    """Return the placeholder names in ``text``.

    Names keep the order of their first occurrence; repeats are dropped.
    """
    names: dict[str, None] = {}
    for match in syntax.pattern.finditer(text):
        names.setdefault(match.group(1), None)
    return list(names)


def substitute(
    text: str,
    variable: str,
    value: str,
    syntax: VariableSyntax = SQUARE,
) -> str:
    """Replace every occurrence of the ``variable`` placeholder with ``value``."""
    return text.replace(syntax.create(variable), value)


def render(
    text: str,
    values: Mapping[str, str],
    syntax: VariableSyntax = SQUARE,
) -> str:
    """Substitute each entry of ``values`` into ``text``."""
    result = text
    for variable, value in values.items():
        result = substitute(result, variable, value, syntax)
    return result
