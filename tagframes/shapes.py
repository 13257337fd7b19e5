"""Word shape classifiers.

A word shape maps a token to a coarse equivalence class of its surface form,
so that ``Foo5`` and ``Bar7`` share a feature. Each scheme is a pure function;
`lookup_shaper` returns an immutable handle and `word_shape` applies it.

The ``chris`` schemes keep the character classes of the first and last two
characters verbatim and collapse everything in between into the sorted set of
classes seen there, so long words of the same make-up share one shape.
Nothing here caches results: a handle may be shared freely between threads.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict
import unicodedata

BOUNDARY_SIZE = 2

# Numerals outside Unicode's number categories that should still read as digits.
_EXTRA_NUMERALS = frozenset("一二三四五六七八九十零〇百千万亿兩○◯")


class UnknownShaperError(ValueError):
    """Raised when a shaper name is not registered."""


@dataclass(frozen=True)
class Shaper:
    """A named word shape scheme."""
    name: str
    shape: Callable[[str], str]


def _chris2_class(c: str) -> str:
    if c.isdigit():
        return "d"
    if c.islower():
        return "x"
    if c.isupper() or c.istitle():
        return "X"
    return c


def _chris4_class(c: str) -> str:
    category = unicodedata.category(c)
    if category in ("Nd", "Nl", "No") or c in _EXTRA_NUMERALS:
        return "d"
    if category == "Ll":
        return "x"
    if category in ("Lu", "Lt"):
        return "X"
    if c.isspace() or category == "Zs":
        return "s"
    if category == "Lo":
        return "c"
    if category == "Sc":
        return "$"
    if category == "Sm":
        return "+"
    if category == "So" or c == "|":
        return "|"
    if category == "Ps":
        return "("
    if category == "Pe":
        return ")"
    if category == "Pi":
        return "`"
    if category == "Pf" or c == "'":
        return "'"
    if c == "%":
        return "%"
    if category == "Po":
        return "."
    if category == "Pc":
        return "_"
    if category == "Pd":
        return "-"
    return "q"


def _boundary_shape(word: str, classify: Callable[[str], str]) -> str:
    classes = [classify(c) for c in word]
    if len(classes) <= BOUNDARY_SIZE * 2:
        return "".join(classes)
    middle = sorted(set(classes[BOUNDARY_SIZE:-BOUNDARY_SIZE]))
    return "".join(classes[:BOUNDARY_SIZE] + middle + classes[-BOUNDARY_SIZE:])


def _chris2(word: str) -> str:
    return _boundary_shape(word, _chris2_class)


def _chris4(word: str) -> str:
    return _boundary_shape(word, _chris4_class)


def _identity(word: str) -> str:
    return word


SHAPERS: Dict[str, Shaper] = {
    "none": Shaper("none", _identity),
    "chris2": Shaper("chris2", _chris2),
    "chris4": Shaper("chris4", _chris4),
}


def lookup_shaper(name: str) -> Shaper:
    """
    Returns the shaper registered under ``name`` (case-insensitive).

    Raises:
        UnknownShaperError: If no scheme of that name exists.
    """
    try:
        return SHAPERS[name.lower()]
    except KeyError:
        raise UnknownShaperError(
            f"Unknown word shaper '{name}'. Known shapers: {', '.join(sorted(SHAPERS))}"
        )


def word_shape(word: str, shaper: Shaper) -> str:
    """Applies ``shaper`` to ``word``. Total over any string, including the empty one."""
    return shaper.shape(word)
