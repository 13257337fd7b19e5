"""Tokenizer for architecture strings.

An architecture string is a comma-separated list of tokens, each a bare
keyword (``left3words``) or a keyword followed by one parenthesized argument
list (``words(-2,2)``). Parentheses do not nest, so commas inside them never
split tokens. Arguments are kept as raw text until a keyword that takes
integers asks for them: keywords owned by other compilers may carry paths or
other non-numeric arguments.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import re


_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


class ArchitectureError(ValueError):
    """Raised for an architecture string that cannot be compiled."""


@dataclass(frozen=True)
class TemplateToken:
    """
    One token of an architecture string.

    Attributes:
        text: The token as written, stripped of surrounding whitespace.
        name: The keyword before the parenthesis (the whole text for bare tokens).
        raw_args: The text between the parentheses, or ``None`` for a bare token.
    """
    text: str
    name: str
    raw_args: str | None = None

    @property
    def parenthesized(self) -> bool:
        return self.raw_args is not None

    def int_args(self) -> Tuple[int, ...]:
        """
        Parses the argument list as signed integers.

        Raises:
            ArchitectureError: If any argument is not an integer.
        """
        if not self.raw_args or not self.raw_args.strip():
            return ()
        values = []
        for item in self.raw_args.split(","):
            item = item.strip()
            if not _INTEGER.fullmatch(item):
                raise ArchitectureError(
                    f"Argument '{item}' of '{self.text}' is not an integer."
                )
            values.append(int(item))
        return tuple(values)

    def int_arg(self, n: int) -> int:
        """Returns the ``n``-th (1-based) integer argument, or 0 when it is absent."""
        args = self.int_args()
        return args[n - 1] if len(args) >= n else 0


def split_architecture(arch: str, strict: bool = True) -> List[str]:
    """
    Splits ``arch`` on commas outside parentheses.

    Whitespace around tokens is dropped, as are empty tokens.

    Args:
        arch: The architecture string.
        strict: When true, nested or unbalanced parentheses raise. When
                false the split is best-effort and never raises.

    Raises:
        ArchitectureError: In strict mode, for malformed parenthesization.
    """
    tokens: List[str] = []
    depth = 0
    start = 0
    for i, c in enumerate(arch):
        if c == "(":
            if depth and strict:
                raise ArchitectureError(f"Nested parenthesis at column {i} of '{arch}'.")
            depth += 1
        elif c == ")":
            if not depth and strict:
                raise ArchitectureError(f"Unmatched ')' at column {i} of '{arch}'.")
            depth = max(0, depth - 1)
        elif c == "," and depth == 0:
            tokens.append(arch[start:i])
            start = i + 1
    if depth and strict:
        raise ArchitectureError(f"Unclosed '(' in '{arch}'.")
    tokens.append(arch[start:])
    return [t.strip() for t in tokens if t.strip()]


def parse_token(text: str) -> TemplateToken:
    """
    Splits a single token into keyword and raw argument text.

    Raises:
        ArchitectureError: If text follows the closing parenthesis.
    """
    text = text.strip()
    open_idx = text.find("(")
    if open_idx == -1:
        if ")" in text:
            raise ArchitectureError(f"Unmatched ')' in token '{text}'.")
        return TemplateToken(text=text, name=text)
    close_idx = text.find(")", open_idx)
    if close_idx == -1:
        raise ArchitectureError(f"Unclosed '(' in token '{text}'.")
    if close_idx != len(text) - 1:
        raise ArchitectureError(f"Unexpected text after ')' in token '{text}'.")
    return TemplateToken(
        text=text,
        name=text[:open_idx].strip(),
        raw_args=text[open_idx + 1:close_idx],
    )


def tokenize(arch: str) -> List[TemplateToken]:
    """Splits and parses ``arch`` into tokens, raising on malformed parentheses."""
    return [parse_token(t) for t in split_architecture(arch)]
