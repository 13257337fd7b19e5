"""Named shorthand architectures.

A macro is a bare token that stands for a fixed list of tokens. Expansion
happens before compilation and only ever replaces whole tokens, so a macro
name that happens to be a prefix or substring of another token (``bidirectional``
inside ``bidirectional5words``) is never rewritten by accident.
"""
from __future__ import annotations
from typing import Dict

from .grammar import split_architecture

MACROS: Dict[str, str] = {
    # A trigram CMM tagger, similar to the EMNLP 2000 baseline.
    "left3words": "words(-1,1),order(2)",
    # As left3words, with a five word window.
    "left5words": "words(-2,2),order(2)",
    # Multilingual CMM baseline.
    "generic": "words(-1,1),order(2),biwords(-1,0),wordTag(0,-1)",
    "bidirectional5words": (
        "words(-2,2),order(-2,2),twoTags(-1,1),"
        "wordTag(0,-1),wordTag(0,1),biwords(-1,1)"
    ),
    "bidirectional": (
        "words(-1,1),order(-2,2),twoTags(-1,1),"
        "wordTag(0,-1),wordTag(0,1),biwords(-1,1)"
    ),
}


def expand_macros(arch: str) -> str:
    """
    Replaces every bare macro token in ``arch`` with its expansion.

    Tokens that are not macros pass through unchanged, whitespace around
    tokens is normalized away, and nothing is validated here: a malformed
    string comes back malformed for the compiler to reject.

    Args:
        arch: The architecture string as configured.

    Returns:
        The comma-joined expanded architecture string.
    """
    tokens = split_architecture(arch, strict=False)
    return ",".join(MACROS.get(token, token) for token in tokens)
