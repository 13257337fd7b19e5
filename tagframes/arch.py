"""Compiles architecture strings into ordered lists of feature extractors.

This module is the only place extractors are built from configuration. The
compilation process is:

1.  **Macro expansion**: shorthand tokens such as ``left3words`` are replaced
    by the tokens they stand for (see `tagframes.macros`).
2.  **Tokenization**: the expanded string is split on top-level commas and
    each token is parsed into a keyword and an argument list. Malformed
    parentheses or non-integer arguments abort compilation with an
    `ArchitectureError`.
3.  **Dispatch**: each keyword builds zero or more extractors. Window keywords
    such as ``words(-1,1)`` build one extractor per offset, in ascending order.

Keywords that belong to the rare-word feature compiler are accepted silently,
so the same architecture string can configure both. Any other unknown keyword
is logged as a warning and skipped; a typo never aborts the whole run.

The order of the returned list is the token order of the expanded string and
is stable for a given input, since downstream weights are indexed by it.
"""
from __future__ import annotations
import logging
from typing import List, Mapping, Optional

from .extractors import (
    ContinuousTagConjunction,
    Extractor,
    LowerCaseWordExtractor,
    TagExtractor,
    ThreeTagsExtractor,
    TwoTagsExtractor,
    TwoWordsExtractor,
    VerbalVBNExtractor,
    WordExtractor,
    WordShapeConjunction,
    WordShapeExtractor,
    WordTagExtractor,
    WordTwoTagsExtractor,
)
from .grammar import ArchitectureError, TemplateToken, tokenize
from .macros import expand_macros
from .shapes import lookup_shaper

__all__ = ["compile_architecture", "compile_expanded", "ArchitectureError"]

logger = logging.getLogger(__name__)

# Literal feature sets that are not built from windows.
SIGHAN2005: tuple = (
    WordExtractor(0),
    WordExtractor(-1),
    WordExtractor(-2),
    WordExtractor(1),
    WordExtractor(2),
    TagExtractor(-1),
    TagExtractor(-2),
    ContinuousTagConjunction(-2),
)

GERMAN: tuple = (
    WordExtractor(0),
    WordExtractor(-1),
    WordExtractor(1),
    TagExtractor(1),
    TagExtractor(-1),
    ContinuousTagConjunction(-2),
    WordTagExtractor(0, -1),
    TwoWordsExtractor(-1, 0),
)

# Keywords handled by the rare-word feature compiler.
RARE_WORD_KEYWORDS = frozenset({
    "naacl2003unknowns",
    "lnaacl2003unknowns",
    "caselessnaacl2003unknowns",
    "naacl2003conjunctions",
    "frenchunknowns",
    "motleyunknown",
    "lctagfeatures",
})

RARE_WORD_FUNCTIONS = frozenset({
    "wordshapes",
    "suffix",
    "prefix",
    "capitalizationsuffix",
    "distsim",
    "distsimconjunction",
    "unicodeshapes",
    "chinesedictionaryfeatures",
    "unicodeshapeconjunction",
})


def _is_rare_word_keyword(token: TemplateToken) -> bool:
    if token.text.lower() in RARE_WORD_KEYWORDS:
        return True
    if token.parenthesized and token.name in RARE_WORD_FUNCTIONS:
        return True
    return token.text.startswith("prefixsuffix")


def _window(token: TemplateToken) -> range:
    return range(token.int_arg(1), token.int_arg(2) + 1)


def _order(token: TemplateToken) -> List[Extractor]:
    left = token.int_arg(1)
    right = token.int_arg(2)
    if left > 0:
        left = -left
    if right < 0:
        raise ArchitectureError(f"Right order must be non-negative, not {right} (in '{token.text}').")
    # Successively longer tag n-grams ending next to the current position.
    frames: List[Extractor] = []
    for idx in range(left, right + 1):
        if idx == 0:
            continue
        if idx in (-1, 1):
            frames.append(TagExtractor(idx))
        else:
            frames.append(ContinuousTagConjunction(idx))
    return frames


def _compile_token(
    token: TemplateToken,
    dictionary: Mapping[str, Mapping[str, int]],
) -> List[Extractor]:
    if token.text == "sighan2005":
        return list(SIGHAN2005)
    if token.text.lower() == "german":
        return list(GERMAN)

    if token.parenthesized:
        name = token.name
        if name == "words":
            return [WordExtractor(i) for i in _window(token)]
        if name == "tags":
            return [TagExtractor(i) for i in _window(token)]
        if name == "biwords":
            return [TwoWordsExtractor.adjacent(i)
                    for i in range(token.int_arg(1), token.int_arg(2))]
        if name == "biword":
            return [TwoWordsExtractor(token.int_arg(1), token.int_arg(2))]
        if name == "twoTags":
            return [TwoTagsExtractor(token.int_arg(1), token.int_arg(2))]
        if name == "lowercasewords":
            return [LowerCaseWordExtractor(i) for i in _window(token)]
        if name == "order":
            return _order(token)
        if name == "wordTag":
            return [WordTagExtractor(token.int_arg(1), token.int_arg(2))]
        if name == "wordTwoTags":
            return [WordTwoTagsExtractor(token.int_arg(1), token.int_arg(2), token.int_arg(3))]
        if name == "threeTags":
            return [ThreeTagsExtractor(token.int_arg(1), token.int_arg(2), token.int_arg(3))]
        if name == "vbn":
            return [VerbalVBNExtractor(token.int_arg(1), dictionary)]
        if name == "allwordshapes":
            shaper = lookup_shaper("chris2")
            return [WordShapeExtractor(i, shaper) for i in _window(token)]
        if name == "allunicodeshapes":
            shaper = lookup_shaper("chris4")
            return [WordShapeExtractor(i, shaper) for i in _window(token)]
        if name == "allunicodeshapeconjunction":
            return [WordShapeConjunction(token.int_arg(1), token.int_arg(2), lookup_shaper("chris4"))]

    if _is_rare_word_keyword(token):
        return []

    logger.warning("Unrecognized architecture identifier (ignored): %s", token.text)
    return []


def compile_expanded(
    arch: str,
    dictionary: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> List[Extractor]:
    """
    Compiles an architecture string whose macros are already expanded.

    Args:
        arch: The expanded architecture string.
        dictionary: Tag counts per word, consulted by ``vbn`` extractors.

    Returns:
        The extractors in token order.

    Raises:
        ArchitectureError: For malformed parentheses, non-integer arguments,
                           or an ``order`` with a negative right bound.
    """
    dictionary = dictionary if dictionary is not None else {}
    frames: List[Extractor] = []
    for token in tokenize(arch):
        frames.extend(_compile_token(token, dictionary))
    return frames


def compile_architecture(
    arch: str,
    dictionary: Optional[Mapping[str, Mapping[str, int]]] = None,
) -> List[Extractor]:
    """
    Expands macros in ``arch`` and compiles it into extractors.

    This is the main entry point: ``compile_architecture("left3words")`` and
    ``compile_architecture("words(-1,1),order(2)")`` return equal lists.

    Args:
        arch: The architecture string, e.g. ``"bidirectional5words,allwordshapes(-1,1)"``.
        dictionary: Tag counts per word, consulted by ``vbn`` extractors.

    Returns:
        The extractors in token order, sub-extractors of a token in
        ascending offset order.

    Raises:
        ArchitectureError: See `compile_expanded`.
    """
    return compile_expanded(expand_macros(arch), dictionary)
