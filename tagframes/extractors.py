"""The closed catalog of feature extractors.

Every extractor is a frozen dataclass that turns a decision point (a `History`
plus the sequence store) into a feature key string. Besides `extract`, each
one states the contract the decoding engine relies on:

-   `left_context` / `right_context`: how many positions before and after the
    current one must already carry a tag before the extractor may run. These
    are always derived from the tag offsets the extractor actually reads.
-   `is_local`: the key depends on the current word alone, so it can be
    computed once per word.
-   `is_dynamic`: the key reads hypothesized tags, so it must be recomputed
    for every candidate tag sequence instead of once per sentence.

Multi-field keys join their fields with ``!``. Variants that take two or three
positions normalize them at construction, so argument order never changes the
key. The set of variants is closed: `Extractor` is the union of the classes
below and `EXTRACTOR_TYPES` lists them.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import ClassVar, Mapping, Tuple, Union
import re

from .shapes import Shaper, word_shape
from .types import BOUNDARY, History

SEP = "!"
SHAPE_SEP = "|"
ZERO = "0"
ONE = "1"


def _left(offset: int) -> int:
    return max(0, -offset)


def _right(offset: int) -> int:
    return max(0, offset)


@dataclass(frozen=True)
class _Frame:
    # Defaults shared by every variant: reads words only, needs no tag context.
    kind: ClassVar[str] = ""

    @property
    def left_context(self) -> int:
        return 0

    @property
    def right_context(self) -> int:
        return 0

    @property
    def is_local(self) -> bool:
        return False

    @property
    def is_dynamic(self) -> bool:
        return False


@dataclass(frozen=True)
class WordExtractor(_Frame):
    """The word at ``position``."""
    position: int
    kind: ClassVar[str] = "word"

    @property
    def is_local(self) -> bool:
        return self.position == 0

    def extract(self, history: History, store) -> str:
        return store.word_at(history, self.position)

    def __str__(self) -> str:
        return f"Word(w{self.position})"


@dataclass(frozen=True)
class LowerCaseWordExtractor(_Frame):
    """The word at ``position``, lower-cased."""
    position: int
    kind: ClassVar[str] = "lowercase_word"

    @property
    def is_local(self) -> bool:
        return self.position == 0

    def extract(self, history: History, store) -> str:
        return store.word_at(history, self.position).lower()

    def __str__(self) -> str:
        return f"LowerCaseWord(w{self.position})"


@dataclass(frozen=True)
class TagExtractor(_Frame):
    """The tag at ``position``."""
    position: int
    kind: ClassVar[str] = "tag"

    @property
    def left_context(self) -> int:
        return _left(self.position)

    @property
    def right_context(self) -> int:
        return _right(self.position)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return store.tag_at(history, self.position)

    def __str__(self) -> str:
        return f"Tag(t{self.position})"


@dataclass(frozen=True)
class CapitalizedWordExtractor(_Frame):
    """The current word if it contains an upper-case letter, ``0`` otherwise."""
    kind: ClassVar[str] = "capitalized_word"

    @property
    def is_local(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        word = store.word_at(history, 0)
        if word.lower() == word:
            return ZERO
        return word

    def __str__(self) -> str:
        return "CapitalizedWord(w0)"


@dataclass(frozen=True)
class WordTagExtractor(_Frame):
    """A word and a tag in conjunction: ``tag!word``."""
    word_position: int
    tag_position: int
    kind: ClassVar[str] = "word_tag"

    @property
    def left_context(self) -> int:
        return _left(self.tag_position)

    @property
    def right_context(self) -> int:
        return _right(self.tag_position)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return (store.tag_at(history, self.tag_position) + SEP
                + store.word_at(history, self.word_position))

    def __str__(self) -> str:
        return f"WordTag(w{self.word_position},t{self.tag_position})"


@dataclass(frozen=True)
class TwoWordsExtractor(_Frame):
    """
    Two words in conjunction, the higher position first.

    The positions are normalized so that ``left <= right``; ``(1, -1)`` and
    ``(-1, 1)`` build the same extractor.
    """
    left: int
    right: int
    kind: ClassVar[str] = "two_words"

    def __post_init__(self) -> None:
        if self.left > self.right:
            lo, hi = self.right, self.left
            object.__setattr__(self, "left", lo)
            object.__setattr__(self, "right", hi)

    @classmethod
    def adjacent(cls, left: int) -> "TwoWordsExtractor":
        """The pair of words at ``left`` and ``left + 1``."""
        return cls(left, left + 1)

    def extract(self, history: History, store) -> str:
        return store.word_at(history, self.right) + SEP + store.word_at(history, self.left)

    def __str__(self) -> str:
        return f"TwoWords(w{self.right},w{self.left})"


@dataclass(frozen=True)
class TwoTagsExtractor(_Frame):
    """Two tags in conjunction, the lower position first."""
    left: int
    right: int
    kind: ClassVar[str] = "two_tags"

    def __post_init__(self) -> None:
        if self.left > self.right:
            lo, hi = self.right, self.left
            object.__setattr__(self, "left", lo)
            object.__setattr__(self, "right", hi)

    @property
    def left_context(self) -> int:
        return _left(self.left)

    @property
    def right_context(self) -> int:
        return _right(self.right)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return store.tag_at(history, self.left) + SEP + store.tag_at(history, self.right)

    def __str__(self) -> str:
        return f"TwoTags(t{self.left},t{self.right})"


@dataclass(frozen=True)
class TwoWordsTagExtractor(_Frame):
    """Two words around a tag: ``word(lower)!tag!word(higher)``."""
    left_word: int
    right_word: int
    tag_position: int
    kind: ClassVar[str] = "two_words_tag"

    def __post_init__(self) -> None:
        if self.left_word > self.right_word:
            lo, hi = self.right_word, self.left_word
            object.__setattr__(self, "left_word", lo)
            object.__setattr__(self, "right_word", hi)

    @property
    def left_context(self) -> int:
        return _left(self.tag_position)

    @property
    def right_context(self) -> int:
        return _right(self.tag_position)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return (store.word_at(history, self.left_word) + SEP
                + store.tag_at(history, self.tag_position) + SEP
                + store.word_at(history, self.right_word))

    def __str__(self) -> str:
        return f"TwoWordsTag(w{self.left_word},t{self.tag_position},w{self.right_word})"


@dataclass(frozen=True)
class ThreeTagsExtractor(_Frame):
    """Three tags in conjunction, in ascending position order."""
    position1: int
    position2: int
    position3: int
    kind: ClassVar[str] = "three_tags"

    def __post_init__(self) -> None:
        ordered = sorted((self.position1, self.position2, self.position3))
        for name, value in zip(("position1", "position2", "position3"), ordered):
            object.__setattr__(self, name, value)

    @property
    def positions(self) -> Tuple[int, int, int]:
        return (self.position1, self.position2, self.position3)

    @property
    def left_context(self) -> int:
        return _left(self.position1)

    @property
    def right_context(self) -> int:
        return _right(self.position3)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return SEP.join(store.tag_at(history, p) for p in self.positions)

    def __str__(self) -> str:
        return f"ThreeTags(t{self.position1},t{self.position2},t{self.position3})"


@dataclass(frozen=True)
class WordTwoTagsExtractor(_Frame):
    """
    A word between two tags: ``tag(lower)!word!tag(higher)``.

    Both tag positions are kept, ordered so that ``tag1 <= tag2``.
    """
    word_position: int
    tag1: int
    tag2: int
    kind: ClassVar[str] = "word_two_tags"

    def __post_init__(self) -> None:
        if self.tag1 > self.tag2:
            lo, hi = self.tag2, self.tag1
            object.__setattr__(self, "tag1", lo)
            object.__setattr__(self, "tag2", hi)

    @property
    def left_context(self) -> int:
        return _left(self.tag1)

    @property
    def right_context(self) -> int:
        return _right(self.tag2)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return (store.tag_at(history, self.tag1) + SEP
                + store.word_at(history, self.word_position) + SEP
                + store.tag_at(history, self.tag2))

    def __str__(self) -> str:
        return f"WordTwoTags(t{self.tag1},w{self.word_position},t{self.tag2})"


@dataclass(frozen=True)
class ContinuousTagConjunction(_Frame):
    """
    The contiguous run of tags from ``max_position`` up to, but excluding, 0.

    A negative ``max_position`` reads left to right (``-3`` gives
    ``t-3!t-2!t-1``); a positive one reads from the far end back toward the
    current position (``2`` gives ``t2!t1``).
    """
    max_position: int
    kind: ClassVar[str] = "tag_window"

    @property
    def offsets(self) -> range:
        if self.max_position < 0:
            return range(self.max_position, 0)
        return range(self.max_position, 0, -1)

    @property
    def left_context(self) -> int:
        return _left(self.max_position)

    @property
    def right_context(self) -> int:
        return _right(self.max_position)

    @property
    def is_dynamic(self) -> bool:
        return True

    def extract(self, history: History, store) -> str:
        return SEP.join(store.tag_at(history, p) for p in self.offsets)

    def __str__(self) -> str:
        return f"TagWindow(t{self.max_position}..t0)"


@dataclass(frozen=True)
class WordShapeExtractor(_Frame):
    """The shape of the word at ``position``."""
    position: int
    shaper: Shaper
    kind: ClassVar[str] = "word_shape"

    @property
    def is_local(self) -> bool:
        return self.position == 0

    def extract(self, history: History, store) -> str:
        return word_shape(store.word_at(history, self.position), self.shaper)

    def __str__(self) -> str:
        return f"WordShape(w{self.position},{self.shaper.name})"


@dataclass(frozen=True)
class WordShapeConjunction(_Frame):
    """The shapes of the words from ``left`` to ``right`` inclusive, joined by ``|``."""
    left: int
    right: int
    shaper: Shaper
    kind: ClassVar[str] = "word_shape_conjunction"

    def extract(self, history: History, store) -> str:
        return SHAPE_SEP.join(
            word_shape(store.word_at(history, p), self.shaper)
            for p in range(self.left, self.right + 1)
        )

    def __str__(self) -> str:
        return f"WordShapeConjunction({self.left},{self.right},{self.shaper.name})"


_VBN_STOPPER = re.compile(r"(?i:and|or|but|,|;|-|--)")
_VBN_AUXILIARY = re.compile(
    r"(?i:have|has|having|had|is|am|are|was|were|be|being|been|'ve|'s|s|'d|'re|'m"
    r"|gotten|got|gets|get|getting)"
)


@dataclass(frozen=True)
class VerbalVBNExtractor(_Frame):
    """
    ``1`` when the current word looks like a participle governed by an auxiliary.

    The word must be plausibly a VBN/VBD according to ``dictionary`` (tag
    counts per word), or end in ``ed``/``en`` when the dictionary does not
    know it. The extractor then looks back at most ``bound`` words for an
    auxiliary such as *have*, *was* or *got*, stopping at a conjunction,
    punctuation or the sentence start. It reads words only, never tags.

    The dictionary is copied and frozen at construction. Two extractors are
    equal only when their bounds and dictionary contents are.
    """
    bound: int
    dictionary: Mapping[str, Mapping[str, int]] = field(
        default_factory=dict, compare=False, repr=False
    )
    entries: Tuple[Tuple[str, Tuple[Tuple[str, int], ...]], ...] = field(
        init=False, repr=False
    )
    kind: ClassVar[str] = "vbn"

    def __post_init__(self) -> None:
        frozen = {
            str(word): MappingProxyType({str(tag): int(n) for tag, n in counts.items()})
            for word, counts in self.dictionary.items()
        }
        object.__setattr__(self, "dictionary", MappingProxyType(frozen))
        object.__setattr__(self, "entries", tuple(
            (word, tuple(sorted(counts.items()))) for word, counts in sorted(frozen.items())
        ))

    def extract(self, history: History, store) -> str:
        word = store.word_at(history, 0)
        counts = self.dictionary.get(word, {})
        total = sum(counts.values())
        participle = counts.get("VBN", 0) + counts.get("VBD", 0)
        if total > 0 and participle * 2 < total:
            return ZERO
        if total == 0 and not (word.endswith("ed") or word.endswith("en")):
            return ZERO
        for offset in range(-1, -self.bound - 1, -1):
            previous = store.word_at(history, offset)
            if previous == BOUNDARY or _VBN_STOPPER.fullmatch(previous):
                break
            if _VBN_AUXILIARY.fullmatch(previous):
                return ONE
        return ZERO

    def __str__(self) -> str:
        return f"VerbalVBN({self.bound})"


Extractor = Union[
    WordExtractor,
    LowerCaseWordExtractor,
    TagExtractor,
    CapitalizedWordExtractor,
    WordTagExtractor,
    TwoWordsExtractor,
    TwoTagsExtractor,
    TwoWordsTagExtractor,
    ThreeTagsExtractor,
    WordTwoTagsExtractor,
    ContinuousTagConjunction,
    WordShapeExtractor,
    WordShapeConjunction,
    VerbalVBNExtractor,
]

EXTRACTOR_TYPES: Tuple[type, ...] = (
    WordExtractor,
    LowerCaseWordExtractor,
    TagExtractor,
    CapitalizedWordExtractor,
    WordTagExtractor,
    TwoWordsExtractor,
    TwoTagsExtractor,
    TwoWordsTagExtractor,
    ThreeTagsExtractor,
    WordTwoTagsExtractor,
    ContinuousTagConjunction,
    WordShapeExtractor,
    WordShapeConjunction,
    VerbalVBNExtractor,
)
