"""In-memory sequence store holding the words and tags of a corpus.

Extractors never index sentences directly. They ask the store for the word or
tag at a signed offset from a `History`, and the store answers with the
boundary symbol for positions past either edge of the sentence. Tags are
filled in incrementally: during training every tag is the gold tag, during
decoding the engine assigns hypothesized tags as the search advances. Asking
for a tag that has not been assigned yet is a context-window defect in the
caller, so the store raises instead of inventing a value.
"""
from __future__ import annotations
from typing import Iterator, List, Optional, Sequence, Tuple

from .types import BOUNDARY, History


class ContextError(IndexError):
    """Raised when a tag or sentence outside the available context is requested."""


class SequenceStore:
    """
    Parallel word and tag sequences for a list of sentences.

    Words are fixed once a sentence is added. Tags may be supplied up front
    (gold tags) or assigned later, position by position, with `assign`.
    """

    def __init__(self) -> None:
        self._words: List[Tuple[str, ...]] = []
        self._tags: List[List[Optional[str]]] = []

    def __len__(self) -> int:
        return len(self._words)

    def add_sentence(self, words: Sequence[str], tags: Optional[Sequence[str]] = None) -> int:
        """
        Appends a sentence and returns its index.

        Args:
            words: The tokens of the sentence.
            tags: Optional tags, one per word. When omitted, every position
                  starts unassigned.

        Raises:
            ValueError: If ``tags`` is given with a different length than ``words``.
        """
        if tags is not None and len(tags) != len(words):
            raise ValueError(
                f"Sentence has {len(words)} words but {len(tags)} tags."
            )
        self._words.append(tuple(words))
        self._tags.append(list(tags) if tags is not None else [None] * len(words))
        return len(self._words) - 1

    def sentence_length(self, sentence: int) -> int:
        return len(self._sentence_words(sentence))

    def words(self, sentence: int) -> Tuple[str, ...]:
        return self._sentence_words(sentence)

    def tags(self, sentence: int) -> Tuple[Optional[str], ...]:
        self._sentence_words(sentence)
        return tuple(self._tags[sentence])

    def assign(self, history: History, tag: str) -> None:
        """Sets the tag of the current position of ``history``."""
        words = self._sentence_words(history.sentence)
        if not 0 <= history.position < len(words):
            raise ContextError(
                f"Position {history.position} is outside sentence {history.sentence} "
                f"of length {len(words)}."
            )
        self._tags[history.sentence][history.position] = tag

    def clear_tags(self, sentence: int) -> None:
        self._sentence_words(sentence)
        self._tags[sentence] = [None] * len(self._tags[sentence])

    def histories(self, sentence: Optional[int] = None) -> Iterator[History]:
        """Yields a history for every position of one sentence, or of all sentences."""
        indices = range(len(self._words)) if sentence is None else [sentence]
        for s in indices:
            for position in range(self.sentence_length(s)):
                yield History(s, position)

    def word_at(self, history: History, offset: int) -> str:
        words = self._sentence_words(history.sentence)
        index = history.at(offset)
        if 0 <= index < len(words):
            return words[index]
        return BOUNDARY

    def tag_at(self, history: History, offset: int) -> str:
        words = self._sentence_words(history.sentence)
        index = history.at(offset)
        if not 0 <= index < len(words):
            return BOUNDARY
        tag = self._tags[history.sentence][index]
        if tag is None:
            raise ContextError(
                f"Tag at offset {offset} from position {history.position} of sentence "
                f"{history.sentence} has not been assigned."
            )
        return tag

    def _sentence_words(self, sentence: int) -> Tuple[str, ...]:
        if not 0 <= sentence < len(self._words):
            raise ContextError(f"Unknown sentence index {sentence}.")
        return self._words[sentence]


def parse_tagged_sentence(text: str, separator: str = "_") -> Tuple[List[str], List[str]]:
    """
    Splits a whitespace-separated ``word<sep>tag`` string into words and tags.

    The separator is matched from the right so words may themselves contain
    it (e.g. ``under_score_NN``).

    Raises:
        ValueError: If an item carries no separator.
    """
    words, tags = [], []
    for item in text.split():
        word, sep, tag = item.rpartition(separator)
        if not sep or not word:
            raise ValueError(f"Item '{item}' is not of the form word{separator}tag.")
        words.append(word)
        tags.append(tag)
    return words, tags
