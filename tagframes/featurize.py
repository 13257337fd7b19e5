"""Applies compiled extractors to a sequence store.

This module is the bridge between the compiled feature templates and the
engines that consume them:

1.  **ExtractorSet**: wraps a compiled extractor list and partitions it the
    way a decoder wants it. Local extractors depend on the current word only,
    word-context extractors on neighbouring words only; both can be computed
    once per sentence. Dynamic extractors read hypothesized tags and must be
    recomputed for every candidate sequence. The set also reports the widest
    tag context any member needs.
2.  **Feature rows**: `feature_row` evaluates every extractor at one decision
    point of a fully tagged store and `feature_table` does so for a whole
    store, producing the table a weight estimator is trained on.
"""
from __future__ import annotations
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
from tqdm import tqdm

from .arch import compile_architecture
from .extractors import Extractor
from .store import SequenceStore
from .types import History


class ExtractorSet:
    """
    An immutable, ordered collection of extractors with engine-facing views.

    Attributes:
        extractors: The extractors in compilation order.
        local: Indices of extractors reading the current word only.
        local_context: Indices of extractors reading neighbouring words but no tags.
        dynamic: Indices of extractors reading tags.
    """

    def __init__(self, extractors: Sequence[Extractor]):
        self.extractors: Tuple[Extractor, ...] = tuple(extractors)
        self.local: Tuple[int, ...] = tuple(
            i for i, e in enumerate(self.extractors) if e.is_local and not e.is_dynamic
        )
        self.local_context: Tuple[int, ...] = tuple(
            i for i, e in enumerate(self.extractors) if not e.is_local and not e.is_dynamic
        )
        self.dynamic: Tuple[int, ...] = tuple(
            i for i, e in enumerate(self.extractors) if e.is_dynamic
        )

    @classmethod
    def from_architecture(
        cls,
        arch: str,
        dictionary: Optional[Mapping[str, Mapping[str, int]]] = None,
    ) -> "ExtractorSet":
        return cls(compile_architecture(arch, dictionary))

    def __len__(self) -> int:
        return len(self.extractors)

    def __iter__(self) -> Iterator[Extractor]:
        return iter(self.extractors)

    def __getitem__(self, index: int) -> Extractor:
        return self.extractors[index]

    @property
    def left_context(self) -> int:
        """The number of tags before the current position any extractor reads."""
        return max((e.left_context for e in self.extractors), default=0)

    @property
    def right_context(self) -> int:
        """The number of tags after the current position any extractor reads."""
        return max((e.right_context for e in self.extractors), default=0)

    def column_names(self) -> List[str]:
        return [f"{i}:{e}" for i, e in enumerate(self.extractors)]

    def extract_all(self, history: History, store) -> List[str]:
        """Returns the key of every extractor at ``history``, in order."""
        return [e.extract(history, store) for e in self.extractors]

    def extract_indices(self, indices: Sequence[int], history: History, store) -> Dict[int, str]:
        """Returns the keys of the extractors at ``indices``, keyed by index."""
        return {i: self.extractors[i].extract(history, store) for i in indices}


def feature_row(frames: ExtractorSet, store, history: History) -> Dict[str, str]:
    """
    Evaluates every extractor at one decision point.

    Args:
        frames: The compiled extractors.
        store: A sequence store whose sentence is tagged at least as far as
               the extractors' context windows require.
        history: The decision point.

    Returns:
        A dictionary with one column per extractor (see
        `ExtractorSet.column_names`) plus ``outcome``, the tag at the
        current position.
    """
    row = dict(zip(frames.column_names(), frames.extract_all(history, store)))
    row["outcome"] = store.tag_at(history, 0)
    return row


def feature_table(frames: ExtractorSet, store: SequenceStore, progress: bool = True) -> pd.DataFrame:
    """
    Builds the feature table for every position of every sentence in ``store``.

    Each row is one decision point, identified by its ``sentence`` and
    ``position`` columns, followed by one column per extractor and the gold
    ``outcome``. Every position must already carry its gold tag.

    Args:
        frames: The compiled extractors.
        store: A fully tagged sequence store.
        progress: Whether to display a progress bar over sentences.

    Returns:
        A pandas DataFrame with one row per token.

    Raises:
        ContextError: If any tag the extractors read is unassigned.
    """
    columns = ["sentence", "position"] + frames.column_names() + ["outcome"]
    rows = []
    for sentence in tqdm(range(len(store)), desc="Extracting features", disable=not progress):
        for history in store.histories(sentence):
            row = {"sentence": history.sentence, "position": history.position}
            row.update(feature_row(frames, store, history))
            rows.append(row)
    return pd.DataFrame(rows, columns=columns)
