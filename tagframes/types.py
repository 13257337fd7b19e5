from __future__ import annotations
from dataclasses import dataclass

__all__ = ["History", "BOUNDARY"]

# Word and tag reported for positions beyond either edge of a sentence.
BOUNDARY = "NA"


@dataclass(frozen=True)
class History:
    """
    Identifies the decision point at which features are extracted.

    A history is the cursor the decoding or training engine hands to every
    extractor. It names a sentence in the sequence store and the position of
    the word currently being tagged; extractors address the words and tags
    around it by signed offset.

    Attributes:
        sentence: Index of the sentence inside the sequence store.
        position: Zero-based index of the current word within that sentence.
    """
    sentence: int
    position: int

    def at(self, offset: int) -> int:
        """Returns the absolute in-sentence index addressed by ``offset``."""
        return self.position + offset
