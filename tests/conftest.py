"""Test configuration helpers for ensuring local imports resolve."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_path() -> None:
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


_ensure_project_root_on_path()

from tagframes.store import SequenceStore  # noqa: E402


@pytest.fixture
def dogs_store() -> SequenceStore:
    """A single fully tagged three-word sentence."""
    store = SequenceStore()
    store.add_sentence(["Dogs", "bark", "loudly"], ["NNS", "VBP", "RB"])
    return store
