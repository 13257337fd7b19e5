"""Manages the loading and validation of tagger feature configuration.

This module defines the `TaggerConfig` dataclass, the typed container for the
settings that decide which feature extractors a tagger uses. The
`load_config` function reads them from a YAML file and, when the file names
one, merges in a JSON tag dictionary (tag counts per word) used by the
dictionary-aware extractors.
"""
from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_ARCH = "left3words"


@dataclass
class TaggerConfig:
    """
    A typed configuration object for feature extraction.

    Attributes:
        arch: The architecture string compiled into extractors,
              e.g. ``"bidirectional5words,allwordshapes(-1,1)"``.
        tag_separator: The character separating a word from its tag in
                       ``word<sep>tag`` text.
        paths: Relative paths to auxiliary files. ``dictionary`` names a JSON
               file mapping each word to its tag counts.
        dictionary: The loaded tag counts, empty when no file was configured.
    """
    arch: str = DEFAULT_ARCH
    tag_separator: str = "_"
    paths: dict[str, str] = field(default_factory=dict)
    dictionary: dict[str, dict[str, int]] = field(default_factory=dict)


def _load_dictionary(path: Path) -> dict[str, dict[str, int]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from {path}: {e}")

    if not isinstance(data, dict):
        raise TypeError(f"Tag dictionary {path} must map words to tag counts.")
    dictionary = {}
    for word, counts in data.items():
        if not isinstance(counts, dict):
            raise TypeError(f"Tag counts for '{word}' in {path} must be a dictionary.")
        dictionary[str(word)] = {str(tag): int(n) for tag, n in counts.items()}
    return dictionary


def load_config(path: str = "config.yaml") -> TaggerConfig:
    """
    Loads and validates a tagger configuration file.

    Reads the YAML file at ``path``. If its ``paths.dictionary`` entry names a
    tag dictionary, the file is resolved relative to the YAML file and loaded;
    a missing dictionary is logged and replaced by an empty one, since only
    the ``vbn`` extractor consults it.

    Args:
        path: The path to the YAML configuration file.

    Returns:
        A populated `TaggerConfig`.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        ValueError: If the YAML or the dictionary JSON cannot be parsed.
        TypeError: If the YAML root or ``paths`` is not a mapping, or ``arch``
                   is not a string.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file at {path}: {e}")

    if y is None:
        y = {}
    if not isinstance(y, dict):
        raise TypeError(f"Configuration file {path} must be a dictionary.")

    arch = y.get("arch", DEFAULT_ARCH)
    if not isinstance(arch, str):
        raise TypeError(f"'arch' in {path} must be a string, not {type(arch).__name__}.")

    raw_paths = y.get("paths") or {}
    if not isinstance(raw_paths, dict):
        raise TypeError(f"'paths' in {path} must be a dictionary.")
    paths = {str(k): str(v) for k, v in raw_paths.items()}

    dictionary: dict[str, dict[str, int]] = {}
    dictionary_path_str = paths.get("dictionary")
    if dictionary_path_str:
        full_dictionary_path = Path(path).parent / dictionary_path_str
        if full_dictionary_path.exists():
            dictionary = _load_dictionary(full_dictionary_path)
        else:
            logger.warning(
                "Could not load tag dictionary from %s. Using an empty dictionary.",
                full_dictionary_path,
            )

    return TaggerConfig(
        arch=arch,
        tag_separator=str(y.get("tag_separator", "_")),
        paths=paths,
        dictionary=dictionary,
    )
