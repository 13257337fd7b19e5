import argparse
import sys
from pathlib import Path

# Add project root to path for robust execution
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from tagframes.config import TaggerConfig, load_config
from tagframes.featurize import ExtractorSet
from tagframes.store import SequenceStore, parse_tagged_sentence


def describe_frames(frames: ExtractorSet) -> str:
    """Formats one line per extractor: index, rule, context window and flags."""
    lines = [f"{'#':>3}  {'extractor':<40} {'left':>4} {'right':>5}  flags"]
    for i, e in enumerate(frames):
        flags = []
        if e.is_local:
            flags.append("local")
        if e.is_dynamic:
            flags.append("dynamic")
        lines.append(
            f"{i:>3}  {str(e):<40} {e.left_context:>4} {e.right_context:>5}  {','.join(flags) or '-'}"
        )
    lines.append(f"Tag context required: {frames.left_context} left, {frames.right_context} right.")
    return "\n".join(lines)


def describe_features(frames: ExtractorSet, store: SequenceStore) -> str:
    """Formats the feature keys of every extractor at every position of sentence 0."""
    lines = []
    for history in store.histories(0):
        word = store.word_at(history, 0)
        keys = frames.extract_all(history, store)
        lines.append(f"[{history.position}] {word}")
        lines.extend(f"    {e}: {key}" for e, key in zip(frames, keys))
    return "\n".join(lines)


def main():
    """
    Command-line interface for inspecting compiled feature architectures.

    It performs the following steps:
    1.  Resolves the architecture string, from ``--arch`` or from the
        configuration file given with ``--config``.
    2.  Compiles it into feature extractors and prints each one with its tag
        context window and its local/dynamic flags.
    3.  If a tagged sentence is supplied, prints the feature key every
        extractor produces at each position.
    """
    parser = argparse.ArgumentParser(
        description="Compile a tagger feature architecture and inspect its extractors.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--arch",
        help="Architecture string, e.g. 'left3words,allwordshapes(-1,1)'. Overrides --config."
    )
    parser.add_argument(
        "--config",
        help="Path to a configuration YAML file providing 'arch'."
    )
    parser.add_argument(
        "--sentence",
        help="A tagged sentence such as 'The_DT dog_NN barks_VBZ' to extract features from."
    )
    parser.add_argument(
        "--separator",
        help="Word/tag separator for --sentence. Defaults to the configured separator."
    )
    args = parser.parse_args()

    try:
        if args.config:
            print(f"Loading configuration from {args.config}...")
            cfg = load_config(args.config)
        else:
            cfg = TaggerConfig()
        arch = args.arch if args.arch is not None else cfg.arch

        print(f"Compiling architecture '{arch}'...")
        frames = ExtractorSet.from_architecture(arch, cfg.dictionary)
        print(describe_frames(frames))

        if args.sentence:
            separator = args.separator or cfg.tag_separator
            words, tags = parse_tagged_sentence(args.sentence, separator)
            store = SequenceStore()
            store.add_sentence(words, tags)
            print()
            print(describe_features(frames, store))

    except (FileNotFoundError, ValueError, TypeError, IndexError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
