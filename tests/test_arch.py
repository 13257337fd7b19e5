import logging

import pytest

from tagframes.arch import GERMAN, SIGHAN2005, compile_architecture, compile_expanded
from tagframes.extractors import (
    ContinuousTagConjunction,
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
from tagframes.grammar import ArchitectureError
from tagframes.shapes import lookup_shaper
from tagframes.store import SequenceStore
from tagframes.types import History


def _warnings(caplog):
    return [r for r in caplog.records if r.name == "tagframes.arch" and r.levelno == logging.WARNING]


@pytest.mark.parametrize("left,right", [(-2, 2), (-1, 1), (0, 3), (-3, -1), (0, 0)])
def test_words_window_emits_one_extractor_per_offset(left, right):
    frames = compile_architecture(f"words({left},{right})")
    assert len(frames) == right - left + 1
    assert frames == [WordExtractor(i) for i in range(left, right + 1)]


def test_empty_window_emits_nothing():
    assert compile_architecture("words(2,1)") == []


def test_window_keywords_build_their_variant():
    chris2 = lookup_shaper("chris2")
    chris4 = lookup_shaper("chris4")
    assert compile_architecture("tags(-1,0)") == [TagExtractor(-1), TagExtractor(0)]
    assert compile_architecture("lowercasewords(0,1)") == [
        LowerCaseWordExtractor(0),
        LowerCaseWordExtractor(1),
    ]
    assert compile_architecture("allwordshapes(-1,0)") == [
        WordShapeExtractor(-1, chris2),
        WordShapeExtractor(0, chris2),
    ]
    assert compile_architecture("allunicodeshapes(1,1)") == [WordShapeExtractor(1, chris4)]
    assert compile_architecture("allunicodeshapeconjunction(-1,1)") == [
        WordShapeConjunction(-1, 1, chris4)
    ]


def test_biwords_pairs_adjacent_offsets_up_to_right_bound():
    assert compile_architecture("biwords(-2,1)") == [
        TwoWordsExtractor(-2, -1),
        TwoWordsExtractor(-1, 0),
        TwoWordsExtractor(0, 1),
    ]


def test_pair_and_triple_keywords():
    frames = compile_architecture(
        "biword(1,-2),twoTags(1,-1),wordTag(0,-1),wordTwoTags(0,1,-2),threeTags(1,-2,-1)"
    )
    assert frames == [
        TwoWordsExtractor(-2, 1),
        TwoTagsExtractor(-1, 1),
        WordTagExtractor(0, -1),
        WordTwoTagsExtractor(0, -2, 1),
        ThreeTagsExtractor(-2, -1, 1),
    ]


def test_order_builds_growing_tag_ngrams():
    assert compile_architecture("order(2)") == [ContinuousTagConjunction(-2), TagExtractor(-1)]
    assert compile_architecture("order(-4,1)") == [
        ContinuousTagConjunction(-4),
        ContinuousTagConjunction(-3),
        ContinuousTagConjunction(-2),
        TagExtractor(-1),
        TagExtractor(1),
    ]
    assert compile_architecture("order(-2,2)") == [
        ContinuousTagConjunction(-2),
        TagExtractor(-1),
        TagExtractor(1),
        ContinuousTagConjunction(2),
    ]


def test_order_never_emits_offset_zero():
    assert compile_architecture("order(0,0)") == []
    for frame in compile_architecture("order(-3,3)"):
        assert getattr(frame, "position", None) != 0
        assert getattr(frame, "max_position", None) != 0


def test_order_with_negative_right_bound_is_fatal():
    with pytest.raises(ArchitectureError, match="non-negative"):
        compile_architecture("order(2,-1)")
    with pytest.raises(ArchitectureError):
        compile_architecture("words(-1,1),order(-2,-1)")


def test_left3words_matches_its_expansion():
    assert compile_architecture("left3words") == compile_architecture("words(-1,1),order(2)")
    assert compile_architecture("left3words") == [
        WordExtractor(-1),
        WordExtractor(0),
        WordExtractor(1),
        ContinuousTagConjunction(-2),
        TagExtractor(-1),
    ]


def test_generic_macro_output():
    assert compile_architecture("generic") == [
        WordExtractor(-1),
        WordExtractor(0),
        WordExtractor(1),
        ContinuousTagConjunction(-2),
        TagExtractor(-1),
        TwoWordsExtractor(-1, 0),
        WordTagExtractor(0, -1),
    ]


def test_unknown_token_warns_and_keeps_neighbours(caplog):
    with caplog.at_level(logging.WARNING, logger="tagframes.arch"):
        frames = compile_architecture("words(0,0),frobnicate(3),tags(-1,-1)")
    assert frames == [WordExtractor(0), TagExtractor(-1)]
    warnings = _warnings(caplog)
    assert len(warnings) == 1
    assert "frobnicate(3)" in warnings[0].getMessage()


def test_unknown_token_with_non_numeric_arguments_is_not_fatal(caplog):
    with caplog.at_level(logging.WARNING, logger="tagframes.arch"):
        assert compile_architecture("mystery(a,b)") == []
    assert len(_warnings(caplog)) == 1


def test_window_keyword_requires_parentheses(caplog):
    with caplog.at_level(logging.WARNING, logger="tagframes.arch"):
        assert compile_architecture("words") == []
    assert len(_warnings(caplog)) == 1


def test_rare_word_keywords_are_silent_noops(caplog):
    arch = (
        "naacl2003unknowns,LNAACL2003UNKNOWNS,suffix(4),prefix(3),prefixsuffix6,"
        "wordshapes(-1,1),distsim(/u/clusters/egw.bnc.200,-1,1),motleyUnknown,"
        "unicodeshapes(0),chinesedictionaryfeatures(/dict/path,1,6),lctagfeatures"
    )
    with caplog.at_level(logging.WARNING, logger="tagframes.arch"):
        assert compile_architecture(arch) == []
    assert _warnings(caplog) == []


def test_literal_feature_sets():
    assert compile_architecture("sighan2005") == list(SIGHAN2005)
    assert compile_architecture("GERMAN") == list(GERMAN)
    assert len(GERMAN) == 8
    assert TwoWordsExtractor(-1, 0) in GERMAN


def test_sighan2005_is_case_sensitive(caplog):
    with caplog.at_level(logging.WARNING, logger="tagframes.arch"):
        assert compile_architecture("Sighan2005") == []
    assert len(_warnings(caplog)) == 1


def test_malformed_arguments_are_fatal():
    with pytest.raises(ArchitectureError):
        compile_architecture("words(-1,x)")
    with pytest.raises(ArchitectureError):
        compile_architecture("left3words,words(-1,1")
    with pytest.raises(ArchitectureError):
        compile_architecture("words(0,1_0)")


def test_missing_arguments_default_to_zero():
    assert compile_architecture("words(-2)") == [
        WordExtractor(-2),
        WordExtractor(-1),
        WordExtractor(0),
    ]


def test_vbn_receives_dictionary():
    dictionary = {"broken": {"VBN": 3}}
    (frame,) = compile_architecture("vbn(3)", dictionary)
    assert isinstance(frame, VerbalVBNExtractor)
    assert frame.bound == 3
    assert frame.dictionary["broken"]["VBN"] == 3


def test_compiled_vbn_ignores_later_dictionary_changes():
    dictionary = {"broken": {"VBN": 37, "JJ": 12}}
    (frame,) = compile_architecture("vbn(3)", dictionary)
    store = SequenceStore()
    store.add_sentence(["it", "was", "broken"])
    assert frame.extract(History(0, 2), store) == "1"

    dictionary["broken"]["JJ"] = 1000
    dictionary["was"] = {"VBN": 5}

    assert frame.extract(History(0, 2), store) == "1"
    assert dict(frame.dictionary["broken"]) == {"VBN": 37, "JJ": 12}
    assert "was" not in frame.dictionary


def test_compilation_is_deterministic():
    arch = "bidirectional5words,allunicodeshapes(-2,2),threeTags(-1,1,-2),vbn(2)"
    assert compile_architecture(arch) == compile_architecture(arch)
    assert compile_expanded("words(-1,1)") == compile_architecture("words(-1,1)")


class RecordingStore:
    """Answers every request and remembers which tag offsets were read."""

    def __init__(self):
        self.tag_offsets = []

    def word_at(self, history, offset):
        return f"w{offset}"

    def tag_at(self, history, offset):
        self.tag_offsets.append(offset)
        return f"T{offset}"


def test_declared_context_covers_every_tag_read():
    arch = (
        "bidirectional5words,order(-4,3),tags(-3,2),threeTags(2,-3,0),"
        "wordTwoTags(0,3,-2),twoTags(-4,-4),wordTag(1,2),lowercasewords(-1,1),"
        "allwordshapes(-2,2),allunicodeshapeconjunction(-2,2),vbn(3),sighan2005,german"
    )
    for frame in compile_architecture(arch):
        store = RecordingStore()
        frame.extract(History(0, 10), store)
        if store.tag_offsets:
            assert frame.is_dynamic, frame
            assert frame.left_context >= max(0, -min(store.tag_offsets)), frame
            assert frame.right_context >= max(0, max(store.tag_offsets)), frame
            assert not frame.is_local, frame
        else:
            assert not frame.is_dynamic, frame
            assert frame.left_context == 0 and frame.right_context == 0, frame


def test_end_to_end_three_word_sentence():
    store = SequenceStore()
    store.add_sentence(["Dogs", "bark", "loudly"], ["NNS", None, None])
    history = History(0, 1)

    frames = compile_architecture("words(-1,1),twoTags(-1,1)")

    assert [f.extract(history, store) for f in frames[:3]] == ["Dogs", "bark", "loudly"]
    two_tags = frames[3]
    assert two_tags == TwoTagsExtractor(-1, 1)
    assert two_tags.is_dynamic
    assert (two_tags.left_context, two_tags.right_context) == (1, 1)

    with pytest.raises(IndexError):
        two_tags.extract(history, store)

    store.assign(History(0, 2), "RB")
    assert two_tags.extract(history, store) == "NNS!RB"
