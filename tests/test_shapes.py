import pytest

from tagframes.shapes import UnknownShaperError, lookup_shaper, word_shape


def test_lookup_is_case_insensitive():
    assert lookup_shaper("CHRIS2").name == "chris2"
    assert lookup_shaper("chris2") is lookup_shaper("Chris2")


def test_unknown_shaper_raises():
    with pytest.raises(UnknownShaperError):
        lookup_shaper("dan9")
    with pytest.raises(ValueError):
        lookup_shaper("")


@pytest.mark.parametrize("word,expected", [
    ("Foo5", "Xxxd"),
    ("Stanford2011", "Xxdxdd"),
    ("U.S.", "X.X."),
    ("hello", "xxxxx"),
    ("a", "x"),
    ("", ""),
])
def test_chris2_shapes(word, expected):
    assert word_shape(word, lookup_shaper("chris2")) == expected


@pytest.mark.parametrize("word,expected", [
    ("Über-5", "Xxx-d"),
    ("北京", "cc"),
    ("(3%)", "(d%)"),
    ("don't", "xxx'x"),
    ("€5", "$d"),
    ("", ""),
])
def test_chris4_shapes(word, expected):
    assert word_shape(word, lookup_shaper("chris4")) == expected


def test_long_words_collapse_to_the_same_shape():
    chris2 = lookup_shaper("chris2")
    assert word_shape("Washington", chris2) == word_shape("Wellington", chris2)


def test_none_shaper_is_identity():
    assert word_shape("Foo5", lookup_shaper("none")) == "Foo5"


@pytest.mark.parametrize("name", ["none", "chris2", "chris4"])
def test_shapers_are_total(name):
    shaper = lookup_shaper(name)
    for word in ["\t", "NA", "--", "ǅemal", "x" * 40, "🙂"]:
        assert isinstance(word_shape(word, shaper), str)
