"""
名稱相似度單元測試。
"""
import pytest

from figma2code.similarity import levenshtein, name_similarity, normalize


def test_normalize_strips_non_alnum():
    assert normalize("Primary-Button 2") == "primarybutton2"
    assert normalize(None) == ""


@pytest.mark.parametrize("a,b,expected", [
    ("kitten", "sitting", 3),
    ("", "abc", 3),
    ("same", "same", 0),
])
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected


def test_identity():
    for name in ["Button", "Card", "nav-bar", "x"]:
        assert name_similarity(name, name) == 1.0


def test_empty_is_zero():
    assert name_similarity("", "Button") == 0.0
    assert name_similarity("Button", "") == 0.0
    assert name_similarity("", "") == 0.0


def test_case_and_punctuation_insensitive():
    assert name_similarity("Text-Field", "textfield") == 1.0


def test_containment():
    assert name_similarity("Primary Button", "Button") == 0.9
    assert name_similarity("Button", "Primary Button") == 0.9


def test_edit_distance_ratio():
    assert name_similarity("Badge", "Bridge") == pytest.approx(1 - 2 / 6)
    assert name_similarity("abc", "xyz") == 0.0


@pytest.mark.parametrize("a,b", [
    ("Button", "Buton"),
    ("Card", "Cart"),
    ("Navigation", "NavBar"),
    ("Input", "Select"),
])
def test_symmetric_and_bounded(a, b):
    score = name_similarity(a, b)
    assert score == name_similarity(b, a)
    assert 0.0 <= score <= 1.0
