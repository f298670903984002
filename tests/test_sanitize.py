"""Tests for identifier normalization and label helpers."""

import pytest

from autolist.sanitize import (
    is_placeholder,
    label_language,
    make_placeholder,
    normalize_item_id,
    normalize_property_id,
    page_label,
    strip_disambiguation,
)


class TestNormalizeItemId:
    @pytest.mark.parametrize("raw", ["Q42", "q42", "42", " Q42 "])
    def test_accepts(self, raw):
        assert normalize_item_id(raw) == "Q42"

    @pytest.mark.parametrize("raw", ["P31", "Q", "Douglas Adams", ""])
    def test_rejects(self, raw):
        with pytest.raises(ValueError):
            normalize_item_id(raw)


class TestNormalizePropertyId:
    def test_lowercase(self):
        assert normalize_property_id("p31") == "P31"

    def test_rejects_item(self):
        with pytest.raises(ValueError):
            normalize_property_id("Q5")


class TestPlaceholders:
    def test_round_trip(self):
        assert make_placeholder(3) == "create_item_3"
        assert is_placeholder("create_item_3")

    def test_item_is_not_placeholder(self):
        assert not is_placeholder("Q3")


class TestLabelLanguage:
    @pytest.mark.parametrize(
        "wiki, lang",
        [("enwiki", "en"), ("dewikisource", "de"), ("commonswiki", "en"), ("zh-yuewiki", "zh-yue")],
    )
    def test_languages(self, wiki, lang):
        assert label_language(wiki) == lang


class TestLabels:
    def test_page_label(self):
        assert page_label("Douglas_Adams") == "Douglas Adams"

    def test_strip_disambiguation(self):
        assert strip_disambiguation("Paris_(band)") == "Paris"

    def test_strip_disambiguation_only_first(self):
        assert strip_disambiguation("A_(x)_B_(y)") == "A B (y)"
