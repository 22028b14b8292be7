"""
Tests pour le module core.enrichment.genre_mapper.
"""

from catalog_enricher.core.enrichment.genre_mapper import (
    GENRE_RULES,
    classify_partial,
    genre_from_categories,
    genre_from_subjects,
)
from catalog_enricher.core.models import PartialEnrichment


class TestGenreFromCategories:
    """Tests pour genre_from_categories."""

    def test_empty_categories(self):
        """Test avec liste vide."""
        assert genre_from_categories([]) == "Unknown"

    def test_first_category_verbatim(self):
        assert genre_from_categories(["Science Fiction", "Fiction"]) == "Science Fiction"

    def test_first_category_trimmed(self):
        assert genre_from_categories(["  Juvenile Fiction  "]) == "Juvenile Fiction"

    def test_blank_first_category(self):
        """Test première catégorie vide -> Unknown."""
        assert genre_from_categories(["   ", "Fiction"]) == "Unknown"

    def test_long_category_truncated(self):
        label = genre_from_categories(["Comics & Graphic Novels / Manga / Science Fiction"], 20)
        assert len(label) == 20
        assert label.endswith("…")


class TestGenreFromSubjects:
    """Tests pour genre_from_subjects."""

    def test_no_subjects(self):
        assert genre_from_subjects([]) == "Unknown"

    def test_case_insensitive(self):
        """Test insensible à la casse."""
        assert genre_from_subjects(["DETECTIVE AND MYSTERY STORIES"]) == "Mystery / Thriller"

    def test_specific_genre_beats_fiction(self):
        """Test l'ordre des règles: spécifique avant Fiction."""
        assert genre_from_subjects(["Fiction", "Science fiction"]) == "Science Fiction"

    def test_nonfiction_before_fiction(self):
        assert genre_from_subjects(["Nonfiction"]) == "Nonfiction"

    def test_fiction_catch_all(self):
        assert genre_from_subjects(["American fiction", "Families"]) == "Fiction"

    def test_no_match(self):
        """Test sans correspondance."""
        assert genre_from_subjects(["Accessible book", "Protected DAISY"]) == "Unknown"

    def test_kids(self):
        assert genre_from_subjects(["Juvenile literature"]) == "Kids / YA"

    def test_keyword_inside_word_ignored(self):
        """Test "crime" ne correspond pas à "Crimean": la règle History s'applique."""
        assert genre_from_subjects(["Crimean War, 1853-1856", "History"]) == "History"

    def test_space_inside_aerospace_ignored(self):
        assert genre_from_subjects(["Aerospace engineering"]) != "Science Fiction"
        assert genre_from_subjects(["Cyberspace"]) == "Unknown"

    def test_plural_keywords(self):
        assert genre_from_subjects(["Dragons", "Wizards"]) == "Fantasy"
        assert genre_from_subjects(["English novels"]) == "Fiction"

    def test_multi_word_keyword(self):
        assert genre_from_subjects(["Fairy tales"]) == "Fantasy"


class TestClassifyPartial:
    """Tests pour classify_partial."""

    def test_categories_take_precedence(self):
        partial = PartialEnrichment(
            provider="google", categories=("History",), subjects=("Fantasy",)
        )
        assert classify_partial(partial) == "History"

    def test_subjects_used_without_categories(self):
        partial = PartialEnrichment(provider="openlibrary", subjects=("Love stories",))
        assert classify_partial(partial) == "Romance"

    def test_empty_partial(self):
        assert classify_partial(PartialEnrichment.empty("google")) == "Unknown"


class TestGenreRules:
    """Tests pour la constante GENRE_RULES."""

    def test_rules_order(self):
        labels = [label for label, _ in GENRE_RULES]
        assert labels[0] == "Mystery / Thriller"
        assert labels[-2:] == ["Nonfiction", "Fiction"]

    def test_rules_have_keywords(self):
        for label, keywords in GENRE_RULES:
            assert keywords
            assert all(k == k.lower() for k in keywords)
