"""Tests for normalizer.normalize_slug, normalize_page_name and kebab_to_title."""

import pytest

from pagewiki.services.normalizer import kebab_to_title, normalize_page_name, normalize_slug

_TITLES = [
    "MyFirstPage",
    "HTMLParser2Test",
    "XMLHttpRequest",
    "My First Page",
    "home-page",
    "Page 42",
    "abc2def",
    "2ndEdition",
    "ABc",
    "C++ Notes",
    "Café au lait",
    "   ",
    "",
]


class TestNormalizeSlug:
    def test_camel_case(self):
        assert normalize_slug("MyFirstPage") == "my-first-page"

    def test_acronym_and_digit_run(self):
        assert normalize_slug("HTMLParser2Test") == "html-parser2-test"

    def test_acronym_followed_by_word(self):
        assert normalize_slug("XMLHttpRequest") == "xml-http-request"

    def test_spaces_become_hyphens(self):
        assert normalize_slug("My First Page") == "my-first-page"

    def test_digit_group_is_its_own_token(self):
        assert normalize_slug("Page 42") == "page-42"

    def test_slug_is_unchanged(self):
        assert normalize_slug("home-page") == "home-page"

    def test_punctuation_only_separates(self):
        assert normalize_slug("C++ Notes") == "c-notes"

    def test_no_tokens_gives_empty_string(self):
        assert normalize_slug("!!!") == ""
        assert normalize_slug("") == ""

    @pytest.mark.parametrize("title", _TITLES)
    def test_idempotent(self, title):
        once = normalize_slug(title)
        assert normalize_slug(once) == once


class TestNormalizePageName:
    def test_trims_lowercases_and_hyphenates(self):
        assert normalize_page_name("  My Page  ") == "my-page"

    def test_strips_markup_from_name(self):
        assert normalize_page_name("Hello World<script>alert(1)</script>") == "hello-world"

    def test_keeps_punctuation_unlike_slug(self):
        # The save-time path and the route slug disagree on punctuation.
        assert normalize_page_name("C++ Notes") == "c++-notes"
        assert normalize_slug("C++ Notes") == "c-notes"

    def test_blank_name_is_empty(self):
        assert normalize_page_name("   ") == ""

    def test_camel_case_is_not_split(self):
        assert normalize_page_name("MyFirstPage") == "myfirstpage"


class TestKebabToTitle:
    def test_title_cases_words(self):
        assert kebab_to_title("my-first-page") == "My First Page"

    def test_single_word(self):
        assert kebab_to_title("home") == "Home"
