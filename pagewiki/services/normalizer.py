"""Name normalisation: route slugs, save-time page names, display titles."""

import re

from pagewiki.services.sanitizer import sanitize_html

# Tokens: an acronym run (stopping before a capitalised word), a word with an
# optional leading capital and trailing digits, a lone capital, or a digit run.
_SLUG_TOKEN_RE = re.compile(r"[A-Z]{2,}(?=[A-Z][a-z]+[0-9]*|\b)|[A-Z]?[a-z]+[0-9]*|[A-Z]|[0-9]+")


def normalize_slug(text: str) -> str:
    """Turn a title or raw route segment into a lowercase kebab-case slug.

    ``"MyFirstPage"`` becomes ``"my-first-page"`` and ``"HTMLParser2Test"``
    becomes ``"html-parser2-test"``.  Anything that is not an ASCII letter or
    digit only separates tokens, so the result may be empty.  Normalising a
    slug again returns it unchanged.
    """
    if not text:
        return ""
    return "-".join(_SLUG_TOKEN_RE.findall(text)).lower()


def normalize_page_name(name: str) -> str:
    """Return the name a page is stored under when it is saved.

    Trims, turns spaces into hyphens and lowercases, then strips any markup
    smuggled into the name.  This is not :func:`normalize_slug`: punctuation
    survives here, so the two can disagree for the same title.
    """
    proper_name = (name or "").strip().replace(" ", "-").lower()
    return sanitize_html(proper_name).strip()


def kebab_to_title(name: str) -> str:
    """``"my-first-page"`` -> ``"My First Page"``."""
    return name.replace("-", " ").title()
