import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup, Tag
from bs4.element import PreformattedString

# Tags whose entire subtree should be removed (scripting / embedding / styling)
_REMOVE_TAGS = {
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "embed",
    "applet",
    "link",
    "meta",
    "base",
    "form",
    "frame",
    "frameset",
    # Vector graphics and MathML can both carry script and event handlers
    "svg",
    "math",
    "canvas",
    # Template elements may contain raw JS template markup
    "template",
}

# Standard formatting tags kept as-is; anything else is unwrapped to its text.
_ALLOWED_TAGS = {
    "a", "abbr", "acronym", "address", "b", "bdi", "bdo", "big", "blockquote",
    "br", "caption", "center", "cite", "code", "col", "colgroup", "dd", "del",
    "details", "dfn", "div", "dl", "dt", "em", "figcaption", "figure", "h1",
    "h2", "h3", "h4", "h5", "h6", "hr", "i", "img", "ins", "kbd", "li", "mark",
    "ol", "p", "pre", "q", "s", "samp", "small", "span", "strike", "strong",
    "sub", "summary", "sup", "table", "tbody", "td", "tfoot", "th", "thead",
    "time", "tr", "tt", "u", "ul", "var", "wbr",
}

# Attributes allowed on every surviving tag, plus per-tag extras.
_GLOBAL_ATTRS = {"class", "id", "title", "lang", "dir"}
_TAG_ATTRS = {
    "a": {"href", "rel", "name"},
    "img": {"src", "alt", "width", "height"},
    "td": {"colspan", "rowspan", "align"},
    "th": {"colspan", "rowspan", "align", "scope"},
    "col": {"span"},
    "colgroup": {"span"},
    "ol": {"start", "type", "reversed"},
    "li": {"value"},
    "time": {"datetime"},
    "q": {"cite"},
    "blockquote": {"cite"},
    "del": {"cite", "datetime"},
    "ins": {"cite", "datetime"},
    "details": {"open"},
}

_URL_ATTRS = {"href", "src", "cite"}
_SAFE_SCHEMES = {"", "http", "https", "mailto", "ftp", "tel"}

# Browsers ignore whitespace and control characters inside a URL scheme,
# so "java\tscript:" must be judged as "javascript:".
_URL_NOISE_RE = re.compile(r"[\x00-\x20\x7f]+")


def _is_safe_url(value: str) -> bool:
    """Return True when *value* is relative or uses an allowed scheme."""
    cleaned = _URL_NOISE_RE.sub("", value)
    try:
        scheme = urlparse(cleaned).scheme
    except ValueError:
        return False
    return scheme.lower() in _SAFE_SCHEMES


def _clean_attrs(tag: Tag) -> None:
    allowed = _GLOBAL_ATTRS | _TAG_ATTRS.get(tag.name, set())
    for attr in list(tag.attrs):
        name = attr.lower()
        if name not in allowed:
            del tag[attr]
        elif name in _URL_ATTRS and not _is_safe_url(str(tag[attr])):
            del tag[attr]


def sanitize_html(html: str) -> str:
    """Strip executable and unsafe markup from *html* and return the cleaned fragment.

    Dangerous elements are dropped with their content, unknown elements are
    unwrapped so their text survives, event-handler and style attributes are
    removed, and links or images pointing at ``javascript:``-like URLs lose
    that attribute.  Running the result through again changes nothing.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")

    # Remove tags that should never reach the page
    for tag in soup.find_all(_REMOVE_TAGS):
        if not tag.decomposed:
            tag.decompose()

    # Comments, doctypes, CDATA and processing instructions
    for node in soup.find_all(string=lambda text: isinstance(text, PreformattedString)):
        node.extract()

    for tag in soup.find_all(True):
        if tag.name not in _ALLOWED_TAGS:
            tag.unwrap()
            continue
        _clean_attrs(tag)

    return str(soup)
