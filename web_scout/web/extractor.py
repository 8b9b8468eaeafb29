"""Content extraction pipeline.

Turns raw HTML (or any other text body) into a bounded ``ExtractedArticle``:

1. non-HTML bodies pass through, truncated;
2. HTML is parsed and optionally narrowed to a CSS selector;
3. readability-lxml picks the main article subtree;
4. the subtree is rendered to Markdown and boilerplate lines are dropped;
5. the result is cut to ``max_length`` characters.

Once it has the bytes the pipeline is a pure transform.
"""

from dataclasses import dataclass
from typing import Optional, Union

from bs4 import BeautifulSoup
from readability import Document
from readability.readability import Unparseable
from soupsieve import SelectorSyntaxError

from web_scout.errors import NoContentFound
from web_scout.utils.config import settings
from web_scout.utils.logger import get_logger
from web_scout.web.converter import clean_markdown, render, truncate

log = get_logger(__name__)

# Page chrome removed before readability scoring when no selector narrowed
# the document.
CHROME_TAGS = ["script", "style", "noscript", "iframe", "nav", "footer", "aside"]

_BYLINE_SELECTORS = '[rel="author"], [itemprop="author"], .byline, .author'


@dataclass(frozen=True)
class ExtractedArticle:
    """Readable content of one fetched page."""

    title: str
    content: str
    byline: str
    original_length: int
    source_url: str


@dataclass(frozen=True)
class MainContent:
    html: str
    title: str


def is_html(content_type: str) -> bool:
    return "html" in (content_type or "").lower()


def _decode(body: Union[str, bytes]) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def narrow_to_selector(soup: BeautifulSoup, selector: str) -> bool:
    """Replace the body with the single node matching *selector*.

    Returns True when the document was narrowed.  Zero matches, several
    matches or an invalid selector leave the document untouched.
    """
    if soup.body is None:
        return False
    try:
        matches = soup.select(selector)
    except SelectorSyntaxError:
        log.warning("Invalid CSS selector ignored: %s", selector)
        return False
    if len(matches) != 1:
        log.info("Selector %r matched %d nodes; using whole page", selector, len(matches))
        return False

    node = matches[0].extract()
    soup.body.clear()
    soup.body.append(node)
    return True


def strip_chrome(soup: BeautifulSoup) -> None:
    """Drop navigation, footers, scripts and other non-article structure."""
    for el in soup.find_all(CHROME_TAGS):
        el.decompose()
    # Whole-page forms (ASP.NET WebForms) wrap the article; only drop
    # forms without prose.
    for form in soup.find_all("form"):
        if form.find("p") is None:
            form.decompose()
    for header in soup.find_all("header"):
        if header.find_parent(["article", "main"]) is None:
            header.decompose()


def find_byline(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "author"})
    if meta and meta.get("content"):
        return str(meta["content"]).strip()

    node = soup.select_one(_BYLINE_SELECTORS)
    if node is not None:
        text = node.get_text(" ", strip=True)
        if text and len(text) <= 100:
            return text
    return ""


def extract_main_content(html: str, url: str) -> Optional[MainContent]:
    """Readability-style scoring: return the best article subtree or None."""
    try:
        doc = Document(html, url=url)
        summary = doc.summary(html_partial=True)
        title = doc.short_title() or ""
    except Unparseable as exc:
        log.debug("Readability could not parse %s: %s", url, exc)
        return None

    text = BeautifulSoup(summary, "lxml").get_text(strip=True)
    if not text:
        return None
    return MainContent(html=summary, title=title)


def extract(
    body: Union[str, bytes],
    source_url: str,
    content_type: str = "text/html",
    selector: Optional[str] = None,
    max_length: Optional[int] = None,
    include_links: bool = False,
) -> ExtractedArticle:
    """Run the full pipeline over an already-fetched body.

    Raises:
        NoContentFound: no article-like region was identified.  Treat as
            terminal; retrying the same page will not help.
    """
    limit = settings.max_content_length if max_length is None else max(0, max_length)
    text = _decode(body)

    if not is_html(content_type):
        return ExtractedArticle(
            title=source_url,
            content=truncate(text, limit),
            byline="",
            original_length=len(text),
            source_url=source_url,
        )

    soup = BeautifulSoup(text, "lxml")
    byline = find_byline(soup)

    narrowed = bool(selector) and narrow_to_selector(soup, selector)
    if not narrowed:
        strip_chrome(soup)

    main = extract_main_content(str(soup), source_url)
    if main is None:
        raise NoContentFound(
            "Readability could not extract content from this page",
            context={"url": source_url},
        )

    markdown = clean_markdown(render(main.html, include_links=include_links))
    if not markdown:
        raise NoContentFound(
            "Page has no readable text after cleanup", context={"url": source_url}
        )

    title = main.title
    if not title:
        h1 = soup.find("h1")
        title = h1.get_text(strip=True) if h1 else ""

    log.debug("Extracted %d chars from %s", len(markdown), source_url)
    return ExtractedArticle(
        title=title,
        content=truncate(markdown, limit),
        byline=byline,
        original_length=len(markdown),
        source_url=source_url,
    )
