"""HTML to Markdown conversion and post-processing."""

import re

from bs4 import BeautifulSoup
from markdownify import ATX, MarkdownConverter

TRUNCATION_MARKER = "\n\n[... truncated]"

# Never useful to a text-only reader.
MEDIA_TAGS = ["img", "picture", "svg", "video", "audio", "source", "canvas"]

_BLANK_RUNS = re.compile(r"\n{3,}")
_EMPTY_HEADING = re.compile(r"^#+[ \t]*$", re.MULTILINE)
_SHARE_LINE = re.compile(
    r"^(share|tweet|pin|email|print)([ \t]+(this|on|via))?.{0,20}$",
    re.IGNORECASE | re.MULTILINE,
)
_CONSENT_LINE = re.compile(
    r"^.*(cookie|consent|privacy policy|accept all).*$",
    re.IGNORECASE | re.MULTILINE,
)


class ScoutMarkdownConverter(MarkdownConverter):
    """markdownify converter that drops images and optionally flattens links."""

    def __init__(self, include_links: bool = False, **options):
        self.include_links = include_links
        super().__init__(**options)

    def convert_a(self, el, text, *args, **kwargs):
        # Image-only anchors would otherwise leave "[](banner.jpg)" behind.
        if not text.strip():
            return ""
        if not self.include_links:
            return text
        return super().convert_a(el, text, *args, **kwargs)

    def convert_img(self, el, text, *args, **kwargs):
        return ""


def render(html: str, include_links: bool = False) -> str:
    """Convert an extracted article subtree to Markdown.

    Headings become ATX, code blocks are fenced, list bullets use ``-``.
    Images are always dropped; links keep only their anchor text unless
    *include_links* is set.
    """
    if not html or not html.strip():
        return ""
    soup = BeautifulSoup(html, "lxml")
    for el in soup.find_all(MEDIA_TAGS):
        el.decompose()

    converter = ScoutMarkdownConverter(
        include_links=include_links,
        heading_style=ATX,
        bullets="-",
        autolinks=False,
        escape_underscores=False,
        escape_asterisks=False,
        escape_misc=False,
    )
    return converter.convert(str(soup))


def clean_markdown(md: str) -> str:
    """Strip boilerplate lines from rendered Markdown.

    Passes, in order: collapse blank runs, drop empty headings, drop
    share/social and cookie/consent lines.  The result is re-collapsed so
    that ``clean_markdown(clean_markdown(x)) == clean_markdown(x)``.
    """
    md = _BLANK_RUNS.sub("\n\n", md)
    md = _EMPTY_HEADING.sub("", md)
    md = _SHARE_LINE.sub("", md)
    md = _CONSENT_LINE.sub("", md)
    md = _BLANK_RUNS.sub("\n\n", md)
    return md.strip()


def truncate(text: str, max_length: int) -> str:
    """Hard-cut *text* at *max_length* characters and mark the cut.

    Negative limits are treated as zero.
    """
    max_length = max(0, max_length)
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_MARKER


def html_to_markdown(html: str, include_links: bool = False) -> str:
    """Convert an HTML string to clean Markdown."""
    return clean_markdown(render(html, include_links=include_links))
