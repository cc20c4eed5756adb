"""Best-effort title, description and preview image of a web page.

Publishers fill in different metadata standards, so every field is resolved
with an ordered chain of lookups: the first one producing a non-empty value
wins, nothing is merged across sources.
"""

import asyncio
from collections.abc import Callable, Sequence
from functools import partial
from urllib.parse import urljoin, urlparse

import lxml.etree
import lxml.html
from aiohttp import ClientSession, ClientTimeout
from aiohttp.client_exceptions import ClientError
from loguru import logger
from pydantic import BaseModel

from ..constants import FETCH_TIMEOUT, USER_AGENT

Rule = Callable[[lxml.html.HtmlElement], str | None]


class ArticleMetadata(BaseModel):
    title: str | None = None
    description: str | None = None
    image_url: str | None = None

    @property
    def is_empty(self) -> bool:
        """Nothing usable was found (or the page could not be fetched)."""
        return not (self.title or self.description or self.image_url)


class FetchError(Exception):
    pass


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _meta_content(attribute: str, key: str, doc: lxml.html.HtmlElement) -> str | None:
    for content in doc.xpath(f'//meta[@{attribute}="{key}"]/@content'):
        return _clean(content)
    return None


def _document_title(doc: lxml.html.HtmlElement) -> str | None:
    return _clean("".join(title.text_content() for title in doc.xpath("//title")))


def _first_heading(doc: lxml.html.HtmlElement) -> str | None:
    for heading in doc.xpath("//h1"):
        return _clean(heading.text_content())
    return None


TITLE_RULES: tuple[Rule, ...] = (
    partial(_meta_content, "property", "og:title"),
    partial(_meta_content, "name", "twitter:title"),
    _document_title,
    _first_heading,
)

DESCRIPTION_RULES: tuple[Rule, ...] = (
    partial(_meta_content, "property", "og:description"),
    partial(_meta_content, "name", "twitter:description"),
    partial(_meta_content, "name", "description"),
)

IMAGE_RULES: tuple[Rule, ...] = (
    partial(_meta_content, "property", "og:image"),
    partial(_meta_content, "name", "twitter:image"),
    partial(_meta_content, "property", "og:image:secure_url"),
)


def first_match(doc: lxml.html.HtmlElement, rules: Sequence[Rule]) -> str | None:
    for rule in rules:
        if (value := rule(doc)) is not None:
            return value
    return None


def absolute_image_url(image_url: str, page_url: str) -> str:
    """Resolve a scheme-less image URL against the origin of the page."""
    if urlparse(image_url).scheme:
        return image_url
    page = urlparse(page_url)
    return urljoin(f"{page.scheme}://{page.netloc}", image_url)


def parse_metadata(html: str, url: str) -> ArticleMetadata:
    """Extract the metadata triple from an HTML document.

    Raises:
        lxml.etree.ParserError: the document is empty or unparsable.
    """
    # lxml refuses str input carrying an encoding declaration
    parser = lxml.html.HTMLParser(encoding="utf-8")
    doc = lxml.html.document_fromstring(html.encode("utf-8"), parser=parser)

    image_url = first_match(doc, IMAGE_RULES)
    if image_url is not None:
        image_url = absolute_image_url(image_url, url)

    return ArticleMetadata(
        title=first_match(doc, TITLE_RULES),
        description=first_match(doc, DESCRIPTION_RULES),
        image_url=image_url,
    )


async def fetch_page(url: str) -> str:
    """Download a page the way a browser would ask for it."""
    async with ClientSession(timeout=ClientTimeout(total=FETCH_TIMEOUT)) as session:
        try:
            async with session.get(url, headers={"User-Agent": USER_AGENT}) as response:
                response.raise_for_status()
                return await response.text(errors="replace")
        except (ClientError, asyncio.TimeoutError) as e:
            raise FetchError(f"Error fetching {url}: {e!r}") from e


async def extract_metadata(url: str) -> ArticleMetadata:
    """Fetch ``url`` and extract its metadata.

    Never raises: every failure ends in an all-null result, a broken page must
    not keep an article from being saved.
    """
    try:
        html = await fetch_page(url)
        metadata = parse_metadata(html, url)
    except FetchError as e:
        logger.warning(str(e))
        return ArticleMetadata()
    except (lxml.etree.ParserError, ValueError) as e:
        logger.warning(f"Error parsing {url}: {e!r}")
        return ArticleMetadata()
    except Exception as e:
        logger.exception(f"Unexpected error extracting metadata from {url}: {e!r}")
        return ArticleMetadata()

    if metadata.is_empty:
        logger.info(f"No metadata found in {url}")
    else:
        logger.debug(f"Extracted metadata from {url}: {metadata}")
    return metadata
