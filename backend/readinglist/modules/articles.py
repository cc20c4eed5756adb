from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from loguru import logger
from pydantic import HttpUrl, TypeAdapter, ValidationError

from ..models.article import Article
from ..store import ArticleStore, DuplicateArticleError
from .metadata import ArticleMetadata

Extractor = Callable[[str], Awaitable[ArticleMetadata]]

_http_url = TypeAdapter(HttpUrl)


class InvalidURLError(Exception):
    pass


@dataclass
class AddArticleResult:
    """Outcome of adding an article."""

    article: Article
    needs_metadata: bool = False


def validate_url(url: str | None) -> str:
    """Return the submitted URL, stripped, if it is an absolute http(s) URL.

    The URL is stored as submitted, pydantic's normalized form is only used
    for validation.
    """
    url = (url or "").strip()
    if not url:
        raise InvalidURLError("URL is required")
    try:
        _http_url.validate_python(url)
    except ValidationError as e:
        raise InvalidURLError("Invalid URL format") from e
    return url


async def add_article(
    store: ArticleStore, url: str | None, extract: Extractor
) -> AddArticleResult:
    """Add a URL to the reading list.

    Raises:
        InvalidURLError: the URL is missing or malformed.
        DuplicateArticleError: the URL is already on the list.
    """
    url = validate_url(url)
    if store.find_by_url(url) is not None:
        raise DuplicateArticleError(f"Article {url} already exists")

    metadata = await extract(url)
    if metadata.is_empty:
        logger.info(f"No metadata for {url}, storing it for manual completion")
        article = store.insert(url)
        return AddArticleResult(article=article, needs_metadata=True)

    article = store.insert(
        url,
        title=metadata.title,
        description=metadata.description,
        image_url=metadata.image_url,
    )
    return AddArticleResult(article=article)
