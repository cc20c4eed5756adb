from fastapi import APIRouter, Depends
from loguru import logger
from pydantic import BaseModel, Field

from ..models.article import Article, ArticleStatus
from ..modules.articles import Extractor, InvalidURLError, add_article
from ..store import ArticleNotFoundError, ArticleStore, DuplicateArticleError
from .common import error_response, get_extractor, get_store

router = APIRouter(
    tags=["articles"],
    responses={500: {"description": "Internal server error"}},
)

NEEDS_METADATA_MESSAGE = (
    "Article added but metadata extraction failed. Please add title manually."
)


class CreateArticleRequest(BaseModel):
    url: str | None = None


class NeedsMetadataResponse(BaseModel):
    article: Article
    needs_metadata: bool = Field(default=True, serialization_alias="needsMetadata")
    message: str = NEEDS_METADATA_MESSAGE


class UpdateMetadataRequest(BaseModel):
    id: str | None = None
    title: str | None = None
    description: str | None = None


class UpdateStatusRequest(BaseModel):
    status: str | None = None


class DeleteArticleResponse(BaseModel):
    success: bool


@router.post("/articles", status_code=201)
async def create_article(
    body: CreateArticleRequest,
    store: ArticleStore = Depends(get_store),
    extract: Extractor = Depends(get_extractor),
) -> Article | NeedsMetadataResponse:
    """Add a URL to the reading list, extracting its metadata."""
    try:
        result = await add_article(store, body.url, extract)
    except InvalidURLError as e:
        return error_response(str(e), 400)
    except DuplicateArticleError:
        logger.info(f"Rejected duplicate article {body.url}")
        return error_response("Article already exists", 409)
    if result.needs_metadata:
        return NeedsMetadataResponse(article=result.article)
    return result.article


@router.get("/articles")
def list_articles(store: ArticleStore = Depends(get_store)) -> list[Article]:
    """All articles, newest first."""
    return store.list_all()


@router.patch("/articles")
def update_article_metadata(
    body: UpdateMetadataRequest, store: ArticleStore = Depends(get_store)
) -> Article:
    """Fill in the metadata of an article by hand."""
    if not body.id or not body.title or not body.title.strip():
        return error_response("Article ID and title are required", 400)
    try:
        return store.update_metadata(body.id, body.title, body.description or None)
    except ArticleNotFoundError as e:
        logger.error(e)
        return error_response("Failed to update article", 500)


@router.patch("/articles/{article_id}")
def update_article_status(
    article_id: str,
    body: UpdateStatusRequest,
    store: ArticleStore = Depends(get_store),
) -> Article:
    try:
        status = ArticleStatus(body.status)
    except ValueError:
        return error_response("Invalid status", 400)
    try:
        return store.update_status(article_id, status)
    except ArticleNotFoundError as e:
        logger.error(e)
        return error_response("Failed to update article", 500)


@router.delete("/articles/{article_id}")
def delete_article(
    article_id: str, store: ArticleStore = Depends(get_store)
) -> DeleteArticleResponse:
    if not store.delete(article_id):
        logger.warning(f"Article {article_id} not found, nothing deleted")
    else:
        logger.info(f"Deleted article {article_id}")
    return DeleteArticleResponse(success=True)
