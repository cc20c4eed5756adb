import asyncio
from typing import Optional

import typer
import uvicorn
from loguru import logger

from .constants import DATABASE_URL, DEBUG, HOST, PORT
from .client import filter_articles
from .models.article import Article, ArticleStatus
from .modules.articles import InvalidURLError, add_article
from .modules.metadata import extract_metadata
from .modules.statistics import compute_statistics
from .store import ArticleStore, DuplicateArticleError

STORE: ArticleStore | None = None

cli = typer.Typer()


def get_store() -> ArticleStore:
    global STORE
    if STORE is None:
        STORE = ArticleStore.from_url(DATABASE_URL, echo=DEBUG)
    STORE.create_tables()
    return STORE


def _format(article: Article) -> str:
    title = article.title or "(no title)"
    return f"[{article.status.value}] {title} <{article.url}> {article.id}"


@cli.command()
def init_db():
    get_store()
    logger.info(f"Tables ready in {DATABASE_URL}")


@cli.command()
def add(url: str):
    """Add URL to the reading list."""
    store = get_store()
    try:
        result = asyncio.run(add_article(store, url, extract_metadata))
    except InvalidURLError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    except DuplicateArticleError:
        typer.echo("Article already exists", err=True)
        raise typer.Exit(code=1)
    typer.echo(_format(result.article))
    if result.needs_metadata:
        typer.echo("No metadata could be extracted, set a title from the web page.")


@cli.command("list")
def list_articles(
    search: str = typer.Option("", help="Only articles whose title or description match"),
    status: Optional[ArticleStatus] = typer.Option(None, help="Only articles in this status"),
):
    """List articles, newest first."""
    store = get_store()
    articles = store.list_all()
    if status is not None:
        articles = [article for article in articles if article.status == status]
    if search:
        keep = {a["id"] for a in filter_articles((a.model_dump() for a in articles), search)}
        articles = [article for article in articles if article.id in keep]
    for article in articles:
        typer.echo(_format(article))


@cli.command()
def stats():
    store = get_store()
    statistics = compute_statistics(store)
    typer.echo(f"Total:       {statistics.total}")
    typer.echo(f"To be read:  {statistics.to_be_read}")
    typer.echo(f"In progress: {statistics.in_progress}")
    typer.echo(f"Finished:    {statistics.finished}")
    typer.echo(f"Completion:  {statistics.completion_percentage}%")


@cli.command()
def serve(host: str = HOST, port: int = PORT):
    """Run the HTTP API."""
    uvicorn.run("readinglist.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
