import os
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import Engine, func
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, SQLModel, create_engine, delete, select

from .models.article import Article, ArticleStatus


class DuplicateArticleError(Exception):
    pass


class ArticleNotFoundError(Exception):
    pass


class ArticleStore:
    """Persistence for articles.

    Built once at startup around an engine and handed to whatever needs it,
    each call runs in its own short session.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "ArticleStore":
        url = make_url(database_url)
        connect_args = {}
        if url.get_backend_name() == "sqlite":
            connect_args["check_same_thread"] = False
            if url.database and url.database != ":memory:":
                directory = os.path.dirname(url.database)
                if directory and not os.path.exists(directory):
                    os.makedirs(directory)
        return cls(create_engine(database_url, echo=echo, connect_args=connect_args))

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    def find_by_url(self, url: str) -> Article | None:
        with Session(self.engine) as session:
            return session.exec(select(Article).where(Article.url == url)).first()

    def get(self, article_id: str) -> Article | None:
        with Session(self.engine) as session:
            return session.get(Article, article_id)

    def insert(
        self,
        url: str,
        title: str | None = None,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Article:
        article = Article(
            url=url,
            title=title,
            description=description,
            image_url=image_url,
            status=ArticleStatus.TO_BE_READ,
        )
        with Session(self.engine) as session:
            session.add(article)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateArticleError(f"Article {url} already exists") from e
            session.refresh(article)
        logger.info(f"Stored article {article.id} for {url}")
        return article

    def list_all(self) -> list[Article]:
        with Session(self.engine) as session:
            return list(
                session.exec(select(Article).order_by(Article.created_at.desc()))  # type: ignore[attr-defined]
            )

    def update_status(self, article_id: str, status: ArticleStatus) -> Article:
        with Session(self.engine) as session:
            article = session.get(Article, article_id)
            if article is None:
                raise ArticleNotFoundError(f"Article {article_id} not found")
            article.status = status
            article.updated_at = datetime.now(timezone.utc)
            session.add(article)
            session.commit()
            session.refresh(article)
        logger.info(f"Article {article_id} is now {status.value}")
        return article

    def update_metadata(
        self, article_id: str, title: str, description: str | None
    ) -> Article:
        with Session(self.engine) as session:
            article = session.get(Article, article_id)
            if article is None:
                raise ArticleNotFoundError(f"Article {article_id} not found")
            article.title = title
            article.description = description
            session.add(article)
            session.commit()
            session.refresh(article)
        logger.info(f"Updated metadata of article {article_id}")
        return article

    def delete(self, article_id: str) -> bool:
        with Session(self.engine) as session:
            result = session.execute(delete(Article).where(Article.id == article_id))  # type: ignore[arg-type]
            session.commit()
            return result.rowcount > 0

    def count_by_status(self) -> dict[ArticleStatus, int]:
        counts = {status: 0 for status in ArticleStatus}
        with Session(self.engine) as session:
            rows = session.exec(
                select(Article.status, func.count()).group_by(Article.status)
            )
            for status, count in rows:
                counts[ArticleStatus(status)] = count
        return counts

    def count_total(self) -> int:
        with Session(self.engine) as session:
            return session.exec(select(func.count()).select_from(Article)).one()
