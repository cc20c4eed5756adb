from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from sqlmodel import Field, SQLModel


class ArticleStatus(str, Enum):
    TO_BE_READ = "to_be_read"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


class Article(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    url: str = Field(unique=True, index=True)
    title: str | None = Field(default=None)
    description: str | None = Field(default=None)
    image_url: str | None = Field(default=None)
    status: ArticleStatus = Field(default=ArticleStatus.TO_BE_READ, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
