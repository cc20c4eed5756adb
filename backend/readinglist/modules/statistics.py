import math

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..models.article import ArticleStatus
from ..store import ArticleStore


class Statistics(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    to_be_read: int
    in_progress: int
    finished: int
    completion_percentage: int


def completion_percentage(finished: int, total: int) -> int:
    """Share of finished articles, in whole percent rounded half up."""
    if not total:
        return 0
    return math.floor(100 * finished / total + 0.5)


def compute_statistics(store: ArticleStore) -> Statistics:
    # one grouped query, so the per-status counts always add up to the total
    counts = store.count_by_status()
    total = sum(counts.values())
    finished = counts[ArticleStatus.FINISHED]
    return Statistics(
        total=total,
        to_be_read=counts[ArticleStatus.TO_BE_READ],
        in_progress=counts[ArticleStatus.IN_PROGRESS],
        finished=finished,
        completion_percentage=completion_percentage(finished, total),
    )
