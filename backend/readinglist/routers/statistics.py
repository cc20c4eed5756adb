from fastapi import APIRouter, Depends

from ..modules.statistics import Statistics, compute_statistics
from ..store import ArticleStore
from .common import get_store

router = APIRouter(
    tags=["statistics"],
    responses={500: {"description": "Internal server error"}},
)


@router.get("/statistics")
def get_statistics(store: ArticleStore = Depends(get_store)) -> Statistics:
    """Article counts per status and the share of finished articles."""
    return compute_statistics(store)
