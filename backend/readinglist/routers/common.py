from fastapi import Request
from fastapi.responses import JSONResponse

from ..modules.articles import Extractor
from ..modules.metadata import extract_metadata
from ..store import ArticleStore


def get_store(request: Request) -> ArticleStore:
    return request.app.state.store


def get_extractor() -> Extractor:
    return extract_metadata


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(content={"error": message}, status_code=status_code)
