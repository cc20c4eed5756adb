"""HTTP client for the reading list API, used by the Streamlit page."""

from collections.abc import Iterable
from typing import Any

import httpx

from .constants import API_BASE_URL


class ReadingListError(Exception):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


def filter_articles(
    articles: Iterable[dict[str, Any]], term: str
) -> list[dict[str, Any]]:
    """Keep articles whose title or description contains ``term``, ignoring case."""
    term = term.strip().lower()
    if not term:
        return list(articles)
    return [
        article
        for article in articles
        if term in (article.get("title") or "").lower()
        or term in (article.get("description") or "").lower()
    ]


class ReadingListClient:
    def __init__(self, http: httpx.Client | None = None, base_url: str = API_BASE_URL):
        self.http = http or httpx.Client(base_url=base_url, timeout=None)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.http.request(method, path, **kwargs)
        if response.is_error:
            try:
                message = response.json().get("error", response.text)
            except ValueError:
                message = response.text
            raise ReadingListError(message, response.status_code)
        return response.json()

    def list_articles(self) -> list[dict[str, Any]]:
        return self._request("GET", "/articles")

    def statistics(self) -> dict[str, int]:
        return self._request("GET", "/statistics")

    def add_article(self, url: str) -> dict[str, Any]:
        """Add ``url``; the answer carries ``needsMetadata`` when a title is missing."""
        return self._request("POST", "/articles", json={"url": url.strip()})

    def set_metadata(
        self, article_id: str, title: str, description: str | None = None
    ) -> dict[str, Any]:
        return self._request(
            "PATCH",
            "/articles",
            json={
                "id": article_id,
                "title": title.strip(),
                "description": (description or "").strip() or None,
            },
        )

    def update_status(self, article_id: str, status: str) -> dict[str, Any]:
        return self._request("PATCH", f"/articles/{article_id}", json={"status": status})

    def delete_article(self, article_id: str) -> bool:
        return self._request("DELETE", f"/articles/{article_id}")["success"]

    def close(self) -> None:
        self.http.close()
