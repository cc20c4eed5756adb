import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from readinglist.constants import USER_AGENT
from readinglist.modules.metadata import (
    ArticleMetadata,
    absolute_image_url,
    extract_metadata,
    parse_metadata,
)


def read_page(data_dir, name: str) -> str:
    return (data_dir / name).read_text(encoding="utf-8")


class TestParseMetadata:
    def test_open_graph_wins(self, data_dir):
        metadata = parse_metadata(read_page(data_dir, "opengraph.html"), "https://site.com/post")

        assert metadata.title == "Open Graph title"
        assert metadata.description == "Open Graph description"
        assert metadata.image_url == "https://site.com/img/a.png"

    def test_twitter_card(self, data_dir):
        metadata = parse_metadata(read_page(data_dir, "twitter.html"), "https://site.com/post")

        assert metadata.title == "Twitter title"
        assert metadata.description == "Twitter description"
        assert metadata.image_url == "https://cdn.example.com/twitter.png"

    def test_blank_values_fall_through(self, data_dir):
        metadata = parse_metadata(
            read_page(data_dir, "fallbacks.html"), "https://site.com/blog/post"
        )

        assert metadata.title == "Document title"
        assert metadata.description == "Plain description"
        assert metadata.image_url == "https://site.com/images/secure.png"

    def test_first_heading(self, data_dir):
        metadata = parse_metadata(read_page(data_dir, "heading.html"), "https://site.com")

        assert metadata.title == "First heading"
        assert metadata.description is None
        assert metadata.image_url is None

    def test_nothing_found(self, data_dir):
        metadata = parse_metadata(read_page(data_dir, "bare.html"), "https://site.com")

        assert metadata == ArticleMetadata()
        assert metadata.is_empty

    def test_encoding_declaration(self):
        html = (
            '<?xml version="1.0" encoding="utf-8"?>'
            "<html><head><title>Café</title></head></html>"
        )

        assert parse_metadata(html, "https://site.com").title == "Café"


class TestAbsoluteImageUrl:
    @pytest.mark.parametrize(
        "image_url,expected",
        [
            ("/img/a.png", "https://site.com/img/a.png"),
            ("img/a.png", "https://site.com/img/a.png"),
            ("//cdn.site.com/a.png", "https://cdn.site.com/a.png"),
            ("http://other.com/a.png", "http://other.com/a.png"),
            ("https://other.com/a.png", "https://other.com/a.png"),
        ],
    )
    def test_absolute_image_url(self, image_url, expected):
        assert absolute_image_url(image_url, "https://site.com/blog/post?id=1") == expected


@pytest_asyncio.fixture
async def page_server(data_dir):
    user_agents: list[str] = []

    async def page(request):
        user_agents.append(request.headers.get("User-Agent", ""))
        return web.Response(
            text=read_page(data_dir, request.match_info["name"]),
            content_type="text/html",
        )

    async def not_found(request):
        return web.Response(status=404, text="<html><title>Not found</title></html>")

    async def server_error(request):
        return web.Response(status=500, text="<html><title>Oops</title></html>")

    async def moved(request):
        raise web.HTTPFound("/pages/twitter.html")

    async def empty(request):
        return web.Response(text="", content_type="text/html")

    app = web.Application()
    app.router.add_get("/pages/{name}", page)
    app.router.add_get("/missing", not_found)
    app.router.add_get("/broken", server_error)
    app.router.add_get("/moved", moved)
    app.router.add_get("/empty", empty)

    server = TestServer(app)
    await server.start_server()
    server.user_agents = user_agents
    yield server
    await server.close()


def server_url(server, path: str) -> str:
    return f"http://{server.host}:{server.port}{path}"


class TestExtractMetadata:
    @pytest.mark.asyncio
    async def test_extract(self, page_server):
        url = server_url(page_server, "/pages/opengraph.html")

        metadata = await extract_metadata(url)

        assert metadata.title == "Open Graph title"
        assert metadata.description == "Open Graph description"
        assert metadata.image_url == server_url(page_server, "/img/a.png")

    @pytest.mark.asyncio
    async def test_sends_browser_user_agent(self, page_server):
        await extract_metadata(server_url(page_server, "/pages/bare.html"))

        assert page_server.user_agents == [USER_AGENT]
        assert USER_AGENT.startswith("Mozilla/5.0")

    @pytest.mark.asyncio
    async def test_follows_redirects(self, page_server):
        metadata = await extract_metadata(server_url(page_server, "/moved"))

        assert metadata.title == "Twitter title"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/missing", "/broken", "/empty", "/pages/bare.html"])
    async def test_failures_give_empty_metadata(self, page_server, path):
        metadata = await extract_metadata(server_url(page_server, path))

        assert metadata == ArticleMetadata()
        assert metadata.is_empty

    @pytest.mark.asyncio
    async def test_unreachable_host(self):
        metadata = await extract_metadata("http://127.0.0.1:1/post")

        assert metadata.is_empty
