"""Tests for perch.server.sender — streaming pages over ASGI."""

from typing import Any

import pytest

from perch.resources import DictStore
from perch.server.sender import RENDER_ERROR_CHUNK, page_app, serve_page
from perch.view import View

PAGE = "pages/live"

_STORE = DictStore(
    {
        f"{PAGE}/head.html": "<meta name='live'>",
        f"{PAGE}/content.html": "<main>{{ status }}</main>",
    }
)


def _bodies(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [m for m in messages if m["type"] == "http.response.body"]


class TestServePage:
    @pytest.mark.asyncio
    async def test_header_chunk_sent_before_body(self) -> None:
        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        def logic() -> None:
            view = View("Live", PAGE, store=_STORE)
            view.set_header("X-Page", "live")
            view.render_page_header()
            view.set("status", "ready")
            view.render()

        await serve_page(logic, send)

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"x-page"] == b"live"
        assert headers[b"transfer-encoding"] == b"chunked"

        bodies = _bodies(messages)
        assert b"<!-- flush -->" in bodies[0]["body"]
        assert b"<main>" not in bodies[0]["body"]
        assert bodies[0]["more_body"] is True
        assert b"<main>ready</main>" in bodies[1]["body"]
        assert bodies[-1] == {"type": "http.response.body", "body": b"", "more_body": False}

    @pytest.mark.asyncio
    async def test_single_pass_page(self) -> None:
        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        def logic() -> None:
            view = View("Live", PAGE, store=_STORE)
            view.set("status", "done")
            view.render()

        await serve_page(logic, send)

        body = b"".join(m["body"] for m in _bodies(messages))
        assert b"<main>done</main>" in body
        assert b"<!-- flush -->" not in body

    @pytest.mark.asyncio
    async def test_error_before_output_is_500(self) -> None:
        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        def logic() -> None:
            raise RuntimeError("database down")

        await serve_page(logic, send)

        assert messages[0]["status"] == 500
        body = b"".join(m["body"] for m in _bodies(messages))
        assert body == RENDER_ERROR_CHUNK

    @pytest.mark.asyncio
    async def test_error_after_header_truncates(self) -> None:
        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        def logic() -> None:
            view = View("Live", PAGE, store=_STORE)
            view.render_page_header()
            raise RuntimeError("slow query failed")

        await serve_page(logic, send)

        assert messages[0]["status"] == 200
        bodies = _bodies(messages)
        assert b"<!-- flush -->" in bodies[0]["body"]
        assert RENDER_ERROR_CHUNK in b"".join(m["body"] for m in bodies[1:])
        assert bodies[-1]["more_body"] is False


class TestPageApp:
    @pytest.mark.asyncio
    async def test_serves_http(self) -> None:
        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": b"", "more_body": False}

        def logic() -> None:
            view = View("Live", PAGE, store=_STORE)
            view.set("status", "app")
            view.render()

        app = page_app(logic)
        await app({"type": "http", "method": "GET", "path": "/"}, receive, send)

        assert messages[0]["type"] == "http.response.start"
        assert b"<main>app</main>" in b"".join(m["body"] for m in _bodies(messages))

    @pytest.mark.asyncio
    async def test_ignores_non_http(self) -> None:
        messages: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            messages.append(message)

        async def receive() -> dict[str, Any]:
            return {"type": "lifespan.startup"}

        app = page_app(lambda: None)
        await app({"type": "lifespan"}, receive, send)
        assert messages == []
