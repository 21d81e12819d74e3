"""Tests for perch.rendering — renderer registry and render contexts."""

import logging
from collections.abc import Iterator

import pytest

from perch.errors import InvalidResource
from perch.output import MemorySink, OutputSession
from perch.rendering import RenderContext, get_renderer, register_renderer
from perch.rendering.renderers import render_template, render_text
from perch.resources import DictStore
from perch.view import View

PAGE = "pages/home"


@pytest.fixture
def upper_renderer() -> Iterator[None]:
    register_renderer(".upper", lambda ctx: ctx.view.store.read_all(ctx.path).decode().upper())
    yield
    register_renderer("upper", render_text)


class TestRegistry:
    def test_template_extensions(self) -> None:
        for ext in ("html", "htm", "kida", "xml", "svg"):
            assert get_renderer(ext) is render_template

    def test_unknown_extension_is_verbatim(self) -> None:
        assert get_renderer("css") is render_text
        assert get_renderer("whatever") is render_text

    def test_lookup_is_case_insensitive(self) -> None:
        assert get_renderer("HTML") is render_template

    def test_custom_renderer(self, upper_renderer: None) -> None:
        sink = MemorySink()
        store = DictStore({f"{PAGE}/content.upper": "shout"})
        view = View("Home", PAGE, store=store, session=OutputSession(sink))
        view.require_resource("content")
        assert sink.text == "SHOUT"


class TestPythonUnits:
    def test_unit_without_render_is_invalid(self) -> None:
        store = DictStore({f"{PAGE}/content.py": "VALUE = 1\n"})
        view = View("Home", PAGE, store=store, session=OutputSession(MemorySink()))
        with pytest.raises(InvalidResource, match="render"):
            view.require_resource("content")

    def test_unit_receives_context(self) -> None:
        sink = MemorySink()
        store = DictStore(
            {
                f"{PAGE}/content.py": (
                    "def render(ctx):\n"
                    "    return f'{ctx.name}|{ctx.path}|{ctx.extension}|{\"x\" in ctx}'\n"
                )
            }
        )
        view = View("Home", PAGE, store=store, session=OutputSession(sink))
        view.set("x", 1)
        view.require_resource("content")
        assert sink.text == f"content|{PAGE}/content.py|py|True"


class TestRenderContext:
    def test_template_context_bindings(self) -> None:
        view = View("Home", PAGE, store=DictStore(), session=OutputSession(MemorySink()))
        ctx = RenderContext("content", f"{PAGE}/content.html", {"a": 1}, view)
        bindings = ctx.template_context()

        assert bindings["a"] == 1
        assert bindings["view"] is view
        assert bindings["ctx"] is ctx
        assert callable(bindings["component"])

    def test_helpers_replace_same_named_variables(self, caplog: pytest.LogCaptureFixture) -> None:
        view = View("Home", PAGE, store=DictStore(), session=OutputSession(MemorySink()))
        ctx = RenderContext("content", f"{PAGE}/content.html", {"view": "mine", "a": 1}, view)

        with caplog.at_level(logging.DEBUG, logger="perch.view"):
            bindings = ctx.template_context()

        assert bindings["view"] is view
        assert ctx["view"] == "mine"
        assert "'view' is replaced" in caplog.text

    def test_mapping_reads(self) -> None:
        view = View("Home", PAGE, store=DictStore(), session=OutputSession(MemorySink()))
        ctx = RenderContext("content", f"{PAGE}/content.html", {"a": 1}, view)

        assert ctx["a"] == 1
        assert ctx.get("b") is None
        assert list(ctx) == ["a"]
