"""Tests for perch.resources — stores and base-name resolution."""

from pathlib import Path

import pytest

from perch.errors import AmbiguousResource
from perch.resources import DictStore, FileSystemStore, Resolver, ResourceStore, resolve_extension


@pytest.fixture
def page_dir(tmp_path: Path) -> Path:
    page = tmp_path / "home"
    page.mkdir()
    (page / "content.html").write_text("<p>content</p>")
    (page / "head.txt").write_text("<meta>")
    (page / "content.old.html").write_text("stale")
    (page / "contentious.html").write_text("other")
    return page


class TestFileSystemStore:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(FileSystemStore(), ResourceStore)

    def test_exists(self, page_dir: Path) -> None:
        store = FileSystemStore()
        assert store.exists(str(page_dir / "content.html"))
        assert not store.exists(str(page_dir / "content"))
        assert not store.exists(str(page_dir))

    def test_list_matching_sorted(self, page_dir: Path) -> None:
        (page_dir / "content.md").write_text("# content")
        names = FileSystemStore().list_matching(str(page_dir / "content"))
        assert names == ["content.html", "content.md", "content.old.html"]

    def test_list_matching_missing_directory(self, tmp_path: Path) -> None:
        assert FileSystemStore().list_matching(str(tmp_path / "nope" / "content")) == []

    def test_read_all(self, page_dir: Path) -> None:
        assert FileSystemStore().read_all(str(page_dir / "head.txt")) == b"<meta>"

    def test_relative_paths_use_root(self, page_dir: Path) -> None:
        store = FileSystemStore(page_dir.parent)
        assert store.exists("home/content.html")
        assert store.list_matching("home/head") == ["head.txt"]


class TestDictStore:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(DictStore(), ResourceStore)

    def test_str_content_is_encoded(self) -> None:
        store = DictStore({"a/b.txt": "é"})
        assert store.read_all("a/b.txt") == "é".encode()

    def test_paths_are_normalized(self) -> None:
        store = DictStore({"./a//b.txt": "x"})
        assert store.exists("a/b.txt")

    def test_list_matching_same_directory_only(self) -> None:
        store = DictStore({"a/b.txt": "", "a/sub/b.txt": "", "a/b.js": ""})
        assert store.list_matching("a/b") == ["b.js", "b.txt"]

    def test_read_missing_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            DictStore().read_all("missing.txt")


class TestResolveExtension:
    def test_single_match(self, page_dir: Path) -> None:
        assert resolve_extension(FileSystemStore(), str(page_dir), "head") == "txt"

    def test_no_match_is_none(self, page_dir: Path) -> None:
        assert resolve_extension(FileSystemStore(), str(page_dir), "scripts") is None

    def test_stem_must_match_exactly(self, page_dir: Path) -> None:
        # content.old.html and contentious.html are not "content"
        assert resolve_extension(FileSystemStore(), str(page_dir), "content") == "html"

    def test_extensionless_file_does_not_match(self) -> None:
        store = DictStore({"page/content": "x"})
        assert resolve_extension(store, "page", "content") is None

    def test_multiple_matches_deterministic(self) -> None:
        store = DictStore({"page/content.md": "", "page/content.html": ""})
        results = {resolve_extension(store, "page", "content") for _ in range(5)}
        assert results == {"html"}

    def test_strict_policy_rejects_ambiguity(self) -> None:
        store = DictStore({"page/content.md": "", "page/content.html": ""})
        with pytest.raises(AmbiguousResource) as exc_info:
            resolve_extension(store, "page", "content", policy="strict")
        assert exc_info.value.candidates == ("content.html", "content.md")

    def test_strict_policy_single_match(self) -> None:
        store = DictStore({"page/content.html": ""})
        assert resolve_extension(store, "page", "content", policy="strict") == "html"


class TestResolver:
    def test_resolve_returns_path(self) -> None:
        resolver = Resolver(DictStore({"page/content.html": ""}))
        assert resolver.resolve("page", "content") == "page/content.html"

    def test_resolve_missing(self) -> None:
        assert Resolver(DictStore()).resolve("page", "content") is None

    def test_resolve_path(self) -> None:
        resolver = Resolver(DictStore({"/srv/scripts/app.js": ""}))
        assert resolver.resolve_path("/srv/scripts/app") == "/srv/scripts/app.js"

    def test_resolve_name_in_subdirectory(self) -> None:
        resolver = Resolver(DictStore({"components/forms/input.html": "<input>"}))
        assert resolver.resolve("components", "forms/input") == "components/forms/input.html"

    def test_subdirectory_name_on_disk(self, tmp_path: Path) -> None:
        nested = tmp_path / "components" / "forms"
        nested.mkdir(parents=True)
        (nested / "input.html").write_text("<input>")
        (nested / "input.old.html").write_text("stale")

        resolver = Resolver(FileSystemStore(tmp_path))
        assert resolver.resolve("components", "forms/input") == "components/forms/input.html"

    def test_subdirectory_ambiguity_names_leaf_files(self) -> None:
        store = DictStore({"components/forms/input.html": "", "components/forms/input.txt": ""})
        with pytest.raises(AmbiguousResource) as exc_info:
            Resolver(store, "strict").resolve("components", "forms/input")
        assert exc_info.value.candidates == ("input.html", "input.txt")
