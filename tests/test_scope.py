"""Tests for perch.scope — variable bindings and merged snapshots."""

import pytest

from perch.scope import Scope


class TestGetSet:
    def test_round_trip_returns_same_object(self) -> None:
        scope = Scope()
        value = {"items": [1, 2, 3]}
        scope.set("data", value)
        assert scope.get("data") is value

    def test_unknown_name_is_none(self) -> None:
        assert Scope().get("missing") is None

    def test_last_write_wins(self) -> None:
        scope = Scope()
        scope.set("x", 1)
        scope.set("x", 2)
        assert scope.get("x") == 2
        assert len(scope) == 1

    def test_none_value_is_stored(self) -> None:
        scope = Scope()
        scope.set("x", None)
        assert "x" in scope


class TestMerged:
    def test_snapshot_contains_bindings(self) -> None:
        scope = Scope({"a": 1})
        assert dict(scope.merged()) == {"a": 1}

    def test_extra_overlays_without_mutating(self) -> None:
        scope = Scope({"a": 1, "b": 2})
        merged = scope.merged({"b": 20, "c": 30})

        assert dict(merged) == {"a": 1, "b": 20, "c": 30}
        assert scope.get("b") == 2
        assert "c" not in scope

    def test_snapshot_is_read_only(self) -> None:
        merged = Scope({"a": 1}).merged()
        with pytest.raises(TypeError):
            merged["a"] = 2  # type: ignore[index]

    def test_snapshot_detached_from_later_writes(self) -> None:
        scope = Scope({"a": 1})
        merged = scope.merged()
        scope.set("a", 99)
        assert merged["a"] == 1
