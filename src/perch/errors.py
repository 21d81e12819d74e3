"""Perch exception hierarchy.

Shared across the resolver, view, and static renderer so every module
raises and catches the same types. Missing optional resources and late
response headers are not errors: callers receive an absence signal or a
logged no-op instead.
"""

from pathlib import Path


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a ``ViewConfig`` is invalid.

    Typically caught at construction time from ``ViewConfig.__post_init__``.
    """


class NotFound(PerchError):  # noqa: N818 — mirrors the condition name
    """A required input is absent.

    Raised by the static renderer when the page entry logic does not exist.
    Nothing has been written when this is raised.
    """

    def __init__(self, path: str | Path, detail: str = "") -> None:
        self.path = str(path)
        self.detail = detail or f"Failed to generate page from non-existent file {self.path!r}"
        super().__init__(self.detail)


class WriteFailure(PerchError):  # noqa: N818 — mirrors the condition name
    """Persisting rendered output failed.

    Generation work has already been done when this is raised; nothing is
    rolled back.
    """

    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = str(path)
        self.reason = reason
        message = f"Failed to generate page at {self.path!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AmbiguousResource(PerchError):  # noqa: N818 — mirrors the condition name
    """More than one file shares a resource base name.

    Only raised when the resolver runs with ``resolve_policy="strict"``.
    """

    def __init__(self, base: str, candidates: tuple[str, ...]) -> None:
        self.base = base
        self.candidates = candidates
        listed = ", ".join(candidates)
        super().__init__(f"Resource {base!r} is ambiguous: {listed}")


class InvalidResource(PerchError):  # noqa: N818 — mirrors the condition name
    """A resolved resource cannot be rendered.

    Raised for Python units that define no ``render(ctx)`` function.
    """
