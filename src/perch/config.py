"""View configuration.

ViewConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups. One config is shared by every View of a deployment.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

from perch.errors import ConfigurationError

# Template names served from the package's own templates/ directory
PACKAGED_PREFIX = "@perch"
DEFAULT_SHELL = f"{PACKAGED_PREFIX}/shell.html"
DEFAULT_HEADER = f"{PACKAGED_PREFIX}/header.html"

ResolvePolicy = Literal["first", "strict"]


@dataclass(frozen=True, slots=True)
class ViewConfig:
    """Deployment configuration for views. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ViewConfig(document_root="/srv/site", scripts_dir="js")

    Relative ``components_dir`` and ``scripts_dir`` are resolved against
    ``document_root``. ``shell_template`` and ``header_template`` are either
    ``@perch/...`` names (packaged defaults) or resource paths;
    ``header_template=None`` leaves the document header out.
    """

    document_root: str | Path = "."

    # Document shell
    shell_template: str = DEFAULT_SHELL
    header_template: str | None = DEFAULT_HEADER

    # Shared resources
    components_dir: str | Path = "templates/components"
    scripts_dir: str | Path = "scripts"

    # Early flush
    flush_threshold: int = 4096
    flush_filler: str = " "
    flush_marker: str = "<!-- flush -->"

    # Resolution
    resolve_policy: ResolvePolicy = "first"

    # Templates (forwarded to kida)
    autoescape: bool = True
    trim_blocks: bool = False
    lstrip_blocks: bool = False

    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.flush_threshold < 0:
            raise ConfigurationError(
                f"flush_threshold must be >= 0, got {self.flush_threshold}"
            )
        if len(self.flush_filler) != 1:
            raise ConfigurationError("flush_filler must be a single character")
        if not self.flush_marker:
            raise ConfigurationError("flush_marker must not be empty")
        if self.resolve_policy not in ("first", "strict"):
            raise ConfigurationError(
                f"resolve_policy must be 'first' or 'strict', got {self.resolve_policy!r}"
            )

    @classmethod
    def from_document_root(cls, root: str | Path, **overrides: object) -> "ViewConfig":
        """Build the conventional deployment layout under *root*.

        ``templates/shell.html``, ``templates/header.html``,
        ``templates/components/`` and ``scripts/`` below the document root.
        """
        base = Path(root)
        config = cls(
            document_root=base,
            shell_template=(base / "templates" / "shell.html").as_posix(),
            header_template=(base / "templates" / "header.html").as_posix(),
        )
        return replace(config, **overrides) if overrides else config

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ViewConfig":
        """Build a config from ``PERCH_DOCUMENT_ROOT``.

        Without the variable, the packaged shell and header are used with
        the current directory as document root.
        """
        env = os.environ if environ is None else environ
        root = env.get("PERCH_DOCUMENT_ROOT")
        if not root:
            return cls()
        return cls.from_document_root(root)

    # -- Derived paths --

    @property
    def components_path(self) -> str:
        return _under_root(self.document_root, self.components_dir)

    @property
    def scripts_path(self) -> str:
        return _under_root(self.document_root, self.scripts_dir)


def _under_root(root: str | Path, path: str | Path) -> str:
    candidate = Path(path)
    if candidate.is_absolute():
        return candidate.as_posix()
    return (Path(root) / candidate).as_posix()
