"""Inline script embedding.

Turns a script resource into a ``<script>`` element:

    <script>
    (function () {          <- anonymous=True
    var user = {"id": 7};   <- one line per embedded variable
    ...file contents...     <- compressed=True strips comments/whitespace
    })();
    </script>

A missing script is not an error; the element is replaced by a visible
HTML comment naming the script.

Compression is a lexical strip, not a parser. It does not know about string
or regex literals, so ``"http://x"`` inside a string loses everything from
``//`` on. Scripts that contain comment-like text in literals must not be
embedded with ``compressed=True``.
"""

import json
import logging
import re
from collections.abc import Mapping

from perch.resources.resolver import Resolver
from perch.scope import ScopeValue

logger = logging.getLogger("perch.scripts")

# Block comments and line comments, leftmost first
_COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")
_DASHES_RE = re.compile(r"-{2,}")


def compress_script(source: str) -> str:
    """Strip ``//`` and ``/* */`` comments and collapse whitespace runs.

    Each comment becomes a single space so that tokens on either side stay
    apart, then every whitespace run becomes one space.
    """
    stripped = _COMMENT_RE.sub(" ", source)
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def serialize_value(value: ScopeValue) -> str:
    """Serialize *value* as a JSON literal safe inside a ``<script>`` element."""
    return json.dumps(value).replace("</", "<\\/")


def missing_script_comment(name: str) -> str:
    # Dash runs in the name would end the comment early
    safe = _DASHES_RE.sub("-", name)
    return f"<!-- script {safe!r} not found -->"


class ScriptEmbedder:
    """Render script resources from *scripts_dir* as inline markup.

    Variable names are emitted verbatim as ``var`` declarations; callers
    own them and they are not validated.
    """

    __slots__ = ("encoding", "resolver", "scripts_dir")

    def __init__(self, resolver: Resolver, scripts_dir: str, *, encoding: str = "utf-8") -> None:
        self.resolver = resolver
        self.scripts_dir = scripts_dir
        self.encoding = encoding

    def locate(self, name: str, *, path: bool = False) -> str | None:
        """Find the script file for *name*.

        With ``path=True``, *name* is a resource path, with or without its
        extension; otherwise it is a base name inside ``scripts_dir``.
        """
        if not path:
            return self.resolver.resolve(self.scripts_dir, name)
        if self.resolver.store.exists(name):
            return name
        return self.resolver.resolve_path(name)

    def embed(
        self,
        name: str,
        variables: Mapping[str, ScopeValue] | None = None,
        *,
        path: bool = False,
        anonymous: bool = False,
        compressed: bool = False,
    ) -> str:
        """Return the ``<script>`` markup for *name*.

        Args:
            name: Script base name, or resource path with ``path=True``.
            variables: Values declared as ``var`` before the script body.
            path: Treat *name* as a path rather than a scripts_dir name.
            anonymous: Wrap the body in an immediately-invoked function.
            compressed: Strip comments and collapse whitespace in the body.
        """
        located = self.locate(name, path=path)
        if located is None:
            logger.warning("Script %r not found", name)
            return missing_script_comment(name)

        body = self.resolver.store.read_all(located).decode(self.encoding)
        if compressed:
            body = compress_script(body)

        lines = ["<script>"]
        if anonymous:
            lines.append("(function () {")
        if variables:
            lines.extend(
                f"var {var_name} = {serialize_value(value)};"
                for var_name, value in variables.items()
            )
        lines.append(body)
        if anonymous:
            lines.append("})();")
        lines.append("</script>")
        return "\n".join(lines)
