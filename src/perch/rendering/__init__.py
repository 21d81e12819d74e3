"""Resource rendering: kida environment, renderer registry, script embedding."""

from perch.rendering.context import RenderContext
from perch.rendering.renderers import Renderer, get_renderer, register_renderer
from perch.rendering.scripts import ScriptEmbedder, compress_script

__all__ = [
    "RenderContext",
    "Renderer",
    "ScriptEmbedder",
    "compress_script",
    "get_renderer",
    "register_renderer",
]
