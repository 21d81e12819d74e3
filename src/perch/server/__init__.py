"""ASGI binding for page logic."""

from perch.server.sender import ASGISink, page_app, serve_page

__all__ = ["ASGISink", "page_app", "serve_page"]
