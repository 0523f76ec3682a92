"""Utility modules for sandboxfs."""

from sandboxfs.utils.responses import create_error_response, create_success_response, render_text

__all__ = [
    "create_success_response",
    "create_error_response",
    "render_text",
]
