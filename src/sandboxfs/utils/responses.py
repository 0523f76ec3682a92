"""Shared response helper functions for tools.

Every tool returns one of two envelopes so callers can handle results
uniformly, and :func:`render_text` turns either into the text payload sent
back over the wire.
"""

import json
from typing import Any


def create_success_response(result: Any, message: str = "") -> dict:
    """Create standardized success response.

    Args:
        result: Operation result (text, or JSON-compatible data)
        message: Optional success message for logging/display

    Returns:
        Structured response dict with success=True

    Example:
        >>> create_success_response(result=["a.txt"], message="Found 1 file")
        {'success': True, 'result': ['a.txt'], 'message': 'Found 1 file'}
    """
    return {
        "success": True,
        "result": result,
        "message": message,
    }


def create_error_response(error: str, message: str) -> dict:
    """Create standardized error response.

    Tools use this when an operation fails rather than raising, so the
    dispatcher can report the failure without losing the error code.

    Args:
        error: Machine-readable error code (e.g., "not_found")
        message: Human-friendly error message

    Returns:
        Structured response dict with success=False

    Example:
        >>> create_error_response(
        ...     error="not_found",
        ...     message="Failed to read file: File not found: notes.txt"
        ... )
        {'success': False, 'error': 'not_found', 'message': '...'}
    """
    return {
        "success": False,
        "error": error,
        "message": message,
    }


def render_text(response: dict) -> str:
    """Render a response envelope as a text payload.

    Text results are returned verbatim (file contents must round-trip
    untouched). Structured results follow the message line as indented JSON.
    Failures render as their message.
    """
    if not response.get("success"):
        return response.get("message", "")

    result = response.get("result")
    message = response.get("message", "")
    if isinstance(result, str):
        return result
    if result is None:
        return message

    body = json.dumps(result, indent=2, ensure_ascii=False)
    return f"{message}\n{body}" if message else body
