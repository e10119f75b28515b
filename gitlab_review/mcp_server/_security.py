"""Security: input validation for free-text tool arguments."""

from __future__ import annotations

import re

from gitlab_review import InvalidRequest

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_INPUT_LIMITS = {
    "url": 2048,
    "localRepoPath": 4096,
    "filePath": 4096,
    # GitLab's own note length limit.
    "commentBody": 1_000_000,
}


def _validate_input(text, field: str):
    """Strip control characters and enforce length limits.

    None passes through (optional arguments). Non-strings are left for the
    request models to reject with a typed error.
    """
    if not isinstance(text, str):
        return text
    cleaned = _CONTROL_RE.sub("", text)
    limit = _INPUT_LIMITS.get(field, 50_000)
    if len(cleaned) > limit:
        raise InvalidRequest(f"[ERROR] {field} exceeds maximum length of {limit} characters")
    return cleaned


def _clean_arguments(arguments: dict) -> dict:
    """Apply _validate_input to every string argument."""
    return {key: _validate_input(value, key) for key, value in arguments.items()}
