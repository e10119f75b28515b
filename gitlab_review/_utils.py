"""
Shared pure-utility functions for gitlab-review.

These helpers have no business logic and no side effects.
"""

from __future__ import annotations

import re

_INJECTION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (
        re.compile(r"^(system|assistant|user)\s*:", re.IGNORECASE | re.MULTILINE),
        "role label",
    ),
    (
        re.compile(
            r"<\s*/?\s*(system|instruction|admin|prompt|tool_call|function_call)",
            re.IGNORECASE,
        ),
        "XML-like directive tag",
    ),
    (
        re.compile(
            r"ignore\s+(all\s+)?(previous|prior|above)\s+(instructions|prompts|rules)",
            re.IGNORECASE,
        ),
        "override directive",
    ),
    (
        re.compile(
            r"forget\s+(your|all|the)\s+(rules|instructions|training|guidelines)",
            re.IGNORECASE,
        ),
        "forget directive",
    ),
    (
        re.compile(
            r"you\s+are\s+now\s+(in\s+)?(admin|root|debug|developer|unrestricted|jailbreak)",
            re.IGNORECASE,
        ),
        "mode switching",
    ),
    (
        re.compile(
            r"(execute|call|invoke|run)\s+the\s+(tool|function|command)",
            re.IGNORECASE,
        ),
        "tool invocation directive",
    ),
]


def _check_injection(text: str) -> list[str]:
    """Check text for common prompt injection patterns.

    Returns list of matched pattern descriptions (empty if clean).
    Short strings (< 10 chars) are skipped.
    """
    if not text or len(text) < 10:
        return []
    return [desc for pattern, desc in _INJECTION_PATTERNS if pattern.search(text)]


def scan_untrusted_fields(fields: dict[str, str]) -> list[str]:
    """Return ``"<field>: <pattern>"`` warnings for every flagged field."""
    warnings: list[str] = []
    for name, text in fields.items():
        for desc in _check_injection(text):
            warnings.append(f"{name}: {desc}")
    return warnings
