"""
Merge request URL parsing.

Pure functions: no network, no side effects. ``parse_mr_url`` returns a tagged
result so callers can branch without catching exceptions; ``require_reference``
is the raising variant used at the tool boundary.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gitlab_review.exceptions import InvalidReferenceFormat

# <scheme>://<host>/<projectPath>/-/merge_requests/<iid>[/...|?...|#...]
# projectPath is greedy up to the last "/-/merge_requests/" separator.
_MR_URL_RE = re.compile(
    r"^(?P<base>https?://[^/\s]+)/(?P<project>.+)/-/merge_requests/(?P<iid>\d+)(?:[/?#].*)?$"
)


@dataclass(frozen=True)
class MrReference:
    """Identifies one merge request on the configured host."""

    project_path: str
    mr_iid: int
    web_url: str = ""


@dataclass(frozen=True)
class ParsedReference:
    reference: MrReference
    ok = True


@dataclass(frozen=True)
class RejectedReference:
    reason: str
    ok = False


ReferenceParse = ParsedReference | RejectedReference


def parse_mr_url(url) -> ReferenceParse:
    """Extract project path and MR number from a GitLab merge request URL."""
    if not isinstance(url, str):
        return RejectedReference(
            f"Invalid GitLab MR URL format: expected a string, got {type(url).__name__}"
        )
    text = url.strip()
    match = _MR_URL_RE.match(text)
    if not match:
        return RejectedReference(f"Invalid GitLab MR URL format: {text!r}")
    iid = int(match.group("iid"))
    if iid <= 0:
        return RejectedReference(
            f"Invalid GitLab MR URL format: MR number must be positive in {text!r}"
        )
    project = match.group("project").strip("/")
    if not project:
        return RejectedReference(f"Invalid GitLab MR URL format: empty project path in {text!r}")
    web_url = f"{match.group('base')}/{project}/-/merge_requests/{iid}"
    return ParsedReference(MrReference(project_path=project, mr_iid=iid, web_url=web_url))


def require_reference(url) -> MrReference:
    """Like ``parse_mr_url`` but raises InvalidReferenceFormat on rejection."""
    result = parse_mr_url(url)
    if isinstance(result, RejectedReference):
        raise InvalidReferenceFormat(result.reason)
    return result.reference
