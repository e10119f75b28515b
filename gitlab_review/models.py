"""
Typed models for merge request data and validated tool requests.
"""

from __future__ import annotations

from dataclasses import dataclass

from gitlab_review.exceptions import InvalidRequest
from gitlab_review.reference import MrReference, require_reference
from gitlab_review.types import (
    ChangePayload,
    DiffRefsPayload,
    MergeRequestChangesPayload,
    MergeRequestPayload,
)

# ---------------------------------------------------------------------------
# Merge request data
# ---------------------------------------------------------------------------


def _text(value):
    """Render None and non-strings as text; None becomes empty."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class DiffRefs:
    """The base/start/head revision triple GitLab anchors positions to."""

    base_sha: str
    start_sha: str
    head_sha: str

    @classmethod
    def from_payload(cls, payload: DiffRefsPayload | None):
        if not isinstance(payload, dict):
            return None
        shas = [payload.get(k) for k in ("base_sha", "start_sha", "head_sha")]
        if not all(isinstance(s, str) and s for s in shas):
            return None
        return cls(*shas)


@dataclass(frozen=True)
class MrMetadata:
    iid: int
    title: str = ""
    description: str = ""
    source_branch: str = ""
    target_branch: str = ""
    author_name: str = ""
    web_url: str = ""
    diff_refs: DiffRefs | None = None

    @classmethod
    def from_payload(cls, payload: MergeRequestPayload, fallback_iid: int | None = None):
        """Build from GET /merge_requests/:iid; ``fallback_iid`` covers a missing ``iid``."""
        author = payload.get("author") or {}
        iid = payload.get("iid")
        return cls(
            iid=iid if iid is not None else fallback_iid,
            title=_text(payload.get("title")),
            description=_text(payload.get("description")),
            source_branch=_text(payload.get("source_branch")),
            target_branch=_text(payload.get("target_branch")),
            author_name=_text(author.get("name") or author.get("username")),
            web_url=_text(payload.get("web_url")),
            diff_refs=DiffRefs.from_payload(payload.get("diff_refs")),
        )


@dataclass(frozen=True)
class FileChange:
    new_path: str
    diff: str = ""
    old_path: str = ""
    new_file: bool = False
    renamed_file: bool = False
    deleted_file: bool = False

    @classmethod
    def from_payload(cls, payload: ChangePayload):
        new_path = _text(payload.get("new_path"))
        return cls(
            new_path=new_path,
            diff=_text(payload.get("diff")),
            old_path=_text(payload.get("old_path")) or new_path,
            new_file=bool(payload.get("new_file")),
            renamed_file=bool(payload.get("renamed_file")),
            deleted_file=bool(payload.get("deleted_file")),
        )


@dataclass(frozen=True)
class MrChanges:
    """Ordered file changes, as returned by the /changes endpoint."""

    changes: tuple[FileChange, ...]
    overflow: bool = False

    @classmethod
    def from_payload(cls, payload: MergeRequestChangesPayload):
        raw = payload.get("changes") or []
        return cls(
            changes=tuple(FileChange.from_payload(c) for c in raw if isinstance(c, dict)),
            overflow=bool(payload.get("overflow")),
        )


# ---------------------------------------------------------------------------
# Tool requests
# ---------------------------------------------------------------------------


def _check_fields(arguments, allowed, required, operation):
    """Reject non-dict payloads, unknown keys, and missing required keys."""
    if not isinstance(arguments, dict):
        raise InvalidRequest(
            f"[ERROR] {operation} arguments must be an object, got {type(arguments).__name__}."
        )
    unknown = sorted(set(arguments) - set(allowed))
    if unknown:
        raise InvalidRequest(f"[ERROR] Unknown {operation} argument(s): {', '.join(unknown)}")
    missing = [k for k in required if arguments.get(k) is None]
    if missing:
        raise InvalidRequest(f"[ERROR] Missing {operation} argument(s): {', '.join(missing)}")


def _expect_str(arguments, key, *, allow_empty=False):
    value = arguments.get(key)
    if not isinstance(value, str):
        raise InvalidRequest(f"[ERROR] {key} must be a string, got {type(value).__name__}.")
    if not allow_empty and not value.strip():
        raise InvalidRequest(f"[ERROR] {key} cannot be empty.")
    return value


@dataclass(frozen=True)
class ReviewRequest:
    """Validated input contract for `review_merge_request`."""

    reference: MrReference
    should_checkout: bool = True
    local_repo_path: str | None = None

    _FIELDS = ("url", "shouldCheckout", "localRepoPath")

    @classmethod
    def from_arguments(cls, arguments):
        _check_fields(arguments, cls._FIELDS, ("url",), "review_merge_request")
        reference = require_reference(_expect_str(arguments, "url"))
        should_checkout = arguments.get("shouldCheckout")
        if should_checkout is None:
            should_checkout = True
        elif not isinstance(should_checkout, bool):
            raise InvalidRequest(
                f"[ERROR] shouldCheckout must be a boolean, got {type(should_checkout).__name__}."
            )
        local_repo_path = None
        if arguments.get("localRepoPath") is not None:
            local_repo_path = _expect_str(arguments, "localRepoPath", allow_empty=True).strip()
        return cls(
            reference=reference,
            should_checkout=should_checkout,
            local_repo_path=local_repo_path or None,
        )


@dataclass(frozen=True)
class CommentRequest:
    """Validated input contract for `post_mr_comment`."""

    reference: MrReference
    body: str

    _FIELDS = ("url", "commentBody")

    @classmethod
    def from_arguments(cls, arguments):
        _check_fields(arguments, cls._FIELDS, cls._FIELDS, "post_mr_comment")
        return cls(
            reference=require_reference(_expect_str(arguments, "url")),
            body=_expect_str(arguments, "commentBody"),
        )


@dataclass(frozen=True)
class InlineCommentRequest:
    """Validated input contract for `post_inline_comment` (new-side lines only)."""

    reference: MrReference
    body: str
    file_path: str
    new_line: int

    _FIELDS = ("url", "filePath", "lineNumber", "commentBody")

    @classmethod
    def from_arguments(cls, arguments):
        _check_fields(arguments, cls._FIELDS, cls._FIELDS, "post_inline_comment")
        line = arguments.get("lineNumber")
        # bool is an int subclass; reject it explicitly.
        if isinstance(line, bool) or not isinstance(line, int):
            raise InvalidRequest(
                f"[ERROR] lineNumber must be an integer, got {type(line).__name__}."
            )
        if line <= 0:
            raise InvalidRequest(f"[ERROR] lineNumber must be positive, got {line}.")
        return cls(
            reference=require_reference(_expect_str(arguments, "url")),
            body=_expect_str(arguments, "commentBody"),
            file_path=_expect_str(arguments, "filePath").strip(),
            new_line=line,
        )
