"""Typed shapes of the GitLab REST payloads this package reads and writes.

These TypedDicts document the JSON the platform exchanges with us.
They are optional — runtime behavior is unchanged (plain dicts).
"""

from __future__ import annotations

from typing import Literal, TypedDict

# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class UserPayload(TypedDict, total=False):
    id: int
    name: str
    username: str


class DiffRefsPayload(TypedDict):
    base_sha: str
    start_sha: str
    head_sha: str


class MergeRequestPayload(TypedDict, total=False):
    """GET /projects/:id/merge_requests/:iid"""

    iid: int
    title: str
    description: str | None
    source_branch: str
    target_branch: str
    web_url: str
    author: UserPayload | None
    diff_refs: DiffRefsPayload | None


class ChangePayload(TypedDict, total=False):
    old_path: str
    new_path: str
    diff: str
    new_file: bool
    renamed_file: bool
    deleted_file: bool


class MergeRequestChangesPayload(MergeRequestPayload, total=False):
    """GET /projects/:id/merge_requests/:iid/changes"""

    changes: list[ChangePayload]
    overflow: bool


class NotePayload(TypedDict, total=False):
    id: int
    body: str


class DiscussionPayload(TypedDict, total=False):
    id: str
    notes: list[NotePayload]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class PositionPayload(TypedDict):
    """New-side text position for POST /projects/:id/merge_requests/:iid/discussions."""

    base_sha: str
    start_sha: str
    head_sha: str
    position_type: Literal["text"]
    new_path: str
    new_line: int


class NoteResult(TypedDict):
    """Return type of ReviewClient.post_mr_comment()."""

    id: int | str | None
    url: str


class DiscussionResult(TypedDict):
    """Return type of ReviewClient.post_inline_comment()."""

    id: str | None
    file_path: str
    new_line: int
    position: PositionPayload
