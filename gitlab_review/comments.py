"""
Comment publishing: freeform MR notes and line-anchored discussions.
"""

from __future__ import annotations

import sys

from gitlab_review.api import PlatformClient, _expect_object_response, merge_request_path
from gitlab_review.exceptions import MissingDiffRefs, PlatformError, PublishRejected
from gitlab_review.models import CommentRequest, DiffRefs, InlineCommentRequest, MrMetadata
from gitlab_review.types import (
    DiscussionPayload,
    DiscussionResult,
    NotePayload,
    NoteResult,
    PositionPayload,
)


def build_position(diff_refs: DiffRefs, file_path: str, new_line: int) -> PositionPayload:
    """Position anchor for a comment on the new (post-change) side of a diff."""
    return {
        "base_sha": diff_refs.base_sha,
        "start_sha": diff_refs.start_sha,
        "head_sha": diff_refs.head_sha,
        "position_type": "text",
        "new_path": file_path,
        "new_line": new_line,
    }


async def _publish(api, path, payload):
    """POST a note/discussion; platform 4xx refusals become PublishRejected."""
    try:
        return await api.post(path, payload)
    except PlatformError as e:
        if e.status_code is not None and 400 <= e.status_code < 500:
            raise PublishRejected(e.message, status_code=e.status_code) from e
        raise


class CommentPublisher:
    def __init__(self, api: PlatformClient):
        self.api = api

    async def post_note(self, request: CommentRequest) -> NoteResult:
        ref = request.reference
        print(f"Posting comment to {ref.project_path} !{ref.mr_iid}...", file=sys.stderr)
        note: NotePayload = await _publish(
            self.api, merge_request_path(ref, "notes"), {"body": request.body}
        )
        note_id = note.get("id") if isinstance(note, dict) else None
        url = f"{ref.web_url}#note_{note_id}" if ref.web_url and note_id is not None else ""
        return {"id": note_id, "url": url}

    async def post_inline_comment(self, request: InlineCommentRequest) -> DiscussionResult:
        """Anchor a comment to ``file_path:new_line``.

        The MR is re-fetched first for its diff_refs; GitLab validates the
        position against them and rejects lines outside the diff.
        """
        ref = request.reference
        print(
            f"Fetching MR details to get SHAs for {ref.project_path} !{ref.mr_iid}...",
            file=sys.stderr,
        )
        payload = await self.api.get(merge_request_path(ref))
        metadata = MrMetadata.from_payload(
            _expect_object_response(payload, "merge request"), fallback_iid=ref.mr_iid
        )
        if metadata.diff_refs is None:
            raise MissingDiffRefs(
                "Could not retrieve diff_refs from MR. Ensure the MR has changes."
            )

        position = build_position(metadata.diff_refs, request.file_path, request.new_line)
        print(
            f"Posting inline comment on {request.file_path}:{request.new_line}...",
            file=sys.stderr,
        )
        discussion: DiscussionPayload = await _publish(
            self.api,
            merge_request_path(ref, "discussions"),
            {"body": request.body, "position": position},
        )
        return {
            "id": discussion.get("id") if isinstance(discussion, dict) else None,
            "file_path": request.file_path,
            "new_line": request.new_line,
            "position": position,
        }
