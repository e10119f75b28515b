"""
ReviewClient — public Python API for merge request review context and comments.

Single entry point for programmatic use, the CLI, and the MCP server. Each
method is one self-contained unit of work: it opens its own HTTP client,
shares no mutable state with other calls, and raises ReviewError subclasses.
"""

from __future__ import annotations

import asyncio

from gitlab_review._utils import scan_untrusted_fields
from gitlab_review.api import PlatformClient, _expect_object_response, merge_request_path
from gitlab_review.comments import CommentPublisher
from gitlab_review.config import Settings
from gitlab_review.formatters import assemble_review_context
from gitlab_review.models import (
    CommentRequest,
    InlineCommentRequest,
    MrChanges,
    MrMetadata,
    ReviewRequest,
)
from gitlab_review.sync import Skipped, WorkingCopySynchronizer, plan_sync
from gitlab_review.types import DiscussionResult, NoteResult


async def _gather_all(*aws):
    """Await every coroutine, then re-raise the first failure (in argument order)."""
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


class ReviewClient:
    """Review-context assembly and comment publishing for one GitLab host.

    Args:
        settings: Process configuration (token, host, remote).
        transport: Optional httpx transport, for tests.
        synchronizer: Optional WorkingCopySynchronizer replacement.
    """

    def __init__(self, settings: Settings, *, transport=None, synchronizer=None):
        self.settings = settings
        self._transport = transport
        self.synchronizer = synchronizer or WorkingCopySynchronizer(settings)

    def _api(self) -> PlatformClient:
        return PlatformClient(self.settings, transport=self._transport)

    async def fetch_merge_request(self, api, reference) -> tuple[MrMetadata, MrChanges]:
        """Fetch MR metadata and its changes concurrently."""
        mr_payload, changes_payload = await _gather_all(
            api.get(merge_request_path(reference)),
            api.get(merge_request_path(reference, "changes")),
        )
        metadata = MrMetadata.from_payload(
            _expect_object_response(mr_payload, "merge request"), fallback_iid=reference.mr_iid
        )
        changes = MrChanges.from_payload(_expect_object_response(changes_payload, "changes"))
        return metadata, changes

    async def review_merge_request(self, request: ReviewRequest) -> str:
        """Build the review context document for one MR.

        Platform failures abort the call. Local checkout problems never do;
        they are reported in the document's ``Git Status`` line.
        """
        async with self._api() as api:
            metadata, changes = await self.fetch_merge_request(api, request.reference)

        outcome = Skipped()
        if plan_sync(request.should_checkout, request.local_repo_path):
            outcome = await self.synchronizer.synchronize(
                request.local_repo_path, metadata.source_branch
            )

        warnings = scan_untrusted_fields(
            {"MR title": metadata.title, "MR description": metadata.description}
        )
        return assemble_review_context(metadata, outcome, changes, warnings)

    async def post_mr_comment(self, request: CommentRequest) -> NoteResult:
        async with self._api() as api:
            return await CommentPublisher(api).post_note(request)

    async def post_inline_comment(self, request: InlineCommentRequest) -> DiscussionResult:
        async with self._api() as api:
            return await CommentPublisher(api).post_inline_comment(request)
