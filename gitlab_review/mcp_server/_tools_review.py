"""Review tools: merge request context (1 tool)."""

from __future__ import annotations

from pydantic import StrictBool, StrictStr

from gitlab_review import ReviewRequest
from gitlab_review.mcp_server._core import REVIEW_FAILURE, _call, _get_client
from gitlab_review.mcp_server._security import _clean_arguments


async def review_merge_request(
    url: StrictStr,
    shouldCheckout: StrictBool | None = None,
    localRepoPath: StrictStr | None = None,
):
    """MUST use this tool when user provides a GitLab MR URL. Fetches MR details and diffs,
    and optionally checks out the source branch locally.

    Args:
        url: The full URL of the GitLab Merge Request.
        shouldCheckout: Set to false to skip the local checkout (defaults to true).
        localRepoPath: Absolute path to the local repository root. Uncommitted work is
            stashed before switching branches.

    Returns:
        Markdown review context: git status, MR header, and per-file diffs
        (lockfiles/minified files omitted, oversized diffs truncated).
    """

    async def _run():
        request = ReviewRequest.from_arguments(
            _clean_arguments(
                {"url": url, "shouldCheckout": shouldCheckout, "localRepoPath": localRepoPath}
            )
        )
        return await _get_client().review_merge_request(request)

    return await _call(_run(), success=str, failure_prefix=REVIEW_FAILURE)


def register(mcp):
    """Register all review tools with the FastMCP instance."""
    mcp.tool()(review_merge_request)
