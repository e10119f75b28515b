"""Comment tools: MR notes and inline discussions (2 tools)."""

from __future__ import annotations

from pydantic import StrictInt, StrictStr

from gitlab_review import CommentRequest, InlineCommentRequest
from gitlab_review.mcp_server._core import COMMENT_FAILURE, INLINE_FAILURE, _call, _get_client
from gitlab_review.mcp_server._security import _clean_arguments


def _note_text(result):
    text = f"Successfully posted comment to GitLab!\nNote ID: {result['id']}"
    if result.get("url"):
        text += f"\nLink: {result['url']}"
    return text


def _discussion_text(result):
    return (
        f"Inline comment posted on `{result['file_path']}:{result['new_line']}`\n"
        f"(ID: {result['id']})"
    )


async def post_mr_comment(url: StrictStr, commentBody: StrictStr):
    """Post a comment (note) to the GitLab Merge Request discussion timeline.
    Use this when the user asks to submit the review or post a comment.

    Args:
        url: The full URL of the GitLab Merge Request.
        commentBody: The content of the comment in Markdown format.
    """

    async def _run():
        request = CommentRequest.from_arguments(
            _clean_arguments({"url": url, "commentBody": commentBody})
        )
        return await _get_client().post_mr_comment(request)

    return await _call(_run(), success=_note_text, failure_prefix=COMMENT_FAILURE)


async def post_inline_comment(
    url: StrictStr, filePath: StrictStr, lineNumber: StrictInt, commentBody: StrictStr
):
    """Post a review comment on a SPECIFIC LINE of code in the Merge Request.
    Use this for specific code suggestions. Only lines of the new file version
    can be targeted.

    Args:
        url: The full URL of the GitLab MR.
        filePath: The file path (new_path) to comment on (e.g. src/utils.ts).
        lineNumber: The line number in the NEW file version (new_line).
        commentBody: The comment content in Markdown.
    """

    async def _run():
        request = InlineCommentRequest.from_arguments(
            _clean_arguments(
                {
                    "url": url,
                    "filePath": filePath,
                    "lineNumber": lineNumber,
                    "commentBody": commentBody,
                }
            )
        )
        return await _get_client().post_inline_comment(request)

    return await _call(
        _run(), success=_discussion_text, failure_prefix=INLINE_FAILURE
    )


def register(mcp):
    """Register all comment tools with the FastMCP instance."""
    mcp.tool()(post_mr_comment)
    mcp.tool()(post_inline_comment)
