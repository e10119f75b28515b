"""Tests for comments.py — note and inline discussion publishing."""

import json

import httpx
import pytest
from conftest import MR_URL, mr_payload

from gitlab_review.api import PlatformClient
from gitlab_review.comments import CommentPublisher, build_position
from gitlab_review.exceptions import MissingDiffRefs, PlatformError, PublishRejected
from gitlab_review.models import CommentRequest, DiffRefs, InlineCommentRequest

MR_PATH = "/api/v4/projects/team%2Fproj/merge_requests/7"


class FakeGitLab:
    """MockTransport handler serving one merge request and recording POSTs."""

    def __init__(self, mr=None, post_status=201, post_body=None):
        self.mr = mr if mr is not None else mr_payload()
        self.post_status = post_status
        self.post_body = post_body if post_body is not None else {"id": 555}
        self.posts = []

    def __call__(self, request):
        path = request.url.raw_path.decode()
        if request.method == "GET" and path == MR_PATH:
            return httpx.Response(200, json=self.mr)
        if request.method == "POST":
            self.posts.append((path, json.loads(request.content)))
            return httpx.Response(self.post_status, json=self.post_body)
        return httpx.Response(404, json={"message": "404 Not Found"})


def _publisher(settings, gitlab):
    return CommentPublisher(PlatformClient(settings, transport=httpx.MockTransport(gitlab)))


def _inline(line=12, path="src/a.py"):
    return InlineCommentRequest.from_arguments(
        {"url": MR_URL, "filePath": path, "lineNumber": line, "commentBody": "nit"}
    )


class TestBuildPosition:
    def test_exact_keys(self):
        pos = build_position(DiffRefs("b", "s", "h"), "src/a.py", 3)
        assert pos == {
            "base_sha": "b",
            "start_sha": "s",
            "head_sha": "h",
            "position_type": "text",
            "new_path": "src/a.py",
            "new_line": 3,
        }
        assert "old_line" not in pos
        assert "old_path" not in pos


class TestPostNote:
    @pytest.mark.asyncio
    async def test_posts_body_and_builds_link(self, settings):
        gitlab = FakeGitLab(post_body={"id": 901})
        request = CommentRequest.from_arguments({"url": MR_URL, "commentBody": "LGTM"})
        result = await _publisher(settings, gitlab).post_note(request)
        assert gitlab.posts == [(MR_PATH + "/notes", {"body": "LGTM"})]
        assert result == {"id": 901, "url": MR_URL + "#note_901"}

    @pytest.mark.asyncio
    async def test_rejection_is_publish_rejected(self, settings):
        gitlab = FakeGitLab(post_status=403, post_body={"message": "403 Forbidden"})
        request = CommentRequest.from_arguments({"url": MR_URL, "commentBody": "LGTM"})
        with pytest.raises(PublishRejected, match="403 Forbidden") as exc_info:
            await _publisher(settings, gitlab).post_note(request)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_server_error_stays_platform_error(self, settings):
        gitlab = FakeGitLab(post_status=500, post_body={"message": "500 Internal Server Error"})
        request = CommentRequest.from_arguments({"url": MR_URL, "commentBody": "LGTM"})
        with pytest.raises(PlatformError) as exc_info:
            await _publisher(settings, gitlab).post_note(request)
        assert not isinstance(exc_info.value, PublishRejected)


class TestPostInlineComment:
    @pytest.mark.asyncio
    async def test_posts_discussion_with_position(self, settings):
        gitlab = FakeGitLab(post_body={"id": "abc123"})
        result = await _publisher(settings, gitlab).post_inline_comment(_inline())
        path, body = gitlab.posts[0]
        assert path == MR_PATH + "/discussions"
        assert body["body"] == "nit"
        assert body["position"] == {
            "base_sha": "b1",
            "start_sha": "s1",
            "head_sha": "h1",
            "position_type": "text",
            "new_path": "src/a.py",
            "new_line": 12,
        }
        assert result["id"] == "abc123"
        assert result["file_path"] == "src/a.py"
        assert result["new_line"] == 12

    @pytest.mark.asyncio
    async def test_missing_diff_refs_never_posts(self, settings):
        gitlab = FakeGitLab(mr=mr_payload(diff_refs=None))
        with pytest.raises(MissingDiffRefs, match="diff_refs"):
            await _publisher(settings, gitlab).post_inline_comment(_inline())
        assert gitlab.posts == []

    @pytest.mark.asyncio
    async def test_partial_diff_refs_never_posts(self, settings):
        gitlab = FakeGitLab(mr=mr_payload(diff_refs={"base_sha": "b1", "head_sha": "h1"}))
        with pytest.raises(MissingDiffRefs):
            await _publisher(settings, gitlab).post_inline_comment(_inline())
        assert gitlab.posts == []

    @pytest.mark.asyncio
    async def test_line_outside_diff_is_rejected(self, settings):
        gitlab = FakeGitLab(
            post_status=400, post_body={"message": {"base": ["Line code can't be blank"]}}
        )
        with pytest.raises(PublishRejected, match="Line code"):
            await _publisher(settings, gitlab).post_inline_comment(_inline(line=9999))
