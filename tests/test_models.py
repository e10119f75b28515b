"""Tests for models.py — payload parsing and tool request validation."""

import pytest
from conftest import MR_URL, change, mr_payload

from gitlab_review.exceptions import InvalidReferenceFormat, InvalidRequest
from gitlab_review.models import (
    CommentRequest,
    DiffRefs,
    FileChange,
    InlineCommentRequest,
    MrChanges,
    MrMetadata,
    ReviewRequest,
)

# ---------------------------------------------------------------------------
# Merge request data
# ---------------------------------------------------------------------------


class TestDiffRefs:
    def test_complete(self):
        refs = DiffRefs.from_payload({"base_sha": "b", "start_sha": "s", "head_sha": "h"})
        assert refs == DiffRefs("b", "s", "h")

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {},
            {"base_sha": "b", "start_sha": "s"},
            {"base_sha": "b", "start_sha": "s", "head_sha": None},
            {"base_sha": "", "start_sha": "s", "head_sha": "h"},
            "b/s/h",
        ],
    )
    def test_incomplete_is_none(self, payload):
        assert DiffRefs.from_payload(payload) is None


class TestMrMetadata:
    def test_from_payload(self):
        meta = MrMetadata.from_payload(mr_payload())
        assert meta.iid == 7
        assert meta.title == "Add retry to uploader"
        assert meta.source_branch == "feature/retry"
        assert meta.target_branch == "main"
        assert meta.author_name == "Dana"
        assert meta.web_url == MR_URL
        assert meta.diff_refs == DiffRefs("b1", "s1", "h1")

    def test_null_description_is_empty(self):
        assert MrMetadata.from_payload(mr_payload(description=None)).description == ""

    def test_author_falls_back_to_username(self):
        meta = MrMetadata.from_payload(mr_payload(author={"username": "dana"}))
        assert meta.author_name == "dana"

    def test_missing_author(self):
        assert MrMetadata.from_payload(mr_payload(author=None)).author_name == ""

    def test_missing_diff_refs(self):
        assert MrMetadata.from_payload(mr_payload(diff_refs=None)).diff_refs is None

    def test_missing_iid_uses_fallback(self):
        payload = mr_payload()
        del payload["iid"]
        assert MrMetadata.from_payload(payload, fallback_iid=7).iid == 7

    def test_payload_iid_wins_over_fallback(self):
        assert MrMetadata.from_payload(mr_payload(iid=9), fallback_iid=7).iid == 9


class TestChanges:
    def test_file_change_defaults(self):
        fc = FileChange.from_payload({"new_path": "src/a.py", "diff": "+x"})
        assert fc.old_path == "src/a.py"
        assert fc.new_file is False
        assert fc.deleted_file is False

    def test_null_diff_is_empty(self):
        assert FileChange.from_payload({"new_path": "a", "diff": None}).diff == ""

    def test_order_preserved(self):
        changes = MrChanges.from_payload(
            {"changes": [change("b.py"), change("a.py"), change("c.py")]}
        )
        assert [c.new_path for c in changes.changes] == ["b.py", "a.py", "c.py"]
        assert changes.overflow is False

    def test_overflow_flag(self):
        assert MrChanges.from_payload({"changes": [], "overflow": True}).overflow is True

    def test_missing_changes_list(self):
        assert MrChanges.from_payload({}).changes == ()


# ---------------------------------------------------------------------------
# Tool requests
# ---------------------------------------------------------------------------


class TestReviewRequest:
    def test_defaults(self):
        req = ReviewRequest.from_arguments({"url": MR_URL})
        assert req.reference.project_path == "team/proj"
        assert req.reference.mr_iid == 7
        assert req.should_checkout is True
        assert req.local_repo_path is None

    def test_explicit_none_checkout_means_true(self):
        req = ReviewRequest.from_arguments({"url": MR_URL, "shouldCheckout": None})
        assert req.should_checkout is True

    def test_all_fields(self):
        req = ReviewRequest.from_arguments(
            {"url": MR_URL, "shouldCheckout": False, "localRepoPath": " /work/proj "}
        )
        assert req.should_checkout is False
        assert req.local_repo_path == "/work/proj"

    def test_blank_path_is_none(self):
        req = ReviewRequest.from_arguments({"url": MR_URL, "localRepoPath": "  "})
        assert req.local_repo_path is None

    def test_non_bool_checkout_rejected(self):
        with pytest.raises(InvalidRequest, match="shouldCheckout"):
            ReviewRequest.from_arguments({"url": MR_URL, "shouldCheckout": "yes"})

    def test_missing_url(self):
        with pytest.raises(InvalidRequest, match="Missing"):
            ReviewRequest.from_arguments({})

    def test_unknown_field(self):
        with pytest.raises(InvalidRequest, match="Unknown"):
            ReviewRequest.from_arguments({"url": MR_URL, "branch": "main"})

    def test_not_a_dict(self):
        with pytest.raises(InvalidRequest):
            ReviewRequest.from_arguments([MR_URL])

    def test_bad_url(self):
        with pytest.raises(InvalidReferenceFormat):
            ReviewRequest.from_arguments({"url": "https://gitlab.com/a/b"})


class TestCommentRequest:
    def test_valid(self):
        req = CommentRequest.from_arguments({"url": MR_URL, "commentBody": "LGTM"})
        assert req.body == "LGTM"

    def test_empty_body_rejected(self):
        with pytest.raises(InvalidRequest, match="commentBody"):
            CommentRequest.from_arguments({"url": MR_URL, "commentBody": "   "})

    def test_missing_body(self):
        with pytest.raises(InvalidRequest, match="commentBody"):
            CommentRequest.from_arguments({"url": MR_URL})


class TestInlineCommentRequest:
    def _args(self, **overrides):
        args = {"url": MR_URL, "filePath": "src/a.py", "lineNumber": 12, "commentBody": "nit"}
        args.update(overrides)
        return args

    def test_valid(self):
        req = InlineCommentRequest.from_arguments(self._args())
        assert req.file_path == "src/a.py"
        assert req.new_line == 12
        assert req.body == "nit"

    @pytest.mark.parametrize("line", [0, -3])
    def test_non_positive_line_rejected(self, line):
        with pytest.raises(InvalidRequest, match="positive"):
            InlineCommentRequest.from_arguments(self._args(lineNumber=line))

    @pytest.mark.parametrize("line", ["12", 1.5, True])
    def test_non_integer_line_rejected(self, line):
        with pytest.raises(InvalidRequest, match="integer"):
            InlineCommentRequest.from_arguments(self._args(lineNumber=line))

    def test_empty_file_path_rejected(self):
        with pytest.raises(InvalidRequest, match="filePath"):
            InlineCommentRequest.from_arguments(self._args(filePath=""))

    def test_missing_field(self):
        args = self._args()
        del args["lineNumber"]
        with pytest.raises(InvalidRequest, match="lineNumber"):
            InlineCommentRequest.from_arguments(args)
