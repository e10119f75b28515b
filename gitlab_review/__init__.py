"""gitlab-review — merge request review context and comments for AI agents over MCP."""

from gitlab_review.client import ReviewClient
from gitlab_review.config import VERSION, Settings
from gitlab_review.exceptions import (
    InvalidReferenceFormat,
    InvalidRequest,
    LocalSyncIssue,
    MissingDiffRefs,
    PlatformError,
    PublishRejected,
    ReviewError,
    SetupError,
)
from gitlab_review.models import (
    CommentRequest,
    DiffRefs,
    FileChange,
    InlineCommentRequest,
    MrChanges,
    MrMetadata,
    ReviewRequest,
)
from gitlab_review.reference import MrReference, parse_mr_url, require_reference

__all__ = [
    "VERSION",
    "CommentRequest",
    "DiffRefs",
    "FileChange",
    "InlineCommentRequest",
    "InvalidReferenceFormat",
    "InvalidRequest",
    "LocalSyncIssue",
    "MissingDiffRefs",
    "MrChanges",
    "MrMetadata",
    "MrReference",
    "PlatformError",
    "PublishRejected",
    "ReviewClient",
    "ReviewError",
    "ReviewRequest",
    "Settings",
    "SetupError",
    "parse_mr_url",
    "require_reference",
]
