"""Output formatting package for gitlab-review.

Re-exports all public names so consumers can do:
    from gitlab_review.formatters import assemble_review_context
"""

from gitlab_review.formatters._context import (
    assemble_review_context,
    is_ignored_path,
    render_change,
    render_header,
)
from gitlab_review.formatters._sync import render_sync_status

__all__ = [
    "assemble_review_context",
    "is_ignored_path",
    "render_change",
    "render_header",
    "render_sync_status",
]
