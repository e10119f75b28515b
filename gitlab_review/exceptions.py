"""
gitlab-review exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class ReviewError(Exception):
    """Exit code 1 — bad input, platform, git and publish failures."""

    exit_code = 1


class SetupError(ReviewError):
    """Exit code 2 — missing or invalid process configuration."""

    exit_code = 2


class InvalidRequest(ReviewError):
    """Tool arguments that are unknown, missing, or of the wrong type."""


class InvalidReferenceFormat(InvalidRequest):
    """A string that is not a GitLab merge request URL."""


class PlatformError(ReviewError):
    """Any failed GitLab REST call (transport error or non-2xx response)."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PublishRejected(PlatformError):
    """GitLab refused a note or discussion (body, permissions, or position)."""


class MissingDiffRefs(ReviewError):
    """The merge request has no diff_refs, so no line can be anchored."""


class LocalSyncIssue(ReviewError):
    """A local git step could not run or exited non-zero."""

    def __init__(self, message, command=None, returncode=None):
        super().__init__(message)
        self.command = command
        self.returncode = returncode
