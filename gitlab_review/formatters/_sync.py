"""Sync outcome formatting."""

from gitlab_review.sync import CheckedOut, NotARepository, PathMissing, Skipped, SyncFailed


def render_sync_status(outcome):
    """One-line human-readable summary of a SyncOutcome."""
    if isinstance(outcome, Skipped):
        return "Skipped local checkout."
    if isinstance(outcome, PathMissing):
        return f"[WARN] Path not found: {outcome.path}"
    if isinstance(outcome, NotARepository):
        return f"[WARN] Not a git repository: {outcome.path}"
    if isinstance(outcome, CheckedOut):
        text = f"Checked out to branch: {outcome.branch}"
        if outcome.stash_label:
            text += f" (local changes stashed as {outcome.stash_label})"
        return text
    if isinstance(outcome, SyncFailed):
        text = (
            f"[WARN] Checkout of {outcome.branch} stopped at {outcome.step} "
            f"(working copy left at stage: {outcome.stage.value}): {outcome.message}"
        )
        if outcome.stash_label:
            text += f" (local changes stashed as {outcome.stash_label})"
        return text
    raise TypeError(f"Unknown sync outcome: {outcome!r}")
