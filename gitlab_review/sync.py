"""
Working-copy synchronization: bring a local checkout onto the MR source branch.

The sequence is stash (only when dirty) -> fetch -> checkout -> pull, strictly
in that order. ``WorkingCopySynchronizer.synchronize`` never raises: every
result, including a failure halfway through, is a SyncOutcome variant.
"""

from __future__ import annotations

import enum
import os
import sys
import time
from dataclasses import dataclass

from gitlab_review.config import STASH_LABEL_PREFIX, Settings
from gitlab_review.exceptions import LocalSyncIssue
from gitlab_review.git import LocalRepository

# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


class SyncStage(str, enum.Enum):
    """Furthest point reached: clean -> stashed -> fetched -> checked_out -> pulled."""

    CLEAN = "clean"
    STASHED = "stashed"
    FETCHED = "fetched"
    CHECKED_OUT = "checked_out"
    PULLED = "pulled"


@dataclass(frozen=True)
class Skipped:
    pass


@dataclass(frozen=True)
class PathMissing:
    path: str


@dataclass(frozen=True)
class NotARepository:
    path: str


@dataclass(frozen=True)
class CheckedOut:
    branch: str
    stash_label: str | None = None


@dataclass(frozen=True)
class SyncFailed:
    """A git step failed; ``stage`` is where the working copy was left."""

    branch: str
    stage: SyncStage
    step: str
    message: str
    stash_label: str | None = None


SyncOutcome = Skipped | PathMissing | NotARepository | CheckedOut | SyncFailed


def _warn(message):
    print(f"[WARN] {message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Synchronizer
# ---------------------------------------------------------------------------


class WorkingCopySynchronizer:
    """Reconciles a local checkout with a remote branch."""

    def __init__(self, settings: Settings, *, repository_factory=LocalRepository, clock=time.time):
        self.remote = settings.remote
        self._repository_factory = repository_factory
        self._clock = clock

    def stash_label(self) -> str:
        return f"{STASH_LABEL_PREFIX}-{int(self._clock() * 1000)}"

    async def synchronize(self, path, branch) -> SyncOutcome:
        if not os.path.exists(path):
            _warn(f"Path not found: {path}")
            return PathMissing(path)

        if not os.path.isdir(path):
            _warn(f"Not a git repository: {path}")
            return NotARepository(path)

        repo = self._repository_factory(path)
        stage = SyncStage.CLEAN
        stash_label = None
        step = "status"
        try:
            if not await repo.is_repository():
                _warn(f"Not a git repository: {path}")
                return NotARepository(path)
            if not await repo.is_clean():
                step = "stash"
                stash_label = self.stash_label()
                await repo.stash_save(stash_label)
                stage = SyncStage.STASHED
                # Untracked or unstashable leftovers: never switch branches over them.
                if not await repo.is_clean():
                    raise LocalSyncIssue(
                        "working tree still has uncommitted changes after stashing",
                        command="stash",
                    )
            step = "fetch"
            await repo.fetch(self.remote, branch)
            stage = SyncStage.FETCHED
            step = "checkout"
            await repo.checkout(branch)
            stage = SyncStage.CHECKED_OUT
            step = "pull"
            await repo.pull(self.remote, branch)
            stage = SyncStage.PULLED
        except (LocalSyncIssue, OSError) as e:
            _warn(f"Sync of {path} to {branch} stopped at {step} (stage: {stage.value}): {e}")
            return SyncFailed(
                branch=branch,
                stage=stage,
                step=step,
                message=str(e),
                stash_label=stash_label,
            )
        return CheckedOut(branch, stash_label)


def plan_sync(should_checkout, local_repo_path) -> bool:
    """Synchronize only when the caller opted in and supplied a path."""
    return bool(should_checkout) and bool(local_repo_path)
