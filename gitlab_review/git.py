"""
Async wrapper over the local ``git`` executable.

Each primitive is a single git invocation. Commands run with stdin closed
(stdin belongs to the MCP stdio transport) and with terminal prompts disabled.
"""

from __future__ import annotations

import asyncio
import os
import sys

from gitlab_review.exceptions import LocalSyncIssue


def _log_git(path, args):
    print(f"[GIT] {path}: git {' '.join(args)}", file=sys.stderr)


class LocalRepository:
    """Primitive git operations against one working copy."""

    def __init__(self, path, git_binary="git"):
        self.path = str(path)
        self.git_binary = git_binary

    async def _run(self, *args):
        """Run ``git <args>`` in the working copy. Returns stdout on success."""
        _log_git(self.path, args)
        env = dict(os.environ, GIT_TERMINAL_PROMPT="0")
        try:
            proc = await asyncio.create_subprocess_exec(
                self.git_binary,
                *args,
                cwd=self.path,
                env=env,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise LocalSyncIssue(
                "Git executable not found. Please ensure Git is installed.",
                command=args[0] if args else None,
            ) from e
        except NotADirectoryError as e:
            raise LocalSyncIssue(f"Not a directory: {self.path}", command=args[0]) from e
        except OSError as e:
            raise LocalSyncIssue(f"Could not run git in {self.path}: {e}", command=args[0]) from e
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise LocalSyncIssue(
                f"git {args[0]} failed: {detail or f'exit code {proc.returncode}'}",
                command=args[0],
                returncode=proc.returncode,
            )
        return stdout.decode("utf-8", errors="replace")

    async def is_repository(self) -> bool:
        """True when the path is inside a git work tree.

        Raises LocalSyncIssue when git itself could not be started.
        """
        try:
            out = await self._run("rev-parse", "--is-inside-work-tree")
        except LocalSyncIssue as e:
            if e.returncode is None:
                raise
            return False
        return out.strip() == "true"

    async def status(self) -> list[str]:
        """Porcelain status lines (tracked changes and untracked files)."""
        out = await self._run("status", "--porcelain")
        return [line for line in out.splitlines() if line.strip()]

    async def is_clean(self) -> bool:
        return not await self.status()

    async def stash_save(self, label):
        await self._run("stash", "push", "--include-untracked", "-m", label)

    async def fetch(self, remote, branch):
        await self._run("fetch", remote, branch)

    async def checkout(self, branch):
        await self._run("checkout", branch)

    async def pull(self, remote, branch):
        await self._run("pull", "--ff-only", remote, branch)

