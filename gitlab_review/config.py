"""
gitlab-review shared configuration and constants.

Settings are resolved once at process start (see ``Settings.from_env``) and
passed explicitly into each component.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from gitlab_review.exceptions import SetupError

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

# Resolved against the working directory the server is launched from.
ENV_PATH = ".env"


def load_env(path=None):
    """Parse a ``KEY=VALUE`` .env file. Missing file returns an empty dict."""
    path = path or ENV_PATH
    env = {}
    if os.path.exists(path):
        with open(path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    return env


def _env_bool(env, key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(env, key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "1.0.0"

DEFAULT_HOST = "https://gitlab.com"
DEFAULT_REMOTE = "origin"

# Diffs longer than DIFF_SIZE_LIMIT are cut to their first DIFF_PREVIEW_CHARS.
DIFF_SIZE_LIMIT = 8000
DIFF_PREVIEW_CHARS = 1000

# Generated, lock, and minified artifacts left out of the review context.
IGNORED_SUFFIXES = (
    ".lock",
    ".map",
    "package-lock.json",
    "pnpm-lock.yaml",
    ".min.js",
    ".min.css",
)

STASH_LABEL_PREFIX = "MCP-Auto-Stash"

_KNOWN_KEYS = (
    "GITLAB_TOKEN",
    "GITLAB_HOST",
    "GITLAB_REVIEW_REMOTE",
    "GITLAB_HTTP_TIMEOUT_SECONDS",
    "GITLAB_HTTP_LOG",
)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Process configuration shared by every tool invocation."""

    token: str = field(repr=False)
    host: str = DEFAULT_HOST
    remote: str = DEFAULT_REMOTE
    http_timeout: float | None = None
    http_log: bool = False

    def __post_init__(self):
        if not self.token or not self.token.strip():
            raise SetupError(
                "[SETUP_NEEDED] GITLAB_TOKEN is required. "
                "Set it in the environment or in a .env file."
            )
        host = (self.host or DEFAULT_HOST).strip().rstrip("/")
        if not host.startswith(("http://", "https://")):
            raise SetupError(
                f"[SETUP_NEEDED] GITLAB_HOST must start with http:// or https://, got: {host!r}"
            )
        object.__setattr__(self, "host", host)

    @property
    def api_url(self) -> str:
        return f"{self.host}/api/v4"

    @classmethod
    def from_env(cls, environ=None, env_path=None) -> Settings:
        """Build settings from the process environment over the .env file."""
        environ = os.environ if environ is None else environ
        env = load_env(env_path)
        for key in _KNOWN_KEYS:
            if environ.get(key):
                env[key] = environ[key]

        timeout = _env_float(env, "GITLAB_HTTP_TIMEOUT_SECONDS", None)
        if timeout is not None and timeout <= 0:
            timeout = None
        return cls(
            token=env.get("GITLAB_TOKEN", ""),
            host=env.get("GITLAB_HOST") or DEFAULT_HOST,
            remote=env.get("GITLAB_REVIEW_REMOTE") or DEFAULT_REMOTE,
            http_timeout=timeout,
            http_log=_env_bool(env, "GITLAB_HTTP_LOG", False),
        )
