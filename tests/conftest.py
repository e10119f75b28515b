"""
Shared test fixtures for gitlab-review tests.
Keeps tests away from the real .env and GITLAB_* environment variables.
"""

import os
import sys

import pytest

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gitlab_review import config  # noqa: E402

_ENV_KEYS = (
    "GITLAB_TOKEN",
    "GITLAB_HOST",
    "GITLAB_REVIEW_REMOTE",
    "GITLAB_HTTP_TIMEOUT_SECONDS",
    "GITLAB_HTTP_LOG",
)

MR_URL = "https://gitlab.example.com/team/proj/-/merge_requests/7"


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Every test starts without a .env file or GITLAB_* variables."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "ENV_PATH", str(tmp_path / "missing.env"))


@pytest.fixture
def settings():
    return config.Settings(token="fake-token", host="https://gitlab.example.com")


def mr_payload(**overrides):
    """A merge request body as GET /merge_requests/:iid returns it."""
    payload = {
        "iid": 7,
        "title": "Add retry to uploader",
        "description": "Retries failed uploads.",
        "source_branch": "feature/retry",
        "target_branch": "main",
        "web_url": MR_URL,
        "author": {"name": "Dana", "username": "dana"},
        "diff_refs": {"base_sha": "b1", "start_sha": "s1", "head_sha": "h1"},
    }
    payload.update(overrides)
    return payload


def change(path, diff="@@ -1 +1 @@\n-a\n+b", **extra):
    return {"old_path": path, "new_path": path, "diff": diff, **extra}
