"""Run lint, format, type and test checks and report results as JSON.

Usage:
    python scripts/quality_gate.py              # run all, JSON output
    python scripts/quality_gate.py --skip-tests # skip pytest (fast)
    python scripts/quality_gate.py --fix        # auto-fix ruff issues first
"""

from __future__ import annotations

import argparse
import json
import re
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

MYPY_TARGETS = ["gitlab_review/"]


def _run(cmd: list[str]) -> subprocess.CompletedProcess:
    """Run a tool via the current interpreter from the repository root."""
    return subprocess.run(
        [sys.executable, "-m", *cmd],
        capture_output=True,
        text=True,
        cwd=str(ROOT),
        timeout=300,
    )


def _check(cmd: list[str], count_pattern: str, count_key: str) -> dict:
    """Run one tool; count output lines matching *count_pattern* on failure."""
    t0 = time.monotonic()
    r = _run(cmd)
    output = (r.stdout + r.stderr).strip()
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        count_key: 0,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result[count_key] = sum(1 for line in output.splitlines() if re.search(count_pattern, line))
        result["output"] = output[-2000:]
    return result


def check_pytest() -> dict:
    t0 = time.monotonic()
    r = _run(["pytest", "tests/", "-q", "--no-header", "--tb=short"])
    counts = {"passed": 0, "failed": 0}
    # Summary line: "42 passed" or "1 failed, 41 passed"
    for line in reversed(r.stdout.strip().splitlines()):
        found = {k: re.search(rf"(\d+)\s+{k}", line) for k in counts}
        if any(found.values()):
            counts.update({k: int(m.group(1)) for k, m in found.items() if m})
            break
    result: dict = {
        "status": "pass" if r.returncode == 0 else "fail",
        **counts,
        "duration_s": round(time.monotonic() - t0, 1),
    }
    if r.returncode != 0:
        result["output"] = r.stdout.strip()[-2000:]
    return result


def main() -> None:
    parser = argparse.ArgumentParser(description="Run all quality checks")
    parser.add_argument("--skip-tests", action="store_true", help="Skip pytest")
    parser.add_argument("--fix", action="store_true", help="Auto-fix ruff issues first")
    args = parser.parse_args()

    t0 = time.monotonic()
    if args.fix:
        _run(["ruff", "check", "--fix", "."])

    checks: dict[str, dict] = {
        "ruff_lint": _check(["ruff", "check", "."], r"^\S+:\d+:\d+:", "errors"),
        "ruff_format": _check(["ruff", "format", "--check", "."], r"^Would reformat", "files"),
        "mypy": _check(["mypy", *MYPY_TARGETS], r": error:", "errors"),
    }
    if args.skip_tests:
        checks["pytest"] = {"status": "skip", "reason": "--skip-tests"}
    else:
        print("Running pytest...", file=sys.stderr)
        checks["pytest"] = check_pytest()

    overall = "pass" if all(c["status"] in ("pass", "skip") for c in checks.values()) else "fail"
    print(
        json.dumps(
            {
                "overall": overall,
                "checks": checks,
                "total_duration_s": round(time.monotonic() - t0, 1),
            },
            indent=2,
        )
    )
    sys.exit(0 if overall == "pass" else 1)


if __name__ == "__main__":
    main()
