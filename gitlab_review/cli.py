"""
gitlab-review — review context and comments for GitLab merge requests
"""

import argparse
import asyncio
import dataclasses
import sys

from gitlab_review import config
from gitlab_review.client import ReviewClient
from gitlab_review.exceptions import ReviewError
from gitlab_review.models import CommentRequest, InlineCommentRequest, ReviewRequest

HELP_TEXT = """\
Usage: gitlab-review <command> [args...]

Global flags:
  --verbose, -v           Enable HTTP request logging (stderr)
  --version               Show version number

Commands:
  serve                   - Run the MCP server on stdio (default for MCP clients)
  review <url>            - Print the review context for a merge request
    --no-checkout           Do not touch the local working copy
    --repo <path>           Local repository to check the source branch out in
  comment <url> <body>    - Post a note on the merge request
  inline <url> <file> <line> <body>
                          - Post a comment on a line of the new file version
  version                 - Show version number

Configuration (.env or environment):
  GITLAB_TOKEN            Personal access token (required)
  GITLAB_HOST             Base URL, default https://gitlab.com
  GITLAB_REVIEW_REMOTE    Git remote for local checkout, default origin
  GITLAB_HTTP_TIMEOUT_SECONDS
                          Request timeout; unset means no timeout
  GITLAB_HTTP_LOG         true to log HTTP requests to stderr
"""


def _client(ns):
    settings = config.Settings.from_env()
    if ns.verbose:
        settings = dataclasses.replace(settings, http_log=True)
    return ReviewClient(settings)


def cmd_review(ns):
    request = ReviewRequest.from_arguments(
        {"url": ns.url, "shouldCheckout": not ns.no_checkout, "localRepoPath": ns.repo}
    )
    print(asyncio.run(_client(ns).review_merge_request(request)))


def cmd_comment(ns):
    request = CommentRequest.from_arguments({"url": ns.url, "commentBody": ns.body})
    result = asyncio.run(_client(ns).post_mr_comment(request))
    print(f"OK: note {result['id']} {result['url']}".rstrip())


def cmd_inline(ns):
    request = InlineCommentRequest.from_arguments(
        {
            "url": ns.url,
            "filePath": ns.file_path,
            "lineNumber": ns.line,
            "commentBody": ns.body,
        }
    )
    result = asyncio.run(_client(ns).post_inline_comment(request))
    print(f"OK: discussion {result['id']} on {result['file_path']}:{result['new_line']}")


def cmd_serve(ns):
    # Imported here so the CLI works without loading the MCP SDK.
    from gitlab_review.mcp_server import main as serve

    serve()


def build_parser():
    parser = argparse.ArgumentParser(prog="gitlab-review", add_help=False)
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    parser.add_argument("--verbose", "-v", action="store_true")
    parser.add_argument("--version", action="store_true", dest="show_version")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("version").set_defaults(func=None)
    sub.add_parser("serve").set_defaults(func=cmd_serve)

    p = sub.add_parser("review")
    p.add_argument("url")
    p.add_argument("--no-checkout", action="store_true")
    p.add_argument("--repo")
    p.set_defaults(func=cmd_review)

    p = sub.add_parser("comment")
    p.add_argument("url")
    p.add_argument("body")
    p.set_defaults(func=cmd_comment)

    p = sub.add_parser("inline")
    p.add_argument("url")
    p.add_argument("file_path")
    p.add_argument("line", type=int)
    p.add_argument("body")
    p.set_defaults(func=cmd_inline)
    return parser


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(HELP_TEXT)
        sys.exit(0)

    ns = build_parser().parse_args(argv)
    if ns.show_help:
        print(HELP_TEXT)
        sys.exit(0)
    if ns.show_version or ns.command == "version":
        print(f"gitlab-review {config.VERSION}")
        sys.exit(0)
    if not ns.command:
        print(HELP_TEXT)
        sys.exit(0)

    try:
        ns.func(ns)
    except ReviewError as e:
        print(str(e), file=sys.stderr)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
