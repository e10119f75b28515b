"""Review context document: MR header plus filtered, size-bounded diffs."""

from gitlab_review import config
from gitlab_review.formatters._sync import render_sync_status


def is_ignored_path(path):
    """True for lockfiles, source maps, and minified bundles."""
    return (path or "").endswith(config.IGNORED_SUFFIXES)


def _file_heading(change):
    heading = f"### File: `{change.new_path}`"
    if change.deleted_file:
        heading += " (deleted)"
    elif change.new_file:
        heading += " (new file)"
    elif change.renamed_file and change.old_path != change.new_path:
        heading += f" (renamed from `{change.old_path}`)"
    return heading


def render_change(change):
    """Render one file section, truncating oversized diffs."""
    diff = change.diff
    if len(diff) > config.DIFF_SIZE_LIMIT:
        return (
            f"{_file_heading(change)}\n"
            "(Diff too large, truncated)\n"
            "```diff\n" + diff[: config.DIFF_PREVIEW_CHARS] + "\n...\n```\n\n"
        )
    return f"{_file_heading(change)}\n```diff\n{diff}\n```\n\n"


def render_header(metadata, outcome):
    lines = [
        f"Git Status: {render_sync_status(outcome)}",
        "",
        f"# MR !{metadata.iid}: {metadata.title}",
        f"Author: {metadata.author_name}",
        f"Branch: {metadata.source_branch} -> {metadata.target_branch}",
        metadata.description,
        "",
        "## Changes Summary",
    ]
    return "\n".join(lines) + "\n"


def assemble_review_context(metadata, outcome, changes, warnings=()):
    """Build the review document. Change order is preserved; ignored paths are dropped.

    Args:
        metadata: MrMetadata for the header.
        outcome: SyncOutcome of the (possibly skipped) local checkout.
        changes: MrChanges, or any iterable of FileChange.
        warnings: Safety warnings to list at the end.
    """
    overflow = getattr(changes, "overflow", False)
    file_changes = getattr(changes, "changes", changes)

    parts = [render_header(metadata, outcome)]
    for change in file_changes:
        if is_ignored_path(change.new_path):
            continue
        parts.append(render_change(change))
    if overflow:
        parts.append(
            "(GitLab reported this change list as incomplete; some files are not shown.)\n\n"
        )
    if warnings:
        parts.append("## Safety Warnings\n")
        parts.extend(f"- {w}\n" for w in warnings)
    return "".join(parts)
