"""
Deterministic, template based commit message generation.

:class:`TemplateGenerator` turns a :class:`DiffSummary` into a map of
template variables and renders a title and body from it. No network,
no language model: the same input always produces the same message.
This is also the fallback used when AI generation fails.

Template variables (a stable, documented surface):

==================  ==============================================
``type``            dominant category label, e.g. ``feature``
``scope``           detected scope, e.g. ``auth`` (may be empty)
``summary``         one-sentence description, e.g. ``Add Login.kt``
``files``           one ``<X>  path`` line per file
``files_changed``   number of files
``lines_added``     total added lines
``lines_deleted``   total deleted lines
``new_files``       comma separated file names
``modified_files``  comma separated file names
``deleted_files``   comma separated file names
``moved_files``     comma separated ``old → new`` file names
``body_lines``      per-category breakdown of all files
==================  ==============================================
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence

from smart_commit.diff.diff_utils import format_file_list
from smart_commit.diff.models import ChangeCategory, DiffSummary, FileDiff
from smart_commit.generator import template_engine
from smart_commit.generator.base import CommitMessageGenerator, EmptyChangesetError
from smart_commit.generator.message import GeneratedCommitMessage
from smart_commit.grouping.scope_detector import detect_scope

if TYPE_CHECKING:
    from smart_commit.convention.base import CommitConvention


logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


DEFAULT_TITLE_TEMPLATE = "{{type}}{{#scope}}({{scope}}){{/scope}}: {{summary}}"
# Used when a convention is configured: the convention adds the type marker.
CONVENTION_TITLE_TEMPLATE = "{{summary}}"
DEFAULT_BODY_TEMPLATE = (
    "{{files_changed}} file(s) changed, +{{lines_added}}/-{{lines_deleted}} lines\n\n{{body_lines}}"
)
DEFAULT_MAX_TITLE_LENGTH = 72

VARIABLE_NAMES = (
    "type", "scope", "summary", "files", "files_changed", "lines_added",
    "lines_deleted", "new_files", "modified_files", "deleted_files",
    "moved_files", "body_lines",
)

_VERBS = {
    ChangeCategory.FEATURE: "Update",
    ChangeCategory.BUGFIX: "Fix",
    ChangeCategory.REFACTOR: "Refactor",
    ChangeCategory.TEST: "Update tests for",
    ChangeCategory.DOCS: "Update docs for",
    ChangeCategory.STYLE: "Restyle",
    ChangeCategory.BUILD: "Update build config for",
    ChangeCategory.CI: "Update CI for",
    ChangeCategory.CHORE: "Update",
}


class TemplateGenerator(CommitMessageGenerator):
    """Render commit messages from templates.

    Parameters
    ----------
    title_template : Optional[str]
        Template for the subject line. Defaults to
        :data:`DEFAULT_TITLE_TEMPLATE`, or to :data:`CONVENTION_TITLE_TEMPLATE`
        when a convention is configured.
    body_template : Optional[str]
        Template for the body. Defaults to :data:`DEFAULT_BODY_TEMPLATE`.
    max_title_length : int
        Titles longer than this are truncated with ``"..."``.
    convention : Optional[CommitConvention]
        Applied to the rendered message before truncation.
    """

    display_name = "Template"

    def __init__(
        self,
        title_template: Optional[str] = None,
        body_template: Optional[str] = None,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
        convention: Optional[CommitConvention] = None,
    ) -> None:
        if title_template is None:
            title_template = DEFAULT_TITLE_TEMPLATE if convention is None else CONVENTION_TITLE_TEMPLATE
        self.title_template = title_template
        self.body_template = DEFAULT_BODY_TEMPLATE if body_template is None else body_template
        self.max_title_length = max_title_length
        self.convention = convention

    def generate(self, summary: DiffSummary) -> GeneratedCommitMessage:
        if summary.is_empty:
            raise EmptyChangesetError("Cannot generate a commit message from an empty changeset")

        variables = self.build_variable_map(summary)
        title = template_engine.render(self.title_template, variables)
        if not title.strip():
            logger.debug("Title template %r rendered blank; using summary", self.title_template)
            title = variables["summary"]
        body = template_engine.render(self.body_template, variables)

        message = GeneratedCommitMessage(title=title, body=body if body.strip() else None)
        if self.convention is not None:
            message = self.convention.format(
                message, summary.dominant_category, variables["scope"] or None
            )
        return message.sanitized().with_truncated_title(self.max_title_length)

    # ------------------------------------------------------------------
    # Variable map
    # ------------------------------------------------------------------
    def build_variable_map(self, summary: DiffSummary) -> Dict[str, str]:
        scope = detect_scope(summary)
        return {
            "type": summary.dominant_category.label,
            "scope": scope,
            "summary": infer_summary(summary, scope),
            "files": format_file_list(summary.file_diffs),
            "files_changed": str(summary.total_files),
            "lines_added": str(summary.total_lines_added),
            "lines_deleted": str(summary.total_lines_deleted),
            "new_files": _join_names(summary.new_files),
            "modified_files": _join_names(summary.modified_files),
            "deleted_files": _join_names(summary.deleted_files),
            "moved_files": _join_moves(summary.moved_files),
            "body_lines": build_body_breakdown(summary),
        }


def infer_summary(summary: DiffSummary, scope: str = "") -> str:
    """Infer a one-sentence description of the changeset."""
    top = summary.sorted_by_significance[:3]
    verb = verb_for_category(summary.dominant_category)

    if summary.is_all_new:
        if summary.total_files == 1:
            return f"Add {top[0].file_name}"
        return f"Add {describe_file_group(top)}"
    if summary.is_all_deleted:
        if summary.total_files == 1:
            return f"Remove {top[0].file_name}"
        return f"Remove {describe_file_group(top)}"
    if summary.total_files == 1:
        return f"{verb} {top[0].file_name}"
    if scope:
        return f"{verb} {scope}"
    return f"{verb} {describe_file_group(top)}"


def verb_for_category(category: ChangeCategory) -> str:
    return _VERBS[category]


def describe_file_group(files: Sequence[FileDiff]) -> str:
    """Short description of (at most three) significant files.

    Only the files passed in are counted, so for a top-three window the
    count tops out at "and 2 other files"; the full total lives in
    ``files_changed``.
    """
    if not files:
        return "changes"
    if len(files) == 1:
        return files[0].file_name
    if len(files) == 2:
        return f"{files[0].file_name} and {files[1].file_name}"
    return f"{files[0].file_name} and {len(files) - 1} other files"


def build_body_breakdown(summary: DiffSummary) -> str:
    """Per-category listing of every file, highest priority category first."""
    sections: List[str] = []
    groups = sorted(summary.by_category.items(), key=lambda item: item[0].priority)
    for category, files in groups:
        lines = [f"{category.heading}:"]
        for fd in files:
            line = f"- {fd.file_path} (+{fd.lines_added}/-{fd.lines_deleted})"
            if fd.change_type.is_relocation and fd.old_file_path is not None:
                line += f" (from {fd.old_file_path})"
            lines.append(line)
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


def _join_names(files: Sequence[FileDiff]) -> str:
    return ", ".join(fd.file_name for fd in files)


def _join_moves(files: Sequence[FileDiff]) -> str:
    parts = []
    for fd in files:
        if fd.old_file_path is not None:
            parts.append(f"{fd.old_file_path.rsplit('/', 1)[-1]} → {fd.file_name}")
        else:
            parts.append(fd.file_name)
    return ", ".join(parts)
