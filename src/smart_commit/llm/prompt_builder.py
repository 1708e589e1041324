"""
Prompt construction for AI commit message generation.

Everything here is a pure function of its inputs. The user prompt is
bounded three ways so that even a monorepo-sized commit fits a model's
context window:

* the file list shows at most ``max_files`` entries,
* the diff section is cut to ``max_diff_tokens`` estimated tokens,
* the whole prompt is finally hard-capped at ``max_total_chars``.
"""

from __future__ import annotations

from typing import List

from smart_commit.diff import diff_utils
from smart_commit.diff.models import DiffSummary


MAX_FILES_IN_PROMPT = 30
MAX_TOTAL_PROMPT_CHARS = 32000
DEFAULT_MAX_DIFF_TOKENS = 4000
TRUNCATION_NOTICE = "\n\n... (prompt truncated to fit token limit)\n"

SYSTEM_ROLE = (
    "You are a precise Git commit message generator. "
    "Your sole task is to analyze a code diff and produce a single, high-quality commit message. "
    "You must respond ONLY with a valid JSON object: no markdown, no explanation, no commentary."
)

OUTPUT_FORMAT = """Respond with EXACTLY this JSON structure:
{
  "title": "<imperative-mood subject line, max 72 characters>",
  "body": "<optional multi-line explanation of WHY the change was made, wrap at 72 chars>",
  "footer": "<optional: issue references, breaking change notes, or null>"
}

Rules for the JSON:
- "title" is REQUIRED and must not be empty.
- "body" is OPTIONAL. Set to null or omit if the change is self-explanatory.
- "footer" is OPTIONAL. Set to null or omit if not applicable.
- Do NOT wrap the JSON in markdown code fences.
- Do NOT include any text outside the JSON object."""

STYLE_RULES = """Commit message style rules:
- Title: use imperative mood ("Add feature" not "Added feature").
- Title: max 72 characters. Be specific about WHAT changed.
- Title: do NOT include file paths.
- Title: do NOT start with a category prefix unless convention rules say otherwise.
- Body: explain WHY the change was made, not WHAT (the diff shows what).
- Body: wrap lines at 72 characters.
- Body: use bullet points for multiple reasons.
- If the change is trivial (typo fix, formatting), body should be null.
- Analyze the FULL diff to understand the intent, not just file names."""

ONE_LINE_HINT = (
    "IMPORTANT: The user wants a ONE-LINE commit message only. "
    'Set "body" to null and "footer" to null. '
    'Put all the important information in the "title" field. '
    "Keep it concise and under 72 characters."
)


class PromptBuilder:
    """Build the system and user prompts sent to the AI provider.

    Parameters
    ----------
    max_diff_tokens : int
        Token budget for the diff section of the user prompt.
    max_files : int
        Maximum number of files listed individually.
    max_total_chars : int
        Hard character cap for the user prompt, applied last.
    convention_hint : str
        Convention rules appended to the system prompt.
    one_line_only : bool
        Ask the model for a title without body or footer.
    language_hint : str
        Instruction about the language the message should be written in.
    custom_system_prompt : str
        Free-text user instructions appended to the system prompt.
    """

    def __init__(
        self,
        max_diff_tokens: int = DEFAULT_MAX_DIFF_TOKENS,
        max_files: int = MAX_FILES_IN_PROMPT,
        max_total_chars: int = MAX_TOTAL_PROMPT_CHARS,
        convention_hint: str = "",
        one_line_only: bool = False,
        language_hint: str = "",
        custom_system_prompt: str = "",
    ) -> None:
        self.max_diff_tokens = max_diff_tokens
        self.max_files = max_files
        self.max_total_chars = max_total_chars
        self.convention_hint = convention_hint
        self.one_line_only = one_line_only
        self.language_hint = language_hint
        self.custom_system_prompt = custom_system_prompt

    def build_system_prompt(self) -> str:
        sections = [SYSTEM_ROLE, OUTPUT_FORMAT, STYLE_RULES]
        if self.one_line_only:
            sections.append(ONE_LINE_HINT)
        if self.convention_hint.strip():
            sections.append("Convention-specific rules:\n" + self.convention_hint)
        if self.language_hint.strip():
            sections.append(self.language_hint)
        if self.custom_system_prompt.strip():
            sections.append("Additional user instructions:\n" + self.custom_system_prompt)
        return "\n\n".join(sections)

    def build_user_prompt(self, summary: DiffSummary) -> str:
        """Describe ``summary`` for the model.

        The result is at most ``max_total_chars`` characters plus the
        length of :data:`TRUNCATION_NOTICE`.
        """
        raw = self._build_raw_user_prompt(summary)
        if len(raw) <= self.max_total_chars:
            return raw
        return raw[: self.max_total_chars] + TRUNCATION_NOTICE

    def _build_raw_user_prompt(self, summary: DiffSummary) -> str:
        shown = summary.sorted_by_significance[: self.max_files]
        omitted = summary.total_files - len(shown)

        parts: List[str] = ["Generate a commit message for the following changes:\n\n"]

        parts.append(f"## Files Changed ({summary.total_files}):\n")
        parts.append(diff_utils.format_file_list(shown))
        if omitted > 0:
            parts.append(f"\n... and {omitted} more file(s) omitted")
        parts.append("\n\n")

        parts.append("## Statistics:\n")
        parts.append(f"- Files: {summary.total_files}\n")
        parts.append(f"- Lines added: +{summary.total_lines_added}\n")
        parts.append(f"- Lines deleted: -{summary.total_lines_deleted}\n")
        parts.append(f"- New files: {len(summary.new_files)}\n")
        parts.append(f"- Modified files: {len(summary.modified_files)}\n")
        parts.append(f"- Deleted files: {len(summary.deleted_files)}\n")
        parts.append(f"- Moved/Renamed files: {len(summary.moved_files)}\n")
        parts.append("\n")

        parts.append(f"## Detected change category: {summary.dominant_category.label}\n\n")

        diff_text = diff_utils.truncate_diffs(shown, self.max_diff_tokens)
        if diff_text.strip():
            parts.append("## Diff:\n")
            parts.append(diff_text)
            parts.append("\n")
        return "".join(parts)
