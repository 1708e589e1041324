"""
Heuristics for classifying file changes into semantic categories.

The classifier is a first-match rule list, checked in a fixed order:

1. path rules (tests, CI, build, docs, styles, tooling config)
2. change type (a deletion not matched above is a chore)
3. keywords in the added lines of the diff (bug fixes, refactors)
4. fallback to FEATURE

It is intentionally simple and deterministic so that it can be unit
tested without a language model. Each file is classified on its own;
there is no state shared between files.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple

from smart_commit.diff.models import ChangeCategory, ChangeType, FileDiff


TEST_PATH_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"(?:^|[/\\])tests?[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])__tests__[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])spec[/\\]", re.IGNORECASE),
    re.compile(r"\.(?:test|spec|tests)\.\w+$", re.IGNORECASE),
    re.compile(r"Test\.\w+$"),
    re.compile(r"(?:^|[/\\])test_[^/\\]+\.py$"),
    re.compile(r"_test\.py$"),
)

CI_PATH_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"(?:^|[/\\])\.github[/\\]workflows[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])\.github[/\\]actions[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])\.circleci[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])\.gitlab-ci", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])jenkinsfile", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])\.travis\.yml$", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])azure-pipelines", re.IGNORECASE),
)

BUILD_FILE_NAMES = frozenset({
    "build.gradle", "build.gradle.kts", "settings.gradle", "settings.gradle.kts",
    "gradle.properties", "gradle-wrapper.properties",
    "pom.xml", "build.sbt",
    "package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "makefile", "cmakelists.txt",
    "cargo.toml", "cargo.lock", "go.mod", "go.sum",
    "gemfile", "gemfile.lock",
    "requirements.txt", "setup.py", "setup.cfg", "pyproject.toml",
    "composer.json", "composer.lock",
})

BUILD_PATH_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"(?:^|[/\\])gradle[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])buildSrc[/\\]", re.IGNORECASE),
    re.compile(r"(?:^|[/\\])build-logic[/\\]", re.IGNORECASE),
)

DOC_EXTENSIONS = frozenset({
    "md", "txt", "rst", "adoc", "asciidoc", "rdoc", "textile", "wiki", "org",
})

DOC_FILE_NAMES = frozenset({
    "readme", "changelog", "license", "licence", "contributing",
    "authors", "code_of_conduct", "security", "history",
})

# Doc-like stems with these extensions are code (security.py, history.ts).
SOURCE_EXTENSIONS = frozenset({
    "py", "kt", "kts", "java", "scala", "groovy", "js", "jsx", "ts", "tsx",
    "go", "rs", "rb", "php", "c", "h", "cc", "cpp", "hpp", "cs", "swift",
    "m", "sh", "sql", "vue", "dart", "lua",
})

STYLE_EXTENSIONS = frozenset({"css", "scss", "sass", "less", "styl"})

CONFIG_FILE_NAMES = frozenset({
    ".gitignore", ".gitattributes", ".editorconfig",
    ".eslintrc", ".eslintrc.json", ".eslintrc.js", ".eslintrc.yml",
    ".prettierrc", ".prettierrc.json",
    "tsconfig.json", "jsconfig.json",
    ".dockerignore", "dockerfile",
    "docker-compose.yml", "docker-compose.yaml",
})

BUGFIX_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"\bfix(?:ed|es|ing)?\b", re.IGNORECASE),
    re.compile(r"\bbug\b", re.IGNORECASE),
    re.compile(r"\bnull\s*(?:pointer|check|safe)\b", re.IGNORECASE),
    re.compile(r"\bNPE\b"),
    re.compile(r"\bcatch\b.*\bexception\b", re.IGNORECASE),
    re.compile(r"\berror\s*handling\b", re.IGNORECASE),
    re.compile(r"\boff[- ]by[- ]one\b", re.IGNORECASE),
    re.compile(r"\brace\s*condition\b", re.IGNORECASE),
)

REFACTOR_PATTERNS: Sequence[Pattern[str]] = (
    re.compile(r"\brefactor\b", re.IGNORECASE),
    re.compile(r"\brename[ds]?\b", re.IGNORECASE),
    re.compile(r"\bextract(?:ed|s|ing)?\b", re.IGNORECASE),
    re.compile(r"\bmov(?:e|ed|es|ing)\b.*\b(?:method|function|class)\b", re.IGNORECASE),
    re.compile(r"\bclean-?up\b", re.IGNORECASE),
    re.compile(r"\bsimplif(?:y|ied|ies)\b", re.IGNORECASE),
)

# Keyword rules applied to added diff lines, in priority order.
CONTENT_RULES: Sequence[Tuple[Sequence[Pattern[str]], ChangeCategory]] = (
    (BUGFIX_PATTERNS, ChangeCategory.BUGFIX),
    (REFACTOR_PATTERNS, ChangeCategory.REFACTOR),
)


def classify_change(file_diff: FileDiff) -> ChangeCategory:
    """Classify a single file diff into a :class:`ChangeCategory`.

    Parameters
    ----------
    file_diff : FileDiff
        The change to classify.

    Returns
    -------
    ChangeCategory
        The first matching category; FEATURE when no rule matches.
    """
    category = _classify_by_path(file_diff)
    if category is not None:
        return category

    if file_diff.change_type is ChangeType.DELETED:
        return ChangeCategory.CHORE

    category = _classify_by_content(file_diff.diff)
    if category is not None:
        return category

    return ChangeCategory.FEATURE


def classify_all(file_diffs: Iterable[FileDiff]) -> List[ChangeCategory]:
    """Classify each diff independently; the result is parallel to the input."""
    return [classify_change(fd) for fd in file_diffs]


def _classify_by_path(file_diff: FileDiff) -> Optional[ChangeCategory]:
    path = file_diff.file_path
    name = file_diff.file_name.lower()
    ext = file_diff.file_extension

    if any(p.search(path) for p in TEST_PATH_PATTERNS):
        return ChangeCategory.TEST
    if any(p.search(path) for p in CI_PATH_PATTERNS):
        return ChangeCategory.CI
    if name in BUILD_FILE_NAMES or any(p.search(path) for p in BUILD_PATH_PATTERNS):
        return ChangeCategory.BUILD
    if ext in DOC_EXTENSIONS or _is_doc_file_name(name, ext):
        return ChangeCategory.DOCS
    if ext in STYLE_EXTENSIONS:
        return ChangeCategory.STYLE
    if name in CONFIG_FILE_NAMES:
        return ChangeCategory.CHORE
    return None


def _is_doc_file_name(name: str, ext: str) -> bool:
    # README.markdown, LICENSE-MIT, CHANGELOG.html ... but not security.py
    if ext in SOURCE_EXTENSIONS:
        return False
    stem = name.split(".", 1)[0]
    return any(stem == doc or stem.startswith(doc + "-") for doc in DOC_FILE_NAMES)


def _classify_by_content(diff: Optional[str]) -> Optional[ChangeCategory]:
    if not diff:
        return None
    added = "\n".join(
        line for line in diff.splitlines()
        if line.startswith("+") and not line.startswith("+++")
    )
    if not added:
        return None
    for patterns, category in CONTENT_RULES:
        if any(p.search(added) for p in patterns):
            return category
    return None
