"""
Command line interface for the smart_commit tool.

This module defines the ``main`` function which is used as the entry
point when executing the ``smartcommit`` command. It orchestrates
repository detection, configuration loading, reading the staged
changes, generating the commit message and, optionally, committing.

Exit codes:

== ===========================================
0  success
1  unexpected error
3  not inside a Git repository
4  nothing staged
5  invalid configuration
6  Git command failed
== ===========================================
"""

from __future__ import annotations

import dataclasses
import logging
import textwrap
import time
from pathlib import Path
from typing import List, Optional

import click

from smart_commit import __version__
from smart_commit.config.loader import (
    AiProviderType,
    CommitStyle,
    ConfigError,
    GeneratorMode,
    Settings,
    load_config,
    parse_enum,
)
from smart_commit.convention.base import ConventionType
from smart_commit.diff.analyzer import DiffAnalyzer
from smart_commit.history.store import CommitMessageHistory
from smart_commit.service import CommitMessageService
from smart_commit.vcs.git_client import GitClient, GitError

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_NO_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6


# ---------------------------------------------------------------------------
# Progress and status display utilities
# ---------------------------------------------------------------------------

class ProgressIndicator:
    """Simple progress indicator for user feedback."""

    def __init__(self, message: str, show_spinner: bool = True):
        self.message = message
        self.show_spinner = show_spinner
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        if self.show_spinner:
            click.echo(f"⠋ {self.message}...", nl=False)
        else:
            click.echo(f"→ {self.message}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.time() - self.start_time
        if exc_type is not None:
            click.echo(f"\r✗ {self.message}")
        elif self.show_spinner:
            click.echo(f"\r✓ {self.message} (took {elapsed:.1f}s)")
        else:
            click.echo(f"  ✓ Done ({elapsed:.1f}s)")
        return False


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_warning(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}⚠ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_message_box(title: str, text: str):
    """Print ``text`` inside a titled box, wrapping long lines."""
    click.echo(f"\n{title}")
    click.echo("┌" + "─" * 58 + "┐")
    for line in text.splitlines() or [""]:
        for display_line in textwrap.wrap(line, width=56, break_on_hyphens=False) or [""]:
            click.echo(f"│ {display_line.ljust(56)} │")
    click.echo("└" + "─" * 58 + "┘")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def apply_overrides(
    settings: Settings,
    mode: Optional[str],
    provider: Optional[str],
    convention: Optional[str],
    one_line: bool,
) -> Settings:
    """Return ``settings`` with command line options applied.

    Raises
    ------
    ConfigError
        If an option value is not valid.
    """
    changes = {}
    if mode is not None:
        changes["generator_mode"] = parse_enum(GeneratorMode, mode, "--mode")
    if provider is not None:
        changes["ai_provider"] = parse_enum(AiProviderType, provider, "--provider")
    if convention is not None:
        changes["convention"] = parse_enum(ConventionType, convention, "--convention")
    if one_line:
        changes["commit_style"] = CommitStyle.ONE_LINE
    return dataclasses.replace(settings, **changes) if changes else settings


def describe_settings(settings: Settings) -> List[str]:
    lines = [f"Mode: {settings.generator_mode.value}"]
    if settings.generator_mode is GeneratorMode.AI:
        if settings.ai_provider is AiProviderType.OLLAMA:
            lines.append(f"Provider: Ollama at {settings.ollama_url} ({settings.ollama_model})")
        else:
            lines.append(f"Provider: OpenAI ({settings.openai_model})")
    lines.append(f"Convention: {settings.convention.display_name}")
    lines.append(f"Style: {settings.commit_style.value}")
    return lines


def show_history(history: CommitMessageHistory) -> None:
    messages = history.get_all()
    if not messages:
        print_info("No commit messages in history yet.")
        return
    for index, message in enumerate(messages, start=1):
        print_message_box(f"#{index}", message)


@click.command()
@click.option("--mode", type=click.Choice(["ai", "template"]), help="Generator to use (overrides config).")
@click.option("--provider", type=click.Choice(["openai", "ollama"]), help="AI provider (overrides config).")
@click.option(
    "--convention",
    type=click.Choice(["gitmoji", "conventional", "freeform"]),
    help="Commit message convention (overrides config).",
)
@click.option("--one-line", "one_line", is_flag=True, help="Generate a title without body.")
@click.option("--commit", "do_commit", is_flag=True, help="Commit the staged changes with the generated message.")
@click.option("--history", "history_only", is_flag=True, help="Show previously generated messages and exit.")
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="smartcommit")
def main(
    mode: Optional[str],
    provider: Optional[str],
    convention: Optional[str],
    one_line: bool,
    do_commit: bool,
    history_only: bool,
    verbose: bool,
) -> None:
    """Generate a commit message for the staged changes of a Git repository.

    Messages are produced by an AI provider (OpenAI or a local Ollama
    server) and fall back to deterministic templates when the AI is
    unavailable.
    """
    # Use force=True so handlers are reconfigured on repeated invocations (tests).
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    ctx = click.get_current_context(silent=True)

    try:
        if history_only:
            show_history(CommitMessageHistory())
            raise click.exceptions.Exit(EXIT_SUCCESS)

        click.echo("\n" + "="*60)
        click.echo("Smart Commit".center(60))
        click.echo("="*60)

        total_steps = 5 if do_commit else 4

        # Step 1: Detect repository
        print_step(1, total_steps, "Detecting Repository")
        with ProgressIndicator("Looking for a Git repository"):
            repo_root = GitClient.find_repo_root(Path.cwd())
        if repo_root is None:
            print_error("Current directory is not inside a Git repository.")
            raise click.exceptions.Exit(EXIT_NO_REPO)
        print_success(f"Found Git repository at: {repo_root}")

        # Step 2: Load configuration
        print_step(2, total_steps, "Loading Configuration")
        try:
            with ProgressIndicator("Reading configuration"):
                settings = apply_overrides(load_config(), mode, provider, convention, one_line)
        except ConfigError as exc:
            print_error(f"Configuration error: {exc}")
            raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
        for line in describe_settings(settings):
            print_info(line, indent=1)

        # Step 3: Read staged changes
        print_step(3, total_steps, "Analyzing Changes")
        client = GitClient(repo_root)
        try:
            with ProgressIndicator("Reading staged changes"):
                records = client.get_staged_changes()
                summary = DiffAnalyzer(records).analyze()
        except GitError as exc:
            print_error(f"Git error: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        if summary.is_empty:
            print_warning("No staged changes. Stage files with 'git add' first.")
            raise click.exceptions.Exit(EXIT_NO_CHANGES)
        print_success(
            f"{summary.total_files} file{'s' if summary.total_files != 1 else ''} staged "
            f"(+{summary.total_lines_added}/-{summary.total_lines_deleted})"
        )
        for fd in summary.sorted_by_significance[:5]:
            print_info(f"{fd.change_type.short_code} {fd.file_path}", indent=1)
        if summary.total_files > 5:
            print_info(f"... and {summary.total_files - 5} more", indent=1)

        # Step 4: Generate
        print_step(4, total_steps, "Generating Commit Message")
        service = CommitMessageService(settings, history=CommitMessageHistory())
        with ProgressIndicator("Generating (this may take a moment)"):
            message = service.generate_for_summary(summary)
        text = message.format()
        print_message_box("Commit message:", text)

        # Step 5: Commit
        if do_commit:
            print_step(5, total_steps, "Committing")
            try:
                with ProgressIndicator("Creating commit"):
                    client.commit(text)
            except GitError as exc:
                print_error(f"Failed to commit changes: {exc}")
                raise click.exceptions.Exit(EXIT_VCS_FAILURE)
            print_success(f"Committed: {message.title}")

        raise click.exceptions.Exit(EXIT_SUCCESS)

    except click.exceptions.Exit:
        # Click uses its own Exit exception; re-raise to let Click handle it
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        ctx.exit(EXIT_GENERIC_ERROR)
