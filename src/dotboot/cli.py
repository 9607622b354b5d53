from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, load_config
from .errors import ConfigError
from .report import RunReport, summarize
from .runner import Bootstrapper
from .types import InstallableItem, Outcome, PatchResult, PatchStatus, RunOutcome


class Ansi:
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BLUE = "\033[94m"
    RESET = "\033[0m"


def colorize(text: str, color: Optional[str]) -> str:
    if not color:
        return text
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        return text
    return f"{color}{text}{Ansi.RESET}"

_last_progress_len = 0

EPILOG = """\
examples:
  dotboot                               install locally
  dotboot ssh-remote+user@hostname      install editor extensions on an SSH remote
  dotboot dev-container+container-name  install editor extensions in a dev container
  dotboot wsl+distro-name               install editor extensions in WSL
"""


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dotboot",
        description="Bootstrap shell packages, Oh My Zsh plugins and editor extensions",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "remote",
        nargs="?",
        default=None,
        help="Remote connection string forwarded to the editor CLI (default: install locally)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG,
        help=f"Path to dotboot config file (default: {DEFAULT_CONFIG})",
    )
    parser.add_argument("--dry-run", action="store_true", help="Report changes without executing")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    args, extras = parser.parse_known_args(argv)
    unknown = [arg for arg in extras if arg.startswith("-")]
    if unknown:
        parser.error(f"unrecognized arguments: {' '.join(unknown)}")
    # Only the first positional is a target; the rest are ignored.
    args.ignored = extras
    return args


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s - %(message)s",
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)
    if args.ignored:
        logging.warning("Ignoring extra arguments: %s", " ".join(args.ignored))

    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        print(colorize(f"Config validation failed: {exc}", Ansi.RED), file=sys.stderr)
        return 1

    target = args.remote or None
    if target:
        logging.info("Remote connection: %s", target)
    bootstrapper = Bootstrapper(
        cfg,
        target=target,
        dry_run=args.dry_run,
        progress_callback=print_progress,
    )
    result = bootstrapper.run()

    effective_level = logging.getLogger().getEffectiveLevel()
    for report in result.reports:
        for outcome in report:
            _clear_progress()
            if should_display_outcome(outcome, effective_level):
                print(format_outcome(report.name, outcome))
    for patch in result.patches:
        if should_display_patch(patch, effective_level):
            print(format_patch(patch))

    _clear_progress()
    for report in result.reports:
        print(render_summary(report))
    return result.exit_code


def format_outcome(batch: str, outcome: RunOutcome) -> str:
    color = {
        Outcome.INSTALLED: Ansi.GREEN,
        Outcome.ALREADY_PRESENT: Ansi.BLUE,
        Outcome.FAILED: Ansi.RED,
    }[outcome.status]
    line = f"{batch}::{outcome.name} {outcome.status.value} - {outcome.details}"
    return colorize(line, color)


def format_patch(patch: PatchResult) -> str:
    color = {
        PatchStatus.PATCHED: Ansi.GREEN,
        PatchStatus.ALREADY_PATCHED: Ansi.BLUE,
        PatchStatus.FAILED: Ansi.RED,
    }[patch.status]
    detail = patch.details
    if patch.backup is not None:
        detail = f"{detail} (backup: {patch.backup})"
    return colorize(f"config::{patch.path} {patch.status.value} - {detail}", color)


def should_display_outcome(outcome: RunOutcome, log_level: int) -> bool:
    if outcome.status is not Outcome.ALREADY_PRESENT:
        return True
    return log_level <= logging.DEBUG


def should_display_patch(patch: PatchResult, log_level: int) -> bool:
    if patch.status is not PatchStatus.ALREADY_PATCHED:
        return True
    return log_level <= logging.DEBUG


def render_summary(report: RunReport) -> str:
    summary = summarize(report)
    parts = [
        f"Installed: {summary.installed_count}",
        f"Skipped: {summary.skipped_count}",
        f"Failed: {summary.failed_count}",
    ]
    text = f"{report.name}: " + " | ".join(parts)
    if summary.failed_names:
        text += "\n  failed: " + ", ".join(summary.failed_names)
    if report.aborted:
        text += f"\n  aborted: {report.aborted}"
    color = Ansi.GREEN if summary.failed_count == 0 and not report.aborted else Ansi.RED
    return colorize(text, color)


def print_progress(batch: str, item: InstallableItem) -> None:
    global _last_progress_len
    suffix = f" (remote: {item.target})" if item.target else ""
    line = f"{batch}::{item.name}{suffix} pending..."
    _last_progress_len = len(line)
    print(colorize(line, Ansi.YELLOW), end="\r", flush=True)


def _clear_progress() -> None:
    global _last_progress_len
    if _last_progress_len:
        print(" " * _last_progress_len, end="\r", flush=True)
        _last_progress_len = 0


if __name__ == "__main__":
    raise SystemExit(main())
