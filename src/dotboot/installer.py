from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from .errors import ToolNotFoundError
from .executors import CommandResult
from .report import RunReport
from .types import InstallableItem, Outcome, RunOutcome

logger = logging.getLogger(__name__)


def install(item: InstallableItem) -> RunOutcome:
    """Install ``item`` unless its existence check says it is already there.

    Install failures are recorded on the returned outcome instead of raised.
    ``ToolNotFoundError`` is the exception: it propagates so the caller can
    stop the whole batch.
    """

    if _is_present(item):
        logger.debug("item=%s target=%s present", item.name, item.target)
        return RunOutcome(item.name, Outcome.ALREADY_PRESENT, "already installed", item.target)

    try:
        result = item.install(item.target)
    except ToolNotFoundError:
        raise
    except Exception as exc:  # noqa: BLE001
        logger.error("item=%s target=%s install failed: %s", item.name, item.target, exc)
        return RunOutcome(item.name, Outcome.FAILED, str(exc) or type(exc).__name__, item.target)

    failure = _failure_detail(result)
    if failure is not None:
        logger.error("item=%s target=%s install failed: %s", item.name, item.target, failure)
        return RunOutcome(item.name, Outcome.FAILED, failure, item.target)

    logger.debug("item=%s target=%s installed", item.name, item.target)
    detail = "installed" if item.target is None else f"installed (remote: {item.target})"
    return RunOutcome(item.name, Outcome.INSTALLED, detail, item.target)


def install_batch(
    items: Iterable[InstallableItem],
    *,
    name: str = "batch",
    progress: Optional[Callable[[InstallableItem], None]] = None,
) -> RunReport:
    report = RunReport(name=name)
    for item in items:
        if progress is not None:
            progress(item)
        try:
            outcome = install(item)
        except ToolNotFoundError as exc:
            logger.error("batch=%s aborted at item=%s: %s", name, item.name, exc)
            report.abort(str(exc))
            break
        report.add(outcome)
    return report.finalize()


def _is_present(item: InstallableItem) -> bool:
    if item.exists is None:
        return False
    try:
        return bool(item.exists())
    except Exception as exc:  # noqa: BLE001
        logger.debug("item=%s existence check failed, assuming absent: %s", item.name, exc)
        return False


def _failure_detail(result: Any) -> Optional[str]:
    if result is False:
        return "install action reported failure"
    if isinstance(result, CommandResult) and not result.ok:
        message = _summarize_output(result)
        prefix = f"rc={result.returncode}"
        return f"{prefix}: {message}" if message else prefix
    return None


def _summarize_output(result: CommandResult) -> Optional[str]:
    for text in (result.stderr, result.stdout):
        if not text:
            continue
        stripped = text.strip()
        if not stripped:
            continue
        line = stripped.splitlines()[0]
        return (line[:157] + "...") if len(line) > 160 else line
    return None
