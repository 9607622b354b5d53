from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .executors import Executor, LocalExecutor
from .types import ConfigPatch, PatchResult, PatchStatus

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP = "%Y%m%d-%H%M%S"


def apply_patch(
    patch: ConfigPatch,
    executor: Optional[Executor] = None,
    *,
    timestamp: Optional[datetime] = None,
) -> PatchResult:
    """Append ``patch.content`` to ``patch.path`` unless ``patch.marker`` is there.

    A timestamped sibling backup is written before the file is touched.
    Raises ``OSError`` when the file cannot be read or written.
    """

    executor = executor or LocalExecutor()
    path = Path(patch.path).expanduser()

    created = executor.touch(path)
    if created and not executor.dry_run:
        logger.info("Created %s", path)

    current = executor.read_file(path) or ""
    if patch.marker in current:
        logger.debug("path=%s marker=%r already present", path, patch.marker)
        return PatchResult(path, PatchStatus.ALREADY_PATCHED, details="marker present")

    if not patch.content:
        logger.debug("path=%s empty block, nothing to append", path)
        return PatchResult(path, PatchStatus.ALREADY_PATCHED, details="empty block")

    if executor.dry_run:
        return PatchResult(path, PatchStatus.PATCHED, details="dry-run")

    backup = backup_path(path, timestamp or datetime.now())
    executor.copy_file(path, backup)
    logger.info("Backup created: %s", backup)

    block = patch.content
    if current and not current.endswith("\n"):
        block = "\n" + block
    executor.append_file(path, block)
    return PatchResult(path, PatchStatus.PATCHED, backup=backup, details=f"appended to {path.name}")


def backup_path(path: Path, timestamp: datetime) -> Path:
    base = path.with_name(f"{path.name}.backup.{timestamp.strftime(BACKUP_TIMESTAMP)}")
    candidate = base
    counter = 1
    while candidate.exists():
        candidate = base.with_name(f"{base.name}.{counter}")
        counter += 1
    return candidate
