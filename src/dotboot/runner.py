from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional
import logging
import subprocess

from .catalog import aliases_patch, oh_my_zsh_patch
from .config import BootstrapConfig
from .errors import DotbootError
from .executors import Executor, LocalExecutor
from .installer import install_batch
from .operations import (
    ExtensionCLI,
    LoginShell,
    backup_installed,
    extension_items,
    framework_item,
    package_items,
    plugin_items,
)
from .patcher import apply_patch
from .report import RunReport
from .types import Batch, ConfigPatch, InstallableItem, PatchResult, PatchStatus, RemoteTarget

logger = logging.getLogger(__name__)

ItemBuilder = Callable[[], list[InstallableItem]]


@dataclass
class RunResult:
    reports: list[RunReport] = field(default_factory=list)
    patches: list[PatchResult] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        if any(report.aborted for report in self.reports):
            return 1
        if any(patch.status is PatchStatus.FAILED for patch in self.patches):
            return 1
        return 0


class Bootstrapper:
    """Runs the package, plugin and extension batches, then patches rc files."""

    def __init__(
        self,
        config: BootstrapConfig,
        *,
        target: RemoteTarget = None,
        dry_run: bool = False,
        executor: Optional[Executor] = None,
        progress_callback: Optional[Callable[[str, InstallableItem], None]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.target = target
        self.dry_run = dry_run
        self.executor = executor or LocalExecutor(dry_run=dry_run, timeout=config.command_timeout)
        self.progress_callback = progress_callback
        self.clock = clock

    def run(self) -> RunResult:
        result = RunResult()
        for name, builder, requires in self._batch_plan():
            if name == "extensions":
                self._backup_extensions()
            result.reports.append(self._run_batch(name, builder, requires))
        for patch in self.patches():
            result.patches.append(self._apply(patch))
        return result

    def batches(self) -> list[Batch]:
        """Build every enabled batch together with its items."""
        return [Batch(name, builder(), requires) for name, builder, requires in self._batch_plan()]

    def patches(self) -> list[ConfigPatch]:
        cfg = self.config
        patches: list[ConfigPatch] = []
        if cfg.install_plugins:
            patches.append(oh_my_zsh_patch(cfg.zshrc, cfg.plugins.keys()))
        patches.append(aliases_patch(cfg.zshrc, cfg.aliases_path))
        patches.append(aliases_patch(cfg.bashrc, cfg.aliases_path))
        if not cfg.aliases_path.exists():
            logger.warning("Aliases file %s not found; sourcing it anyway", cfg.aliases_path)
        return patches

    def _batch_plan(self) -> list[tuple[str, ItemBuilder, tuple[str, ...]]]:
        cfg = self.config
        plan: list[tuple[str, ItemBuilder, tuple[str, ...]]] = []
        if cfg.install_packages and cfg.packages:
            plan.append(("packages", self._package_items, ()))
        if cfg.login_shell:
            plan.append(("shell", self._shell_items, ()))
        if cfg.install_plugins:
            plan.append(("plugins", self._plugin_items, ("git", "curl")))
        if cfg.install_extensions and cfg.extensions:
            plan.append(("extensions", self._extension_items, (cfg.editor,)))
        return plan

    def _run_batch(
        self,
        name: str,
        builder: ItemBuilder,
        requires: tuple[str, ...],
    ) -> RunReport:
        missing = [tool for tool in requires if not self.executor.which(tool)]
        if missing:
            reason = f"required tool(s) not found on PATH: {', '.join(missing)}"
            logger.error("batch=%s skipped: %s", name, reason)
            report = RunReport(name=name)
            report.abort(reason)
            return report.finalize()
        try:
            items = builder()
        except DotbootError as exc:
            logger.error("batch=%s skipped: %s", name, exc)
            report = RunReport(name=name)
            report.abort(str(exc))
            return report.finalize()
        logger.debug("batch=%s items=%d target=%s", name, len(items), self.target)

        progress = None
        if self.progress_callback is not None:
            callback = self.progress_callback

            def progress(item: InstallableItem) -> None:
                callback(name, item)

        return install_batch(items, name=name, progress=progress)

    def _package_items(self) -> list[InstallableItem]:
        cfg = self.config
        return package_items(self.executor, cfg.packages, manager=cfg.package_manager)

    def _plugin_items(self) -> list[InstallableItem]:
        cfg = self.config
        items = [framework_item(self.executor, cfg.home)]
        items.extend(plugin_items(self.executor, cfg.home, cfg.plugins))
        return items

    def _shell_items(self) -> list[InstallableItem]:
        return [LoginShell(self.executor, self.config.user).item()]

    def _extension_items(self) -> list[InstallableItem]:
        cfg = self.config
        cli = ExtensionCLI(self.executor, cfg.editor)
        return extension_items(cli, cfg.extensions, self.target)

    def _backup_extensions(self) -> None:
        cfg = self.config
        if not cfg.backup_extensions or self.target is not None or self.dry_run:
            return
        if not self.executor.which(cfg.editor):
            return
        cli = ExtensionCLI(self.executor, cfg.editor)
        try:
            saved = backup_installed(cli, cfg.home, self.clock())
        except (DotbootError, OSError, subprocess.SubprocessError) as exc:
            logger.warning("Extension backup failed: %s", exc)
        else:
            logger.info("Extension list saved to %s", saved)

    def _apply(self, patch: ConfigPatch) -> PatchResult:
        try:
            return apply_patch(patch, self.executor, timestamp=self.clock())
        except (OSError, UnicodeError) as exc:
            logger.error("patch path=%s failed: %s", patch.path, exc)
            return PatchResult(patch.path, PatchStatus.FAILED, details=str(exc))
