from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional
import logging

from ..errors import InstallError
from ..executors import CommandResult, Executor
from ..types import InstallableItem, RemoteTarget

logger = logging.getLogger(__name__)


class ExtensionCLI:
    """Thin wrapper around an editor's extension command line.

    The installed-extension listing is fetched once and cached; ids compare
    case-insensitively the way the marketplace treats them.
    """

    def __init__(self, executor: Executor, binary: str = "cursor"):
        self.executor = executor
        self.binary = binary
        self._installed: dict[RemoteTarget, set[str]] = {}

    def list_installed(self, target: RemoteTarget = None) -> set[str]:
        if target not in self._installed:
            command = [self.binary, "--list-extensions", *self._remote_args(target)]
            result = self.executor.run(command, check=False, mutable=False)
            if result.returncode != 0:
                raise InstallError(
                    f"{self.binary} --list-extensions failed (rc={result.returncode})"
                )
            self._installed[target] = {
                line.strip().lower() for line in result.stdout.splitlines() if line.strip()
            }
        return self._installed[target]

    def is_installed(self, extension: str, target: RemoteTarget = None) -> bool:
        return extension.lower() in self.list_installed(target)

    def install(self, extension: str, target: RemoteTarget = None) -> CommandResult:
        command = [self.binary, "--install-extension", extension, *self._remote_args(target)]
        result = self.executor.run(command, check=False)
        if result.returncode == 0 and target in self._installed:
            self._installed[target].add(extension.lower())
        return result

    def item(self, extension: str, target: RemoteTarget = None) -> InstallableItem:
        return InstallableItem(
            name=extension,
            exists=lambda: self.is_installed(extension, target),
            install=lambda remote: self.install(extension, remote),
            target=target,
        )

    @staticmethod
    def _remote_args(target: RemoteTarget) -> list[str]:
        return ["--remote", target] if target else []


def extension_items(
    cli: ExtensionCLI,
    extensions: Iterable[str],
    target: RemoteTarget = None,
) -> list[InstallableItem]:
    seen: set[str] = set()
    items: list[InstallableItem] = []
    for extension in extensions:
        key = extension.lower()
        if key in seen:
            logger.debug("extension=%s listed twice, skipping duplicate", extension)
            continue
        seen.add(key)
        items.append(cli.item(extension, target))
    return items


def backup_installed(
    cli: ExtensionCLI,
    home: Path,
    timestamp: Optional[datetime] = None,
) -> Path:
    """Save the current local extension list under ``home``."""

    stamp = (timestamp or datetime.now()).strftime("%Y%m%d-%H%M%S")
    backup_dir = home / f".{cli.binary}-extensions-backup-{stamp}"
    result = cli.executor.run([cli.binary, "--list-extensions"], check=False, mutable=False)
    if result.returncode != 0:
        raise InstallError(f"{cli.binary} --list-extensions failed (rc={result.returncode})")
    backup_dir.mkdir(parents=True, exist_ok=True)
    target = backup_dir / "installed-extensions.txt"
    target.write_text(result.stdout)
    return target
