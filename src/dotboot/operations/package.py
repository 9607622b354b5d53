from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional
import logging

from ..errors import ConfigError, ToolNotFoundError
from ..executors import CommandResult, Executor
from ..types import InstallableItem

logger = logging.getLogger(__name__)


def package_items(
    executor: Executor,
    packages: Iterable[str],
    *,
    manager: Optional[str] = None,
) -> list[InstallableItem]:
    """Build one installable item per package for the detected manager."""

    names = _unique(packages)
    pkg_manager = PackageManagerFactory.create(manager, executor)
    logger.debug("package-manager=%s packages=%s", pkg_manager.name, names)
    return [pkg_manager.item(executor, name) for name in names]


class PackageManagerFactory:
    _MANAGERS = [
        ("brew", "brew", lambda: BrewPackageManager()),
        ("apt-get", "apt", lambda: AptPackageManager()),
        ("dnf", "dnf", lambda: DnfPackageManager()),
        ("yum", "yum", lambda: YumPackageManager()),
        ("pacman", "pacman", lambda: PacmanPackageManager()),
    ]

    @classmethod
    def create(cls, preferred: Optional[object], executor: Executor) -> "PackageManager":
        if isinstance(preferred, str):
            preferred = preferred.lower()
            for binary, key, factory in cls._MANAGERS:
                if key == preferred:
                    if not executor.which(binary):
                        raise ToolNotFoundError(binary)
                    return factory()
            raise ConfigError(f"Unknown package manager '{preferred}'")
        for binary, _, factory in cls._MANAGERS:
            if executor.which(binary):
                return factory()
        raise ToolNotFoundError(
            "package manager",
            "No supported package manager found (brew, apt-get, dnf, yum, pacman)",
        )


class PackageManager:
    name = "generic"

    def item(self, executor: Executor, package: str) -> InstallableItem:
        return InstallableItem(
            name=package,
            exists=lambda: self.is_installed(executor, package),
            install=lambda _target: self.install(executor, package),
        )

    def install(self, executor: Executor, package: str) -> CommandResult:
        raise NotImplementedError

    def is_installed(self, executor: Executor, package: str) -> bool:
        raise NotImplementedError


@dataclass
class DpkgQuery:
    executable: str = "dpkg-query"

    def check(self, executor: Executor, package: str) -> bool:
        result = executor.run(
            [self.executable, "-W", "-f", "${Status}", package],
            check=False,
            mutable=False,
        )
        return result.returncode == 0 and "install ok installed" in result.stdout


class AptPackageManager(PackageManager):
    name = "apt"

    def __init__(self) -> None:
        self.query = DpkgQuery()
        self._updated = False

    def install(self, executor: Executor, package: str) -> CommandResult:
        if not self._updated:
            # Refresh the index once per run, not per package.
            executor.run(["sudo", "apt-get", "update"], check=False)
            self._updated = True
        return executor.run(["sudo", "apt-get", "install", "-y", package], check=False)

    def is_installed(self, executor: Executor, package: str) -> bool:
        return self.query.check(executor, package)


class DnfPackageManager(PackageManager):
    name = "dnf"

    def install(self, executor: Executor, package: str) -> CommandResult:
        return executor.run(["sudo", "dnf", "install", "-y", package], check=False)

    def is_installed(self, executor: Executor, package: str) -> bool:
        result = executor.run(["rpm", "-q", package], check=False, mutable=False)
        return result.returncode == 0


class YumPackageManager(DnfPackageManager):
    name = "yum"

    def install(self, executor: Executor, package: str) -> CommandResult:  # type: ignore[override]
        return executor.run(["sudo", "yum", "install", "-y", package], check=False)


class BrewPackageManager(PackageManager):
    name = "brew"

    def install(self, executor: Executor, package: str) -> CommandResult:
        return executor.run(["brew", "install", package], check=False)

    def is_installed(self, executor: Executor, package: str) -> bool:
        result = executor.run(["brew", "list", package], check=False, mutable=False)
        return result.returncode == 0


class PacmanPackageManager(PackageManager):
    name = "pacman"

    def install(self, executor: Executor, package: str) -> CommandResult:
        return executor.run(["sudo", "pacman", "-S", "--noconfirm", package], check=False)

    def is_installed(self, executor: Executor, package: str) -> bool:
        result = executor.run(["pacman", "-Qi", package], check=False, mutable=False)
        return result.returncode == 0


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered
