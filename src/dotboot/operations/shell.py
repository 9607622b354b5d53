from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional
import logging
import pwd
import shlex

from ..errors import InstallError
from ..executors import CommandResult, Executor
from ..types import InstallableItem

logger = logging.getLogger(__name__)

OH_MY_ZSH_INSTALLER = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"


def oh_my_zsh_dir(home: Path) -> Path:
    return home / ".oh-my-zsh"


def plugin_dir(home: Path, plugin: str) -> Path:
    return oh_my_zsh_dir(home) / "custom" / "plugins" / plugin


def framework_item(executor: Executor, home: Path) -> InstallableItem:
    target_dir = oh_my_zsh_dir(home)

    def install(_target) -> CommandResult:
        script = f'sh -c "$(curl -fsSL {shlex.quote(OH_MY_ZSH_INSTALLER)})" "" --unattended'
        # With KEEP_ZSHRC the installer only leaves an existing .zshrc alone;
        # a missing one would still be replaced by its template.
        executor.touch(home / ".zshrc")
        env = {
            "HOME": str(home),
            "ZSH": str(target_dir),
            "KEEP_ZSHRC": "yes",
            "RUNZSH": "no",
            "CHSH": "no",
        }
        return executor.run(["sh", "-c", script], check=False, env=env)

    return InstallableItem(name="oh-my-zsh", exists=target_dir.is_dir, install=install)


def plugin_items(executor: Executor, home: Path, plugins: Mapping[str, str]) -> list[InstallableItem]:
    items: list[InstallableItem] = []
    for name, url in plugins.items():
        destination = plugin_dir(home, name)

        def install(_target, url=url, destination=destination) -> CommandResult:
            return executor.run(["git", "clone", "--depth", "1", url, str(destination)], check=False)

        items.append(InstallableItem(name=name, exists=destination.is_dir, install=install))
    return items


class LoginShell:
    """Ensure zsh is the user's login shell."""

    def __init__(self, executor: Executor, user: str, shell: str = "zsh"):
        self.executor = executor
        self.user = user
        self.shell = shell

    def resolve(self) -> Optional[str]:
        return self.executor.which(self.shell)

    def current(self) -> str:
        return pwd.getpwnam(self.user).pw_shell

    def is_set(self) -> bool:
        path = self.resolve()
        if path is None:
            return False
        current = self.current()
        logger.debug("user=%s login-shell=%s wanted=%s", self.user, current, path)
        return current == path

    def apply(self, _target=None) -> CommandResult:
        path = self.resolve()
        if path is None:
            raise InstallError(f"{self.shell} is not installed")
        return self.executor.run(["sudo", "chsh", "-s", path, self.user], check=False)

    def item(self) -> InstallableItem:
        return InstallableItem(name=f"login-shell:{self.shell}", exists=self.is_set, install=self.apply)
