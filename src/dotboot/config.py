from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import getpass
import tomllib

from .catalog import DEFAULT_EXTENSIONS, DEFAULT_PACKAGES, DEFAULT_PLUGINS
from .errors import ConfigError


DEFAULT_CONFIG = Path("~/.config/dotboot/config.toml")
DEFAULT_DOTFILES = Path("~/.dotfiles")
PACKAGE_MANAGERS = {"apt", "dnf", "yum", "brew", "pacman"}


@dataclass
class BootstrapConfig:
    home: Path = field(default_factory=Path.home)
    dotfiles_dir: Path = field(default_factory=lambda: DEFAULT_DOTFILES.expanduser())
    aliases_file: Optional[Path] = None
    user: str = field(default_factory=getpass.getuser)
    editor: str = "cursor"
    package_manager: Optional[str] = None
    packages: list[str] = field(default_factory=lambda: list(DEFAULT_PACKAGES))
    plugins: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_PLUGINS))
    extensions: list[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    install_packages: bool = True
    install_plugins: bool = True
    install_extensions: bool = True
    login_shell: bool = False
    backup_extensions: bool = True
    command_timeout: Optional[float] = None

    @property
    def aliases_path(self) -> Path:
        return self.aliases_file or self.dotfiles_dir / ".aliases"

    @property
    def zshrc(self) -> Path:
        return self.home / ".zshrc"

    @property
    def bashrc(self) -> Path:
        return self.home / ".bashrc"


def load_config(path: Path) -> BootstrapConfig:
    path = Path(path).expanduser()
    if not path.exists():
        return BootstrapConfig()
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"{path}: {exc}") from None
    defaults = data.get("defaults", {})
    if not isinstance(defaults, dict):
        raise ConfigError("defaults must be a table")
    cfg = BootstrapConfig()

    home = defaults.get("home")
    if home:
        cfg.home = Path(str(home)).expanduser()
    dotfiles_dir = defaults.get("dotfiles_dir")
    if dotfiles_dir:
        cfg.dotfiles_dir = Path(str(dotfiles_dir)).expanduser()
    aliases_file = defaults.get("aliases_file")
    if aliases_file:
        cfg.aliases_file = Path(str(aliases_file)).expanduser()
    if defaults.get("user"):
        cfg.user = str(defaults["user"])
    if defaults.get("editor"):
        cfg.editor = str(defaults["editor"])

    manager = defaults.get("package_manager")
    if manager:
        manager = str(manager).lower()
        if manager not in PACKAGE_MANAGERS:
            raise ConfigError(f"Unknown package manager '{manager}'")
        cfg.package_manager = manager

    if "packages" in defaults:
        cfg.packages = _string_list(defaults["packages"], "packages")
    if "extensions" in defaults:
        cfg.extensions = _string_list(defaults["extensions"], "extensions")
    if "plugins" in data:
        plugins = data["plugins"]
        if not isinstance(plugins, dict):
            raise ConfigError("plugins must be a table of name = git url")
        cfg.plugins = {str(name): str(url) for name, url in plugins.items()}

    for key in ("install_packages", "install_plugins", "install_extensions", "login_shell", "backup_extensions"):
        if key in defaults:
            setattr(cfg, key, _boolean(defaults[key], key))

    timeout = defaults.get("command_timeout")
    if timeout is not None:
        try:
            cfg.command_timeout = float(timeout)
        except (TypeError, ValueError) as exc:
            raise ConfigError("command_timeout must be numeric") from exc
    return cfg


def _string_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    return list(value)


def _boolean(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value
