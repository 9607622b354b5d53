from pathlib import Path

import pytest

from dotboot.catalog import DEFAULT_EXTENSIONS, DEFAULT_PACKAGES
from dotboot.config import BootstrapConfig, load_config
from dotboot.errors import ConfigError


def test_load_config_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "missing.toml")
    assert isinstance(config, BootstrapConfig)
    assert config.packages == list(DEFAULT_PACKAGES)
    assert config.extensions == list(DEFAULT_EXTENSIONS)
    assert config.editor == "cursor"
    assert config.login_shell is False


def test_load_config_overrides(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_text(
        """
        [defaults]
        home = "/home/tester"
        dotfiles_dir = "/opt/dotfiles"
        editor = "code"
        package_manager = "brew"
        packages = ["git", "jq"]
        extensions = ["golang.go"]
        login_shell = true
        install_extensions = false
        command_timeout = 120

        [plugins]
        zsh-autosuggestions = "https://github.com/zsh-users/zsh-autosuggestions"
        """
    )

    config = load_config(cfg_path)
    assert config.home == Path("/home/tester")
    assert config.zshrc == Path("/home/tester/.zshrc")
    assert config.aliases_path == Path("/opt/dotfiles/.aliases")
    assert config.editor == "code"
    assert config.package_manager == "brew"
    assert config.packages == ["git", "jq"]
    assert config.extensions == ["golang.go"]
    assert config.login_shell is True
    assert config.install_extensions is False
    assert config.command_timeout == 120.0
    assert list(config.plugins) == ["zsh-autosuggestions"]


@pytest.mark.parametrize(
    "body",
    [
        '[defaults]\npackages = "git"\n',
        '[defaults]\npackage_manager = "zypper"\n',
        '[defaults]\nlogin_shell = "yes"\n',
        '[defaults]\ncommand_timeout = "soon"\n',
        "[defaults\n",
        "defaults = 1\n",
        "defaults = [\"home\"]\n",
    ],
)
def test_load_config_rejects_bad_values(tmp_path: Path, body: str) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_text(body)
    with pytest.raises(ConfigError):
        load_config(cfg_path)


def test_load_config_unreadable_path_is_config_error(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.mkdir()
    with pytest.raises(ConfigError):
        load_config(cfg_path)


def test_load_config_non_utf8_is_config_error(tmp_path: Path) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_bytes(b'[defaults]\neditor = "caf\xe9"\n')
    with pytest.raises(ConfigError):
        load_config(cfg_path)
