from pathlib import Path
from types import SimpleNamespace

from dotboot.executors import CommandResult, LocalExecutor
from dotboot.installer import install, install_batch
from dotboot.operations import shell
from dotboot.types import Outcome


class CloningExecutor(LocalExecutor):
    """Creates the clone destination instead of running git."""

    def __init__(self, zsh_path="/usr/bin/zsh"):
        super().__init__()
        self.zsh_path = zsh_path
        self.commands: list[list[str]] = []
        self.envs: list[dict] = []

    def which(self, binary: str):
        return self.zsh_path if binary == "zsh" else f"/usr/bin/{binary}"

    def run(self, command, **kwargs):  # type: ignore[override]
        cmd = list(command)
        self.commands.append(cmd)
        self.envs.append(kwargs.get("env") or {})
        if cmd[:2] == ["git", "clone"]:
            Path(cmd[-1]).mkdir(parents=True)
        return CommandResult(cmd, "", "", 0)


def test_framework_present_when_directory_exists(tmp_path: Path):
    (tmp_path / ".oh-my-zsh").mkdir()
    executor = CloningExecutor()

    outcome = install(shell.framework_item(executor, tmp_path))

    assert outcome.status is Outcome.ALREADY_PRESENT
    assert executor.commands == []


def test_framework_installer_runs_unattended(tmp_path: Path):
    executor = CloningExecutor()
    outcome = install(shell.framework_item(executor, tmp_path))

    assert outcome.status is Outcome.INSTALLED
    script = executor.commands[0][2]
    assert "--unattended" in script
    assert shell.OH_MY_ZSH_INSTALLER in script
    assert executor.envs[0]["ZSH"] == str(tmp_path / ".oh-my-zsh")


def test_framework_installer_keeps_existing_zshrc(tmp_path: Path):
    zshrc = tmp_path / ".zshrc"
    zshrc.write_text("alias gs='git status'\n")
    executor = CloningExecutor()

    install(shell.framework_item(executor, tmp_path))

    assert executor.envs[0]["KEEP_ZSHRC"] == "yes"
    assert executor.envs[0]["HOME"] == str(tmp_path)
    assert zshrc.read_text() == "alias gs='git status'\n"


def test_framework_installer_creates_zshrc_first(tmp_path: Path):
    executor = CloningExecutor()

    install(shell.framework_item(executor, tmp_path))

    assert (tmp_path / ".zshrc").read_text() == ""
    assert executor.envs[0]["KEEP_ZSHRC"] == "yes"


def test_plugins_cloned_once(tmp_path: Path):
    executor = CloningExecutor()
    plugins = {
        "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
        "zsh-completions": "https://github.com/zsh-users/zsh-completions",
    }
    items = shell.plugin_items(executor, tmp_path, plugins)

    first = install_batch(items)
    second = install_batch(items)

    assert [o.status for o in first] == [Outcome.INSTALLED, Outcome.INSTALLED]
    assert [o.status for o in second] == [Outcome.ALREADY_PRESENT, Outcome.ALREADY_PRESENT]
    assert executor.commands[0] == [
        "git",
        "clone",
        "--depth",
        "1",
        "https://github.com/zsh-users/zsh-autosuggestions",
        str(tmp_path / ".oh-my-zsh" / "custom" / "plugins" / "zsh-autosuggestions"),
    ]


def test_login_shell_already_zsh(monkeypatch):
    monkeypatch.setattr(shell.pwd, "getpwnam", lambda user: SimpleNamespace(pw_shell="/usr/bin/zsh"))
    executor = CloningExecutor()

    outcome = install(shell.LoginShell(executor, "me").item())

    assert outcome.status is Outcome.ALREADY_PRESENT


def test_login_shell_changed_with_chsh(monkeypatch):
    monkeypatch.setattr(shell.pwd, "getpwnam", lambda user: SimpleNamespace(pw_shell="/bin/bash"))
    executor = CloningExecutor()

    outcome = install(shell.LoginShell(executor, "me").item())

    assert outcome.status is Outcome.INSTALLED
    assert executor.commands == [["sudo", "chsh", "-s", "/usr/bin/zsh", "me"]]


def test_login_shell_fails_without_zsh(monkeypatch):
    monkeypatch.setattr(shell.pwd, "getpwnam", lambda user: SimpleNamespace(pw_shell="/bin/bash"))
    executor = CloningExecutor(zsh_path=None)

    outcome = install(shell.LoginShell(executor, "me").item())

    assert outcome.status is Outcome.FAILED
    assert "zsh is not installed" in outcome.details
