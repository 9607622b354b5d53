from datetime import datetime
from pathlib import Path

from dotboot.executors import CommandResult, Executor
from dotboot.installer import install_batch
from dotboot.operations.extension import ExtensionCLI, backup_installed, extension_items
from dotboot.types import Outcome


class FakeEditor(Executor):
    """Pretends to be the editor CLI, keeping a set of installed ids."""

    def __init__(self, installed=(), fail=()):
        super().__init__()
        self.installed = set(installed)
        self.fail = set(fail)
        self.commands: list[list[str]] = []

    def run(self, command, **kwargs):  # type: ignore[override]
        cmd = list(command)
        self.commands.append(cmd)
        if "--list-extensions" in cmd:
            return CommandResult(cmd, "\n".join(sorted(self.installed)) + "\n", "", 0)
        ext = cmd[cmd.index("--install-extension") + 1]
        if ext in self.fail:
            return CommandResult(cmd, "", f"Extension '{ext}' not found.", 1)
        self.installed.add(ext)
        return CommandResult(cmd, f"Extension '{ext}' was successfully installed.", "", 0)


def test_extensions_skip_installed_case_insensitively():
    editor = FakeEditor(installed={"ms-python.python"})
    items = extension_items(ExtensionCLI(editor), ["MS-Python.Python", "golang.go"])
    report = install_batch(items)

    assert [(o.name, o.status) for o in report] == [
        ("MS-Python.Python", Outcome.ALREADY_PRESENT),
        ("golang.go", Outcome.INSTALLED),
    ]


def test_listing_fetched_once():
    editor = FakeEditor()
    install_batch(extension_items(ExtensionCLI(editor), ["a.one", "b.two", "c.three"]))

    listings = [cmd for cmd in editor.commands if "--list-extensions" in cmd]
    assert len(listings) == 1


def test_duplicate_extensions_are_dropped():
    items = extension_items(ExtensionCLI(FakeEditor()), ["ms-python.python", "golang.go", "ms-python.python"])
    assert [item.name for item in items] == ["ms-python.python", "golang.go"]


def test_remote_target_forwarded_verbatim():
    editor = FakeEditor()
    target = "dev-container+my container"
    report = install_batch(extension_items(ExtensionCLI(editor), ["golang.go"], target))

    assert report.outcomes[0].status is Outcome.INSTALLED
    assert editor.commands[-1] == ["cursor", "--install-extension", "golang.go", "--remote", target]
    assert editor.commands[0] == ["cursor", "--list-extensions", "--remote", target]


def test_failed_extension_recorded():
    editor = FakeEditor(fail={"bad.ext"})
    report = install_batch(extension_items(ExtensionCLI(editor), ["bad.ext", "golang.go"]))

    assert [o.status for o in report] == [Outcome.FAILED, Outcome.INSTALLED]
    assert "not found" in report.outcomes[0].details


def test_backup_installed_writes_listing(tmp_path: Path):
    editor = FakeEditor(installed={"golang.go"})
    saved = backup_installed(ExtensionCLI(editor), tmp_path, datetime(2024, 1, 2, 3, 4, 5))

    assert saved == tmp_path / ".cursor-extensions-backup-20240102-030405" / "installed-extensions.txt"
    assert saved.read_text() == "golang.go\n"
