from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union
import os
import shutil
import subprocess


@dataclass
class CommandResult:
    command: list[str]
    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Executor:
    """Base executor abstraction used by item sources and the patcher."""

    def __init__(self, *, dry_run: bool = False, timeout: Optional[float] = None):
        self.dry_run = dry_run
        self.timeout = timeout

    def run(
        self,
        command: Sequence[str],
        *,
        check: bool = True,
        mutable: bool = True,
        env: Optional[dict[str, str]] = None,
        cwd: Optional[Union[str, Path]] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        """Run ``command`` and optionally skip it during dry-runs."""

        cmd_list = list(command)
        if self.dry_run and mutable:
            return CommandResult(cmd_list, "", "skipped (dry-run)", 0)

        exec_env = None
        if env:
            exec_env = os.environ.copy()
            exec_env.update(env)

        proc = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            check=False,
            env=exec_env,
            cwd=str(cwd) if cwd is not None else None,
            timeout=timeout if timeout is not None else self.timeout,
        )
        if check and proc.returncode != 0:
            raise subprocess.CalledProcessError(
                proc.returncode,
                cmd_list,
                proc.stdout,
                proc.stderr,
            )
        return CommandResult(cmd_list, proc.stdout, proc.stderr, proc.returncode)

    def which(self, binary: str) -> Optional[str]:
        return shutil.which(binary)

    # File primitives -----------------------------------------------------
    def read_file(self, path: Path) -> Optional[str]:
        raise NotImplementedError

    def touch(self, path: Path) -> bool:
        raise NotImplementedError

    def append_file(self, path: Path, content: str) -> None:
        raise NotImplementedError

    def copy_file(self, source: Path, destination: Path) -> None:
        raise NotImplementedError


class LocalExecutor(Executor):
    """Executor that acts directly on the local host."""

    def read_file(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8", errors="surrogateescape")
        except FileNotFoundError:
            return None

    def touch(self, path: Path) -> bool:
        if path.exists():
            return False
        if self.dry_run:
            return True
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a"):
            pass
        return True

    def append_file(self, path: Path, content: str) -> None:
        if self.dry_run:
            return
        with path.open("a", encoding="utf-8", errors="surrogateescape") as handle:
            handle.write(content)

    def copy_file(self, source: Path, destination: Path) -> None:
        if self.dry_run:
            return
        # ``copy2`` keeps the mtime so backups sort next to their source.
        shutil.copy2(source, destination)
