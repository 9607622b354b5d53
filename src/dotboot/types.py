from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Union

if TYPE_CHECKING:
    from .executors import CommandResult

RemoteTarget = Optional[str]
ExistsCheck = Callable[[], bool]
InstallAction = Callable[[RemoteTarget], Union[bool, "CommandResult", None]]


class Outcome(str, Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "present"
    FAILED = "failed"


class PatchStatus(str, Enum):
    PATCHED = "patched"
    ALREADY_PATCHED = "already-patched"
    FAILED = "failed"


@dataclass(frozen=True)
class InstallableItem:
    name: str
    exists: Optional[ExistsCheck]
    install: InstallAction
    target: RemoteTarget = None


@dataclass(frozen=True)
class ConfigPatch:
    path: Path
    marker: str
    content: str


@dataclass
class RunOutcome:
    name: str
    status: Outcome
    details: str = ""
    target: RemoteTarget = None


@dataclass
class PatchResult:
    path: Path
    status: PatchStatus
    backup: Optional[Path] = None
    details: str = ""


@dataclass
class Batch:
    name: str
    items: list[InstallableItem] = field(default_factory=list)
    requires: tuple[str, ...] = ()
