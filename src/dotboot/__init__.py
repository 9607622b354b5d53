"""dotboot environment bootstrapping toolkit."""

from .installer import install, install_batch
from .patcher import apply_patch
from .report import RunReport, summarize
from .runner import Bootstrapper

__all__ = ["Bootstrapper", "RunReport", "apply_patch", "install", "install_batch", "summarize"]
