"""Registry of named log streams that reopen together on a rotation signal."""

from .enums import Level
from .errors import LogHandleError, NotConfiguredError, ReservedNameError
from .models import EARLY_NAME, Entry
from .registry import Registry
from .reopen import CoordinatorState, ReopenCoordinator
from .stream_logger import StreamLogger
from .trigger import RotationTrigger
from .writer import FileWriter, StderrWriter

__all__ = [
    "EARLY_NAME",
    "CoordinatorState",
    "Entry",
    "FileWriter",
    "Level",
    "LogHandleError",
    "NotConfiguredError",
    "Registry",
    "ReopenCoordinator",
    "ReservedNameError",
    "RotationTrigger",
    "StderrWriter",
    "StreamLogger",
]
