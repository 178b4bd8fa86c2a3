from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .stream_logger import StreamLogger
from .trigger import RotationTrigger
from .writer import FileWriter, StderrWriter

# Registry key of the bootstrap logger; never a caller-chosen stream name
EARLY_NAME = "__early"


class Entry(BaseModel):
    """One registered stream: a name bound to its writer and logger."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    writer: FileWriter | StderrWriter | None = None  # None only for the sentinel
    logger: StreamLogger

    def close(self) -> None:
        self.logger.close()
        if self.writer is not None:
            self.writer.close()


class Unconfigured(BaseModel):
    """Bootstrap state: only the early logger exists."""

    model_config = ConfigDict(frozen=True)


class Configured(BaseModel):
    """Registry has a base directory and a rotation trigger."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    base_path: Path
    trigger: RotationTrigger
