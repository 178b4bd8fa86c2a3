from enum import StrEnum

from loguru import logger


class Level(StrEnum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @property
    def no(self) -> int:
        """Severity number as registered with loguru."""
        return logger.level(self.value).no

    @classmethod
    def parse(cls, value: object) -> "Level":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ValueError(f"unknown log level: {value!r}")
