"""
Logging Configuration.
"""

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RelaylogSettings(BaseSettings):
    """Router configuration read from ``RELAYLOG_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="RELAYLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    directory: str = Field(default="logs", description="Root log directory; a dated subdirectory is added")
    name: str = Field(default="relaylog", description="Base file name of the stream logs")
    detailed: bool = Field(default=False, description="Also configure the detailed stream")
    main_level: LogLevel = Field(default=LogLevel.INFO, description="Main stream level")
    detailed_level: LogLevel = Field(default=LogLevel.DEBUG, description="Detailed and compilation stream level")
    console_level_width: int = Field(default=8, description="Console level column width")
    console_caller_width: int = Field(default=24, description="Console caller column width")
    console_separator: str = Field(default=" | ", description="Console column separator")

    def console_options(self) -> dict[str, object]:
        return {
            "level_width": self.console_level_width,
            "caller_width": self.console_caller_width,
            "separator": self.console_separator,
        }
