"""Pydantic models for queue, series and logging options."""

from pydantic import BaseModel, Field


class SeriesOptions(BaseModel):
    """Options for a series run."""

    parallel: int = Field(default=1, ge=1, description="Number of cooperative workers")
    collect: bool = Field(default=True, description="Collect action results in completion order")


class QueueOptions(BaseModel):
    """Options for a work queue."""

    parallel: int = Field(default=1, ge=1, description="Number of cooperative workers")
    infinite: bool = Field(default=False, description="Keep running after the pending items drain")
    collect: bool = Field(default=False, description="Collect action results in completion order")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str | None = Field(default=None, description="Directory for log files, console only when unset")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


class Config(BaseModel):
    """Root configuration for promiseutil."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    queues: dict[str, QueueOptions] = Field(default_factory=dict, description="Named queue options")

    model_config = {"extra": "forbid"}

    def queue(self, name: str) -> QueueOptions:
        """Return the options for a named queue, or defaults if it is not configured."""
        return self.queues.get(name, QueueOptions())
