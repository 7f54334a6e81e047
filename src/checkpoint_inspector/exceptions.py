"""Custom exceptions for checkpoint inspection."""


class CheckpointError(Exception):
    """Base exception for all checkpoint inspection errors."""

    pass


class MetadataReadError(CheckpointError):
    """Raised when config, spec or status metadata cannot be read."""

    pass


class ClassificationError(CheckpointError):
    """Raised when the container engine behind a checkpoint is unknown."""

    def __init__(self, manager: str) -> None:
        self.manager = manager
        super().__init__(f"unknown container manager found: {manager}")


class MetadataParseError(CheckpointError):
    """Raised when an engine specific metadata payload cannot be decoded."""

    pass


class TraversalError(CheckpointError):
    """Raised when walking a checkpoint directory fails."""

    pass


class StatisticsError(CheckpointError):
    """Raised when CRIU dump statistics cannot be retrieved."""

    pass
