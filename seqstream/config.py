"""Reader configuration, with defaults taken from the environment."""

import os
from typing import Optional

from pydantic import BaseModel, field_validator

# Take the first whitespace-delimited token of a header as the ID
DEFAULT_ID_REGEXP = r"^([^\s]+)\s?"


class ReaderConfig(BaseModel):
    queue_capacity: int = 1     # chunks waiting for the consumer
    chunk_capacity: int = 1     # records per chunk
    id_pattern: str = ""        # "" selects DEFAULT_ID_REGEXP
    validate_seq: bool = True   # check symbols against the alphabet

    @field_validator("queue_capacity")
    @classmethod
    def _clamp_queue_capacity(cls, value: int) -> int:
        return max(value, 0)

    @field_validator("chunk_capacity")
    @classmethod
    def _clamp_chunk_capacity(cls, value: int) -> int:
        return max(value, 1)

    @property
    def id_regexp(self) -> str:
        return self.id_pattern or DEFAULT_ID_REGEXP

    def merged(self, queue_capacity: Optional[int] = None, chunk_capacity: Optional[int] = None,
               id_pattern: Optional[str] = None, validate_seq: Optional[bool] = None) -> "ReaderConfig":
        """Return a copy with every given (non-None) option replaced."""
        overrides = {
            "queue_capacity": queue_capacity,
            "chunk_capacity": chunk_capacity,
            "id_pattern": id_pattern,
            "validate_seq": validate_seq,
        }
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ReaderConfig(**values)


def _build_config() -> ReaderConfig:
    """
    Build config from environment variables.

    Raw strings are coerced by pydantic, so a bad value raises
    ValidationError naming the field.
    """
    return ReaderConfig(
        queue_capacity=os.environ.get("SEQSTREAM_QUEUE_CAPACITY", "1"),
        chunk_capacity=os.environ.get("SEQSTREAM_CHUNK_CAPACITY", "1"),
        id_pattern=os.environ.get("SEQSTREAM_ID_PATTERN", ""),
        validate_seq=os.environ.get("SEQSTREAM_VALIDATE", "true").strip().lower(),
    )


config = _build_config()
