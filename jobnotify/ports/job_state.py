"""Job state records (DTOs) handed over by the build system."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = ["Phase", "ScmState", "BuildState", "JobState"]


class Phase(str, Enum):
    """Lifecycle point at which a notification is emitted."""

    QUEUED = "QUEUED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    FINALIZED = "FINALIZED"


class _Record(BaseModel):
    """Base for job state records.

    Attributes are snake_case in Python; the record's own field names are
    the camelCase aliases (``buildNumber``-style), accepted on input and
    used as XML tags.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class ScmState(_Record):
    url: str | None = None
    branch: str | None = None
    commit: str | None = None
    changes: list[str] = Field(default_factory=list)
    culprits: list[str] = Field(default_factory=list)


class BuildState(_Record):
    """State of a single build.

    Attributes:
        number: Build number.
        queue_id: Id of the queue item that produced the build.
        phase: Lifecycle phase being reported.
        status: Build result (SUCCESS, FAILURE, ...), absent while running.
        timestamp: Start time, epoch milliseconds.
        duration: Duration in milliseconds.
        url: Build URL relative to the server root.
        full_url: Absolute build URL.
        display_name: Human readable build name.
        parameters: Build parameters.
        log: Tail of the console log.
        notes: Free-form notes.
        artifacts: Archived artifacts, by name then by location kind.
        scm: Source control information.
    """

    number: int
    queue_id: int | None = None
    phase: Phase
    status: str | None = None
    timestamp: int | None = None
    duration: int | None = None
    url: str | None = None
    full_url: str | None = None
    display_name: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    log: str | None = None
    notes: str | None = None
    artifacts: dict[str, dict[str, str]] = Field(default_factory=dict)
    scm: ScmState | None = None


class JobState(_Record):
    """Job-level record serialized into the notification payload."""

    name: str
    display_name: str | None = None
    url: str | None = None
    build: BuildState
