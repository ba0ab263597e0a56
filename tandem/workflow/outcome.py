"""What a phase's work callable reports back to the orchestrator.

The work callable's return value is passed through to the caller untouched;
the orchestrator separately reads the fields below from it (when it is a
PhaseOutcome or a mapping) to fill the phase Report, the retrospective
record and the commit.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class PhaseOutcome(BaseModel):
    """Structured result of a phase's work.

    Example:
    ```python
    outcome = PhaseOutcome(
        files=["src/login.py"],
        summary="Login form implemented",
        insights="Form state belongs in the page, not the input",
    )
    ```
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    files: list[str] = Field(default_factory=list, description="Paths changed by the work")
    metrics: dict[str, Any] = Field(default_factory=dict)
    summary: str | None = None

    # Retrospective fields; any one of the first three triggers a learning record
    insights: str | None = None
    challenges: str | None = None
    solutions: str | None = None
    code_example: str | None = Field(default=None, alias="codeExample")
    constraints: str | None = None
    duration: str | None = None

    @property
    def has_learnings(self) -> bool:
        return bool(self.insights or self.challenges or self.solutions)

    @property
    def learnings(self) -> list[str]:
        """Non-empty retrospective fields as report lines."""
        labelled = [
            ("Insight", self.insights),
            ("Challenge", self.challenges),
            ("Solution", self.solutions),
        ]
        return [f"{label}: {text}" for label, text in labelled if text]

    @classmethod
    def coerce(cls, value: Any) -> "PhaseOutcome":
        """Read an outcome from whatever the work callable returned.

        Mappings are validated (unknown keys ignored). Fields whose values
        do not validate are dropped with a warning so an unexpected result
        shape never fails the phase. Anything else that is not already a
        PhaseOutcome yields an empty outcome.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            return cls()

        data = dict(value)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid outcome fields: {e.error_count()} error(s)")

        kept: dict[str, Any] = {}
        for name, info in cls.model_fields.items():
            for key in (name, info.alias):
                if key is None or key not in data:
                    continue
                try:
                    cls.model_validate({key: data[key]})
                except ValidationError:
                    logger.debug(f"Dropped outcome field {key!r}")
                    continue
                kept[key] = data[key]
        return cls.model_validate(kept)
