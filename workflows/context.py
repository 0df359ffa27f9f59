"""Immutable carrier of stage outputs for one workflow run."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class AnalysisContext:
    """
    What every stage sees: the run's ids and the payloads of earlier stages.

    Instances never change. ``with_output`` returns a new context with one more
    stage payload folded in, so a stage cannot alter what its siblings produced.
    """

    analysis_id: str
    subject: str
    outputs: Mapping[str, Mapping[str, Any]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        if not self.analysis_id or not self.analysis_id.strip():
            raise ValueError("analysis_id cannot be empty")
        if not self.subject or not self.subject.strip():
            raise ValueError("subject cannot be empty")
        object.__setattr__(self, "subject", self.subject.strip().upper())
        frozen = {name: MappingProxyType(dict(payload)) for name, payload in self.outputs.items()}
        object.__setattr__(self, "outputs", MappingProxyType(frozen))

    def with_output(self, stage_name: str, payload: Mapping[str, Any] | None) -> "AnalysisContext":
        """Return a new context that also holds ``payload`` under ``stage_name``."""
        outputs = dict(self.outputs)
        outputs[stage_name] = payload or {}
        return AnalysisContext(self.analysis_id, self.subject, outputs)

    def output(self, stage_name: str) -> Mapping[str, Any] | None:
        """Payload recorded for ``stage_name``, or None when that stage has not run."""
        return self.outputs.get(stage_name)
