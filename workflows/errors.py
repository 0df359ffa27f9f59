"""Error taxonomy for analysis workflow runs.

This module has no imports from the rest of the project so that stages,
analysis helpers, and the orchestrator can all share it.
"""


class WorkflowError(Exception):
    """Base class for errors raised while running an analysis workflow."""

    pass


class NoDataAvailableError(WorkflowError):
    """The news source returned nothing for the subject."""

    pass


class MissingUpstreamDataError(WorkflowError):
    """A stage found no usable output from the stage before it."""

    pass


class ExternalCallError(WorkflowError):
    """A collaborator call (news source, model service) failed and the run must stop."""

    def __init__(self, message: str, collaborator: str | None = None) -> None:
        super().__init__(message)
        self.collaborator = collaborator


class MalformedModelOutputError(WorkflowError):
    """A model reply did not contain a usable JSON object.

    Recovered inside the sentiment stage; never aborts a run.
    """

    pass


class StageFailedError(WorkflowError):
    """Raised by the orchestrator when a stage returns a failure result."""

    def __init__(self, stage_name: str, message: str) -> None:
        super().__init__(message)
        self.stage_name = stage_name
