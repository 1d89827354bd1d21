"""
Error taxonomy for generation flows
All flow failures derive from FlowError and carry a human-readable message.
"""
from typing import Optional


class FlowError(Exception):
    """Terminal failure of a flow"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FeatureUnavailableError(FlowError):
    """A secret required by the feature is not configured"""

    status_code = 503


class MissingOutputError(FlowError):
    """The model returned no usable structured output"""

    status_code = 502


class OperationFailedError(FlowError):
    """A long-running remote job completed with an error"""

    status_code = 502


class OperationTimeoutError(FlowError):
    """A long-running remote job exceeded the polling bounds"""

    status_code = 504


class SceneGenerationError(FlowError):
    """A required per-scene stage failed"""

    status_code = 502

    def __init__(self, stage: str, scene_index: int, reason: str):
        self.stage = stage
        self.scene_index = scene_index
        self.reason = reason
        super().__init__(f"{stage.capitalize()} generation failed for scene {scene_index + 1}: {reason}")


class AssistantError(FlowError):
    status_code = 502

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "The assistant encountered an error. Please try again.")


class StudentNotFoundError(FlowError):
    status_code = 404

    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(f"Student {student_id} not found")
