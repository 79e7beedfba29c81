"""
Planner exceptions
Errors that are allowed to reach the caller. Parse problems in model output
are absorbed by the reconciler and never show up here.
"""

from typing import Optional


class PlannerError(Exception):
    """Base class for all planner errors"""


class ConfigurationError(PlannerError):
    """Missing or invalid configuration (model, API key, event details)"""


class TransportError(PlannerError):
    """The completion call did not return a successful response"""

    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body
        status = status_code if status_code is not None else "no response"
        super().__init__(f"OpenAI API returned error code: {status}: {body}")
