from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """How a failed generation call is classified"""
    NOT_FOUND = "not_found"
    OTHER = "other"


class ProviderError(Exception):
    """Raised when the provider cannot be reached (e.g. while listing models)"""


class GenerationError(Exception):
    """A generation call failed"""

    kind = ErrorKind.OTHER

    def __init__(self, message: str, model: Optional[str] = None):
        super().__init__(message)
        self.model = model


class ModelNotFoundError(GenerationError):
    """The model identifier is unknown or unsupported for this API key"""

    kind = ErrorKind.NOT_FOUND
