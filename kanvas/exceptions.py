"""Error taxonomy shared by the editor core, the collaborator client and the API"""
from typing import List, Optional


class KanvasError(Exception):
    """Base class for every error raised by this package"""


class ValidationError(KanvasError):
    """Input rejected before any network call.

    ``field`` names the offending form field so the caller can show the
    message next to it.
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def to_dict(self):
        return {"field": self.field, "message": self.message}


class ElementValidationError(ValidationError):
    """A new element or an element patch does not satisfy the element model"""


class ElementCollectionError(KanvasError):
    """An element collection breaks the parent/children contract"""

    def __init__(self, problems: List[str]):
        super().__init__("; ".join(problems))
        self.problems = problems


class CollaboratorError(KanvasError):
    """A collaborator endpoint answered with success=false or could not be reached"""

    def __init__(self, endpoint: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.message = message
        self.status_code = status_code
