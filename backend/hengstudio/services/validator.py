"""
Project Validator

Schema checks for incoming project payloads.

Results are tagged values rather than exceptions so callers can render
per-field feedback:

    result = validator.validate_create(payload)
    if isinstance(result, Invalid):
        return render(result.issues)
    project = result.value.to_project()
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..schemas.project import ProjectCreate, ProjectUpdate

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Valid(Generic[T]):
    """Payload passed every rule."""
    value: T


@dataclass(frozen=True)
class Invalid:
    """Payload failed; issues are {path, message} dicts."""
    issues: List[Dict[str, str]] = field(default_factory=list)


ValidationResult = Union[Valid[T], Invalid]


def _issues_from(error: ValidationError) -> List[Dict[str, str]]:
    issues = []
    for err in error.errors():
        path = ".".join(str(part) for part in err["loc"])
        message = err["msg"]
        # pydantic prefixes custom ValueError messages
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        issues.append({"path": path, "message": message})
    return issues


class ProjectValidator:
    """Validates create (full) and update (partial) project payloads."""

    def _validate(self, schema: type, payload: Any) -> ValidationResult:
        try:
            return Valid(schema.model_validate(payload))
        except ValidationError as e:
            return Invalid(_issues_from(e))

    def validate_create(self, payload: Any) -> ValidationResult[ProjectCreate]:
        return self._validate(ProjectCreate, payload)

    def validate_update(self, payload: Any) -> ValidationResult[ProjectUpdate]:
        return self._validate(ProjectUpdate, payload)
