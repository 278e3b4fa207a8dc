# Services
from .project_service import ProjectService
from .validator import ProjectValidator, Valid, Invalid

__all__ = ["ProjectService", "ProjectValidator", "Valid", "Invalid"]
