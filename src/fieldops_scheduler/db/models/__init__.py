from .assignment import AssignmentTemplate
from .workforce import Building, ComplianceWindow, Worker

__all__ = [
    "AssignmentTemplate",
    "Building",
    "ComplianceWindow",
    "Worker",
]
