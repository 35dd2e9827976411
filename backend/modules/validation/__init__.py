"""
modules/validation package — data quality guards before content reaches the planner.
"""
from modules.validation.ingestion_validator import (
    ValidationResult,
    validate_place,
    filter_valid,
)

__all__ = [
    "ValidationResult",
    "validate_place",
    "filter_valid",
]
