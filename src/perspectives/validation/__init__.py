# Copyright 2026 Perspectives Contributors
# SPDX-License-Identifier: Apache-2.0

"""Consistency checks for parsed collections (missing roles, binding cycles, etc.)."""

from perspectives.validation.checks import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate,
)

__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate",
]
