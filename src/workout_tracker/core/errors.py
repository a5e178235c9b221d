# src/workout_tracker/core/errors.py

from __future__ import annotations


class ValidationError(ValueError):
    """Raised by store operations when a required field is empty or a field name is not editable."""
