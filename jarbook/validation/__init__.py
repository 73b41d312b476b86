"""Validation package."""

from jarbook.validation.validator import SubmissionValidator

__all__ = ["SubmissionValidator"]
