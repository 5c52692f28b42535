"""
Services Package
================

Business logic layer for Crux.

Services:
- ValidationService: Batch validation workflow
"""

from .validation_service import ValidationService

__all__ = [
    'ValidationService',
]
