"""
Validators Package
==================

This package contains all XML validation logic:
- XSD schema validation
- Schematron rule validation
- Batch orchestration

Modules:
- validation_pipeline.py: Main validation orchestrator
- schema_validator.py: XML Schema validation of one target
- schematron_validator.py: Schematron validation of one target
"""

from .schema_validator import SchemaValidator
from .schematron_validator import SchematronValidator
from .validation_pipeline import ValidationPipeline

__all__ = ['SchemaValidator', 'SchematronValidator', 'ValidationPipeline']
