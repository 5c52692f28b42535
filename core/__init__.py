"""
Core Package
============

Reusable building blocks shared by every layer.

Modules:
- settings: Constants and defaults
- errors: Exception hierarchy
- models: Targets, requests, failures and batch results
- catalog: OASIS XML catalog lookup
- resource_loader: Document loading and the remote-resource policy
"""
