"""
Managers Package
================

Coordination layer that turns user input into validation targets.

Managers:
- PathClassifier: Local vs remote decision
- LocalPatternResolver: Wildcard expansion on the local filesystem
- TargetManager: Pattern to target list
"""

from .path_classifier import PathClassifier
from .pattern_resolver import LocalPatternResolver
from .target_manager import TargetManager

__all__ = [
    'PathClassifier',
    'LocalPatternResolver',
    'TargetManager',
]
