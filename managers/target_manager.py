"""
Target Manager
==============

Turns user-supplied patterns into validation targets.
Follows SRP: Only coordinates classification and pattern expansion.
"""

import logging
from typing import List, Optional

from core.models import ValidationTarget
from managers.path_classifier import PathClassifier
from managers.pattern_resolver import LocalPatternResolver

logger = logging.getLogger(__name__)


class TargetManager:
    """
    Manager responsible for building the work list.

    Local patterns are expanded against the filesystem; remote URIs
    become a single target each.
    """

    def __init__(
        self,
        classifier: Optional[PathClassifier] = None,
        resolver: Optional[LocalPatternResolver] = None,
    ):
        """
        Initialize target manager.

        Args:
            classifier: Path classifier (dependency injection)
            resolver: Local pattern resolver (dependency injection)
        """
        self.classifier = classifier or PathClassifier()
        self.resolver = resolver or LocalPatternResolver()

    def expand(self, pattern: str) -> List[ValidationTarget]:
        """
        Expand one pattern.

        Args:
            pattern: Local pattern or remote URI

        Returns:
            Targets in match order

        Raises:
            UnsupportedPathError: if a local pattern uses '..'
            PatternNotFoundError: if a local pattern matches nothing
        """
        target = self.classifier.classify(pattern)
        if not target.is_local:
            return [target]

        paths = self.resolver.resolve(target.location)
        logger.debug("Pattern %s matched %d file(s)", pattern, len(paths))
        return [ValidationTarget(location=path, is_local=True) for path in paths]
