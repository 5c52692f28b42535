"""
Path Classifier
===============

Decides whether an input string is a local path or a remote resource.
Purely syntactic: nothing here touches the filesystem or the network.
"""

import os
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname

from core.models import ValidationTarget
from core.settings import REMOTE_SCHEMES


def is_remote(raw: str) -> bool:
    """True when raw is a URI with a network scheme and a host."""
    parsed = urlparse(raw)
    return parsed.scheme.lower() in REMOTE_SCHEMES and bool(parsed.netloc)


def is_local(raw: str) -> bool:
    return not is_remote(raw)


def is_file_uri(raw: str) -> bool:
    return urlparse(raw).scheme.lower() == "file"


def to_local_path(raw: str) -> str:
    """Turn a file: URI into a filesystem path; plain paths pass through."""
    if not is_file_uri(raw):
        return raw
    parsed = urlparse(raw)
    path = url2pathname(parsed.path)
    if parsed.netloc and parsed.netloc != "localhost":
        # UNC share
        path = f"//{parsed.netloc}{path}"
    return path


def join_location(base: str, reference: str) -> str:
    """
    Resolve a reference (e.g. a schemaLocation) against the document it came from.

    Args:
        base: Location of the referring document, local path or URI
        reference: Location as written in the document

    Returns:
        Absolute URI for remote bases, a normalized filesystem path otherwise
    """
    if is_remote(reference) or is_file_uri(reference):
        return reference
    if base and is_remote(base):
        return urljoin(base, reference)
    if not base or os.path.isabs(reference):
        return reference
    base_path = to_local_path(base)
    return os.path.normpath(os.path.join(os.path.dirname(base_path), reference))


class PathClassifier:
    """
    Classifier for raw input strings.

    Follows SRP: Only decides local vs remote.
    """

    def is_remote(self, raw: str) -> bool:
        return is_remote(raw)

    def classify(self, raw: str) -> ValidationTarget:
        """
        Classify a raw input string.

        Args:
            raw: Path or URI as given by the caller

        Returns:
            ValidationTarget; file: URIs become local paths
        """
        if is_remote(raw):
            return ValidationTarget(location=raw, is_local=False)
        return ValidationTarget(location=to_local_path(raw), is_local=True)
