"""
Catalog
=======

Reads OASIS XML catalogs and maps system identifiers, public identifiers
and URIs to local replacements.

Supported entries: system, rewriteSystem, systemSuffix, public, uri,
rewriteURI, uriSuffix, nextCatalog and group (with xml:base).
Only local catalog files are read.
"""

import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

from lxml import etree

from core.errors import CatalogError
from core.settings import CATALOG_NAMESPACE, CATALOG_SEPARATOR
from managers.path_classifier import is_remote, join_location, to_local_path

logger = logging.getLogger(__name__)


def _tag(name: str) -> str:
    return f"{{{CATALOG_NAMESPACE}}}{name}"


def _longest_prefix(candidates: List[Tuple[str, str]], value: str) -> Optional[str]:
    best = None
    for start, prefix in candidates:
        if value.startswith(start) and (best is None or len(start) > len(best[0])):
            best = (start, prefix)
    if best is None:
        return None
    return best[1] + value[len(best[0]):]


def _longest_suffix(candidates: List[Tuple[str, str]], value: str) -> Optional[str]:
    best = None
    for suffix, uri in candidates:
        if value.endswith(suffix) and (best is None or len(suffix) > len(best[0])):
            best = (suffix, uri)
    return best[1] if best else None


class XMLCatalog:
    """A single catalog file plus the catalogs it chains to."""

    def __init__(self, location: str):
        self.location = location
        self.system: Dict[str, str] = {}
        self.rewrite_system: List[Tuple[str, str]] = []
        self.system_suffix: List[Tuple[str, str]] = []
        self.public: Dict[str, str] = {}
        self.uri: Dict[str, str] = {}
        self.rewrite_uri: List[Tuple[str, str]] = []
        self.uri_suffix: List[Tuple[str, str]] = []
        self.next_catalogs: List["XMLCatalog"] = []

    @classmethod
    def load(cls, location: str, _seen: Optional[set] = None) -> "XMLCatalog":
        """
        Parse a catalog file.

        Args:
            location: Local path or file: URI

        Raises:
            CatalogError: if the file is remote, missing or malformed
        """
        if is_remote(location):
            raise CatalogError(location, "remote catalog files are not supported")
        path = to_local_path(location)
        if not os.path.isfile(path):
            raise CatalogError(location, "file not found")

        seen = _seen if _seen is not None else set()
        seen.add(os.path.abspath(path))

        parser = etree.XMLParser(
            no_network=True, load_dtd=False, resolve_entities=False
        )
        try:
            root = etree.parse(path, parser).getroot()
        except (etree.XMLSyntaxError, OSError) as e:
            raise CatalogError(location, str(e)) from e

        if root.tag != _tag("catalog"):
            raise CatalogError(location, f"unexpected root element {root.tag}")

        catalog = cls(path)
        catalog._read_entries(root, seen)
        return catalog

    def _read_entries(self, root: etree._Element, seen: set) -> None:
        for entry in root.iter(etree.Element):
            name = etree.QName(entry).localname
            # entry.base honors xml:base on the entry and its groups
            base = entry.base or self.location

            def local(attr: str) -> str:
                value = entry.get(attr, "")
                joined = join_location(base, value)
                # normpath drops the trailing slash of rewrite prefixes
                if value.endswith("/") and not joined.endswith("/"):
                    joined += "/"
                return joined

            if name == "system":
                self.system[entry.get("systemId", "")] = local("uri")
            elif name == "rewriteSystem":
                self.rewrite_system.append(
                    (entry.get("systemIdStartString", ""), local("rewritePrefix"))
                )
            elif name == "systemSuffix":
                self.system_suffix.append((entry.get("systemIdSuffix", ""), local("uri")))
            elif name == "public":
                self.public[" ".join(entry.get("publicId", "").split())] = local("uri")
            elif name == "uri":
                self.uri[entry.get("name", "")] = local("uri")
            elif name == "rewriteURI":
                self.rewrite_uri.append(
                    (entry.get("uriStartString", ""), local("rewritePrefix"))
                )
            elif name == "uriSuffix":
                self.uri_suffix.append((entry.get("uriSuffix", ""), local("uri")))
            elif name == "nextCatalog":
                next_location = local("catalog")
                if os.path.abspath(to_local_path(next_location)) in seen:
                    continue
                self.next_catalogs.append(XMLCatalog.load(next_location, seen))

    def lookup_system(self, system_id: str) -> Optional[str]:
        return (
            self.system.get(system_id)
            or _longest_prefix(self.rewrite_system, system_id)
            or _longest_suffix(self.system_suffix, system_id)
        )

    def lookup_uri(self, uri: str) -> Optional[str]:
        return (
            self.uri.get(uri)
            or _longest_prefix(self.rewrite_uri, uri)
            or _longest_suffix(self.uri_suffix, uri)
        )

    def lookup_public(self, public_id: str) -> Optional[str]:
        return self.public.get(" ".join(public_id.split()))

    def resolve(self, system_id: Optional[str], public_id: Optional[str] = None) -> Optional[str]:
        """
        Look up a replacement for an identifier.

        System ids are tried as system entries first and then as URI entries,
        because schema locations are declared either way in practice.
        """
        result = None
        if system_id:
            result = self.lookup_system(system_id) or self.lookup_uri(system_id)
        if result is None and public_id:
            result = self.lookup_public(public_id)
        if result is None:
            for next_catalog in self.next_catalogs:
                result = next_catalog.resolve(system_id, public_id)
                if result is not None:
                    break
        return result


class CatalogSet:
    """Catalogs consulted in order; the first match wins."""

    def __init__(self, catalogs: Sequence[XMLCatalog]):
        self.catalogs = list(catalogs)

    @classmethod
    def from_location(cls, location: Optional[str]) -> Optional["CatalogSet"]:
        """
        Load the catalogs named in a -c argument.

        Args:
            location: One or more catalog paths separated by ';'

        Returns:
            CatalogSet, or None when no location was given
        """
        if not location:
            return None
        paths = [p.strip() for p in location.split(CATALOG_SEPARATOR) if p.strip()]
        catalogs = [XMLCatalog.load(p) for p in paths]
        logger.debug("Loaded %d catalog(s) from %s", len(catalogs), location)
        return cls(catalogs)

    def resolve(self, system_id: Optional[str], public_id: Optional[str] = None) -> Optional[str]:
        for catalog in self.catalogs:
            result = catalog.resolve(system_id, public_id)
            if result is not None:
                return result
        return None

    def resolve_namespace(self, namespace: str) -> Optional[str]:
        """Schema location for a namespace, from 'uri' entries."""
        for catalog in self.catalogs:
            result = catalog.lookup_uri(namespace)
            if result is not None:
                return result
        return None
