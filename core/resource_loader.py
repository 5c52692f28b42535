"""
Resource Loader
===============

Loads documents, schemas and rule files, and decides whether schema
resolution may use the network.

Every parser handed out here is created with no_network=True and carries a
resolver that applies the catalog and the remote-resource policy to each
include, import or external entity. Blocked and failed fetches never raise
inside libxml2; they are recorded on the LoadContext so the validators can
report them.

Targets named by the user as remote URIs are always fetched: asking for
them is an explicit opt-in, unlike a schema import found inside a document.
"""

import io
import logging
from typing import List, Optional

import requests
from lxml import etree

from core.catalog import CatalogSet
from core.errors import (
    DocumentLoadError,
    InfrastructureError,
    RemoteResourceBlockedError,
    ResourceFetchError,
    SchemaLoadError,
)
from core.models import BatchRequest, ValidationTarget
from core.settings import (
    DEFAULT_ALLOW_REMOTE_RESOURCES,
    REMOTE_FETCH_TIMEOUT,
    USER_AGENT,
)
from managers.path_classifier import is_local, is_remote, to_local_path

logger = logging.getLogger(__name__)


class ResourceLoader:
    """
    Batch-wide loading policy: catalog, remote-resource flag and HTTP session.

    The policy is fixed at construction and read by every LoadContext.
    """

    def __init__(
        self,
        catalog: Optional[CatalogSet] = None,
        allow_remote_resources: bool = DEFAULT_ALLOW_REMOTE_RESOURCES,
        session: Optional[requests.Session] = None,
    ):
        self.catalog = catalog
        self.allow_remote_resources = allow_remote_resources
        self._session = session

    @classmethod
    def for_request(
        cls, request: BatchRequest, session: Optional[requests.Session] = None
    ) -> "ResourceLoader":
        """
        Build the loader for a batch.

        Raises:
            CatalogError: if a catalog file cannot be read
        """
        catalog = CatalogSet.from_location(request.catalog_location)
        if not request.allow_remote_resources:
            logger.info("Offline mode enabled, schema resolution will only use local files")
        return cls(
            catalog=catalog,
            allow_remote_resources=request.allow_remote_resources,
            session=session,
        )

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers["User-Agent"] = USER_AGENT
        return self._session

    def map(self, system_id: Optional[str], public_id: Optional[str] = None) -> Optional[str]:
        """Catalog replacement for an identifier, or the identifier itself."""
        if self.catalog is not None:
            mapped = self.catalog.resolve(system_id, public_id)
            if mapped is not None:
                logger.debug("Catalog mapped %s to %s", system_id or public_id, mapped)
                return mapped
        return system_id

    def map_namespace(self, namespace: str) -> Optional[str]:
        if self.catalog is None or not namespace:
            return None
        return self.catalog.resolve_namespace(namespace)

    def fetch(self, url: str) -> bytes:
        """
        Download a remote resource.

        Raises:
            ResourceFetchError: on connection problems or an error status
        """
        logger.debug("Fetching %s", url)
        try:
            response = self.session.get(url, timeout=REMOTE_FETCH_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ResourceFetchError(url, str(e)) from e
        return response.content

    def open_context(self) -> "LoadContext":
        return LoadContext(self)


class LoadContext:
    """
    Loading state for one document: a parser and the resource issues met
    while parsing it and compiling its schema.
    """

    def __init__(self, loader: ResourceLoader):
        self.loader = loader
        self.issues: List[InfrastructureError] = []
        self.parser = etree.XMLParser(no_network=True)
        self.parser.resolvers.add(CatalogResolver(self))

    def note(self, issue: InfrastructureError) -> None:
        logger.warning("%s", issue)
        self.issues.append(issue)

    def parse_bytes(self, data: bytes, base_url: str) -> etree._ElementTree:
        return etree.parse(io.BytesIO(data), self.parser, base_url=base_url)

    def parse_string(self, text: str, base_url: Optional[str] = None) -> etree._ElementTree:
        return self.parse_bytes(text.encode("utf-8"), base_url)

    def load_document(self, target: ValidationTarget) -> etree._ElementTree:
        """
        Load a document named by the user.

        Raises:
            DocumentLoadError: if it cannot be read, fetched or parsed
        """
        try:
            if target.is_local:
                return etree.parse(target.location, self.parser)
            return self.parse_bytes(self.loader.fetch(target.location), target.location)
        except ResourceFetchError as e:
            raise DocumentLoadError(target.location, e.reason) from e
        except (etree.XMLSyntaxError, OSError) as e:
            raise DocumentLoadError(target.location, str(e)) from e

    def load_resource(self, location: str) -> etree._ElementTree:
        """
        Load a resource a document refers to, such as its schema.

        Raises:
            RemoteResourceBlockedError: if it is remote and remote resources are off
            ResourceFetchError: if fetching it failed
            SchemaLoadError: if it cannot be read or parsed
        """
        mapped = self.loader.map(location)
        try:
            if is_remote(mapped):
                if not self.loader.allow_remote_resources:
                    raise RemoteResourceBlockedError(mapped)
                return self.parse_bytes(self.loader.fetch(mapped), mapped)
            return etree.parse(to_local_path(mapped), self.parser)
        except (etree.XMLSyntaxError, OSError) as e:
            raise SchemaLoadError(location, str(e)) from e


class CatalogResolver(etree.Resolver):
    """
    Resolves includes, imports and external entities through the catalog,
    fetching remote ones only when the policy allows it.
    """

    def __init__(self, load_context: LoadContext):
        super().__init__()
        self.load_context = load_context

    def resolve(self, system_url, public_id, context):
        loader = self.load_context.loader
        mapped = loader.map(system_url, public_id)
        if mapped is None:
            return None

        if is_local(mapped):
            if mapped == system_url:
                # plain local file, libxml2 reads it
                return None
            return self.resolve_filename(to_local_path(mapped), context)

        if not loader.allow_remote_resources:
            self.load_context.note(RemoteResourceBlockedError(mapped))
            return self.resolve_string("", context, base_url=mapped)

        try:
            data = loader.fetch(mapped)
        except ResourceFetchError as e:
            self.load_context.note(e)
            return self.resolve_string("", context, base_url=mapped)
        return self.resolve_string(data, context, base_url=mapped)
