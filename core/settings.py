import os
import sys

# ==============================================================================
# XML NAMESPACES
# ==============================================================================
XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
SVRL_NAMESPACE = "http://purl.oclc.org/dsdl/svrl"
CATALOG_NAMESPACE = "urn:oasis:names:tc:entity:xmlns:xml:catalog"

XSD_SCHEMA_TAG = f"{{{XSD_NAMESPACE}}}schema"
XSI_SCHEMA_LOCATION = f"{{{XSI_NAMESPACE}}}schemaLocation"
XSI_NO_NAMESPACE_SCHEMA_LOCATION = f"{{{XSI_NAMESPACE}}}noNamespaceSchemaLocation"

# ==============================================================================
# PATH HANDLING
# ==============================================================================
# URI schemes that need the network to resolve
REMOTE_SCHEMES = ("http", "https", "ftp")

# Patterns match case-insensitively on Windows
IS_WINDOWS = sys.platform.startswith("win") or os.name == "nt"

# Directories skipped by wildcard segments (same defaults as Ant's scanner)
DEFAULT_EXCLUDES = frozenset({".git", ".svn", ".hg", ".bzr", "CVS", "_darcs"})

# Several catalogs may be given in one -c argument
CATALOG_SEPARATOR = ";"

# ==============================================================================
# REMOTE RESOURCES
# ==============================================================================
# Off unless -r is given
DEFAULT_ALLOW_REMOTE_RESOURCES = False

# No timeout: a stalled fetch stalls the batch
REMOTE_FETCH_TIMEOUT = None

USER_AGENT = "crux-validator/1.0"

# ==============================================================================
# LOGGING
# ==============================================================================
LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# ==============================================================================
# CLI
# ==============================================================================
SAMPLE_CATALOG = """\
  <!DOCTYPE catalog PUBLIC "-//OASIS//DTD Entity Resolution XML Catalog V1.0//EN" "http://www.oasis-open.org/committees/entity/release/1.0/catalog.dtd">
  <catalog xmlns="urn:oasis:names:tc:entity:xmlns:xml:catalog">
    <system systemId="http://www.w3.org/1999/xlink.xsd" uri="local-schemas/xlink.xsd"/>
    <rewriteSystem systemIdStartString="http://schemas.opengis.net" rewritePrefix="local-schemas/net/opengis"/>
  </catalog>"""
