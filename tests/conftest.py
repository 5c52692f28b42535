"""Shared fixtures: sample schemas, documents and rule files written to tmp_path."""

from pathlib import Path
from typing import Callable, Dict, Optional

import pytest
import requests

from core.resource_loader import ResourceLoader

NOTE_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="note">
    <xs:complexType>
      <xs:sequence>
        <xs:element name="to" type="xs:string"/>
        <xs:element name="priority" type="xs:positiveInteger"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

BROKEN_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">
  <xs:element name="note" type="xs:noSuchType"/>
</xs:schema>
"""

NOTE_RULES = """<?xml version="1.0" encoding="UTF-8"?>
<schema xmlns="http://purl.oclc.org/dsdl/schematron">
  <pattern>
    <rule context="note">
      <assert test="to != 'Nobody'">A note must be addressed to somebody</assert>
    </rule>
  </pattern>
</schema>
"""

MAIN_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:ext="urn:example:ext"
           targetNamespace="urn:example:main"
           elementFormDefault="qualified">
  <xs:import namespace="urn:example:ext" schemaLocation="http://schemas.example.com/ext.xsd"/>
  <xs:element name="doc">
    <xs:complexType>
      <xs:sequence>
        <xs:element ref="ext:item"/>
      </xs:sequence>
    </xs:complexType>
  </xs:element>
</xs:schema>
"""

EXT_XSD = """<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           targetNamespace="urn:example:ext"
           elementFormDefault="qualified">
  <xs:element name="item" type="xs:string"/>
</xs:schema>
"""

EXT_XSD_URL = "http://schemas.example.com/ext.xsd"

MAIN_DOC = """<?xml version="1.0" encoding="UTF-8"?>
<doc xmlns="urn:example:main" xmlns:ext="urn:example:ext"
     xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
     xsi:schemaLocation="urn:example:main main.xsd">
  <ext:item>hello</ext:item>
</doc>
"""


def note_document(to: str = "Bob", priority: str = "1", schema: str = "note.xsd") -> str:
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<note xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"
      xsi:noNamespaceSchemaLocation="{schema}">
  <to>{to}</to>
  <priority>{priority}</priority>
</note>
"""


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Stands in for requests.Session; records every URL asked for."""

    def __init__(self, responses: Optional[Dict[str, str]] = None):
        self.responses = responses or {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        if url not in self.responses:
            raise requests.ConnectionError(f"no route to {url}")
        return FakeResponse(self.responses[url].encode("utf-8"))


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write(workspace: Path) -> Callable[[str, str], Path]:
    """Write a file below the workspace, creating directories."""

    def _write(relative: str, content: str = "") -> Path:
        path = workspace / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def note_files(write) -> Callable[..., Path]:
    """Writes note.xsd once and returns a writer for note documents."""
    write("note.xsd", NOTE_XSD)

    def _note(name: str, to: str = "Bob", priority: str = "1") -> Path:
        return write(name, note_document(to=to, priority=priority))

    return _note


@pytest.fixture
def rules_file(write) -> Path:
    return write("rules.sch", NOTE_RULES)


@pytest.fixture
def remote_import_files(write) -> Path:
    """main.xsd imports ext.xsd from a remote URL; ext.xsd also exists locally."""
    write("main.xsd", MAIN_XSD)
    write("ext.xsd", EXT_XSD)
    return write("doc.xml", MAIN_DOC)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def offline_loader(fake_session: FakeSession) -> ResourceLoader:
    return ResourceLoader(allow_remote_resources=False, session=fake_session)


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    """Build a fake session serving the given URL -> text mapping."""
    return FakeSession


@pytest.fixture
def remote_ext_schema() -> Dict[str, str]:
    """The remote schema main.xsd imports, as a fake session would serve it."""
    return {EXT_XSD_URL: EXT_XSD}


@pytest.fixture
def broken_schema(write) -> Path:
    return write("broken.xsd", BROKEN_XSD)
