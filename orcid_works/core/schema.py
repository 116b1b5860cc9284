"""XML Schema validation of generated work documents."""

import logging
from pathlib import Path

from lxml import etree

from orcid_works.core.config import SCHEMA_PATH
from orcid_works.core.errors import SchemaArtifactMissing

logger = logging.getLogger(__name__)


class SchemaValidator:
    """Validate XML against a work XSD, compiling the schema on first use."""

    def __init__(self, schema_path: str | Path = SCHEMA_PATH):
        self.schema_path = Path(schema_path)
        self._schema: etree.XMLSchema | None = None

    @property
    def schema(self) -> etree.XMLSchema:
        if self._schema is None:
            self._schema = self._load()
        return self._schema

    def _load(self) -> etree.XMLSchema:
        logger.debug("Loading XML schema %s", self.schema_path)
        try:
            # Parse from the path so relative xs:import locations resolve.
            schema_doc = etree.parse(str(self.schema_path))
            return etree.XMLSchema(schema_doc)
        except (OSError, etree.XMLSyntaxError, etree.XMLSchemaParseError) as exc:
            raise SchemaArtifactMissing(
                f"Cannot load XML schema {self.schema_path}: {exc}"
            ) from exc

    def validate(self, xml: str | bytes | None) -> list[str]:
        """Return schema error messages for ``xml``; an empty list means valid."""
        schema = self.schema
        if not xml:
            return ["No XML document to validate"]

        if isinstance(xml, str):
            xml = xml.encode("utf-8")
        try:
            doc = etree.fromstring(xml)
        except etree.XMLSyntaxError as exc:
            return [f"XML is not well-formed: {exc}"]

        if schema.validate(doc):
            return []
        return [f"line {e.line}: {e.message}" for e in schema.error_log]
