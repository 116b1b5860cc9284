"""WorkRecord: DOI metadata mapped to an ORCID work, with citation and validation."""

import logging

from orcid_works.api.orcid import ApiResponse, OrcidApi
from orcid_works.core.config import Settings, get_settings
from orcid_works.core.errors import IncompleteMetadata, SubmissionFailure
from orcid_works.core.schema import SchemaValidator
from orcid_works.exporters.bibtex import work_citation
from orcid_works.exporters.work_xml import build_work_xml
from orcid_works.metadata.dates import DateResolver
from orcid_works.metadata.models import Contributor, PublicationDate
from orcid_works.metadata.names import NameResolver
from orcid_works.metadata.resolver import MetadataResolver, normalize_doi
from orcid_works.metadata.work_types import WorkTypeMapper

logger = logging.getLogger(__name__)


class WorkRecord:
    """One DOI as an ORCID work for one ORCID iD.

    Metadata is fetched on first access and kept for the lifetime of the
    instance. Validation errors are cached until the put-code changes.
    Collaborators can be passed in; each instance otherwise builds its own,
    so instances share no state.
    """

    def __init__(
        self,
        doi: str,
        orcid: str,
        access_token: str | None = None,
        *,
        put_code: int | None = None,
        settings: Settings | None = None,
        resolver: MetadataResolver | None = None,
        names: NameResolver | None = None,
        dates: DateResolver | None = None,
        types: WorkTypeMapper | None = None,
        validator: SchemaValidator | None = None,
        api: OrcidApi | None = None,
    ):
        self.doi = normalize_doi(doi) if doi else doi
        self.orcid = orcid
        self.access_token = access_token
        self._validation_errors: list[str] | None = None
        self._put_code = put_code

        self.settings = settings or get_settings()
        self.resolver = resolver or MetadataResolver(self.settings)
        self.names = names or NameResolver()
        self.dates = dates or DateResolver()
        self.types = types or WorkTypeMapper()
        self.validator = validator or SchemaValidator()
        self._api = api

        self._metadata: dict | None = None

    def __repr__(self) -> str:
        return f"WorkRecord(doi={self.doi!r}, orcid={self.orcid!r})"

    @property
    def put_code(self) -> int | None:
        return self._put_code

    @put_code.setter
    def put_code(self, value: int | None) -> None:
        # validation errors were computed against the old put-code attribute
        if value != self._put_code:
            self._validation_errors = None
        self._put_code = value

    # ── Metadata ─────────────────────────────────────────────────

    @property
    def metadata(self) -> dict:
        if self._metadata is None:
            self._metadata = self.resolver.fetch_metadata(self.doi)
        return self._metadata

    def _authors(self) -> list[dict]:
        authors = self.metadata.get("author") or []
        if isinstance(authors, dict):
            authors = [authors]
        return list(authors)

    # ── Derived Fields ───────────────────────────────────────────

    def contributors(self) -> list[Contributor]:
        return self.names.contributors(self._authors())

    def author_string(self) -> str:
        return self.names.author_string(self._authors())

    def title(self) -> str | None:
        return self.metadata.get("title") or None

    def container_title(self) -> str | None:
        return self.metadata.get("container-title") or None

    def description(self) -> str | None:
        description = self.metadata.get("description")
        if isinstance(description, (list, tuple)):
            description = description[0] if description else None
        return description or None

    def publication_date(self) -> PublicationDate:
        return self.dates.resolve(self.metadata.get("published"))

    def work_type(self) -> str:
        return self.types.lookup(self.metadata.get("type"), self.metadata.get("subtype"))

    def has_required_elements(self) -> bool:
        return bool(
            self.doi
            and self.contributors()
            and self.title()
            and self.container_title()
            and self.publication_date().year is not None
        )

    # ── Outputs ──────────────────────────────────────────────────

    def citation(self) -> str | None:
        """BibTeX citation on a single line, or None if required elements are missing."""
        if not self.has_required_elements():
            return None
        return work_citation(
            doi=self.doi,
            author=self.author_string(),
            title=self.title(),
            publisher=self.container_title(),
            year=self.publication_date().year,
        )

    def data(self) -> str | None:
        """ORCID work XML, or None if required elements are missing."""
        if not self.has_required_elements():
            return None
        return build_work_xml(
            doi=self.doi,
            title=self.title(),
            container_title=self.container_title(),
            description=self.description(),
            citation=self.citation(),
            work_type=self.work_type(),
            publication_date=self.publication_date(),
            contributors=self.contributors(),
            put_code=self.put_code,
        )

    def validation_errors(self) -> list[str]:
        if self._validation_errors is None:
            self._validation_errors = self.validator.validate(self.data())
        return self._validation_errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    # ── Submission ───────────────────────────────────────────────

    @property
    def api(self) -> OrcidApi:
        if self._api is None:
            if not self.access_token:
                raise SubmissionFailure("An access token is required to write to ORCID")
            self._api = OrcidApi(self.orcid, self.access_token, self.settings)
        return self._api

    def _require_data(self) -> str:
        data = self.data()
        if data is None:
            raise IncompleteMetadata(f"Missing required metadata for {self.doi}")
        return data

    def create_work(self) -> ApiResponse:
        result = self.api.create_work(self._require_data())
        if result.put_code is not None:
            self.put_code = result.put_code
        logger.info("Created ORCID work %s for %s", result.put_code, self.doi)
        return result

    def update_work(self, put_code: int | None = None) -> ApiResponse:
        put_code = put_code or self.put_code
        if put_code is None:
            raise SubmissionFailure("A put-code is required to update a work")
        self.put_code = put_code
        result = self.api.update_work(put_code, self._require_data())
        logger.info("Updated ORCID work %s for %s", put_code, self.doi)
        return result

    def delete_work(self, put_code: int | None = None) -> ApiResponse:
        put_code = put_code or self.put_code
        if put_code is None:
            raise SubmissionFailure("A put-code is required to delete a work")
        result = self.api.delete_work(put_code)
        logger.info("Deleted ORCID work %s for %s", put_code, self.doi)
        return result
