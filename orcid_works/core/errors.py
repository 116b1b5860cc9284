"""Exception hierarchy for metadata lookup, mapping, validation and submission."""

from typing import Optional


class OrcidWorksError(Exception):
    """Base class for all errors raised by this package."""


class LookupFailure(OrcidWorksError):
    """Metadata for a DOI could not be fetched or decoded."""

    def __init__(self, doi: str, message: str, status_code: Optional[int] = None):
        self.doi = doi
        self.status_code = status_code
        super().__init__(f"Metadata lookup failed for '{doi}': {message}")


class UnknownWorkType(OrcidWorksError):
    """A (type, subtype) pair has no entry in the work-type table."""

    def __init__(self, work_type: Optional[str], subtype: Optional[str]):
        self.work_type = work_type
        self.subtype = subtype
        super().__init__(f"No ORCID work type for type={work_type!r} subtype={subtype!r}")


class SchemaArtifactMissing(OrcidWorksError):
    """The XML Schema Definition file is missing, unreadable or malformed."""


class IncompleteMetadata(OrcidWorksError):
    """A work without its required elements was about to be submitted."""


class SubmissionFailure(OrcidWorksError):
    """The ORCID API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
