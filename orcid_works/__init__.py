"""Build ORCID work records from DOI metadata."""

from orcid_works.core.work import WorkRecord

__version__ = "0.1.0"

__all__ = ["WorkRecord", "__version__"]
