"""Shared data models for metadata derivation."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

ContributorRole = Literal[
    "author",
    "assignee",
    "editor",
    "chair-or-translator",
    "co-investigator",
    "co-inventor",
    "graduate-student",
    "other-inventor",
    "principal-investigator",
    "postdoctoral-researcher",
    "support-staff",
]


class Contributor(BaseModel):
    """A single work contributor as it will appear in the ORCID record."""

    orcid: Optional[str] = None
    credit_name: str
    # Not populated from metadata yet; the schema accepts both.
    role: Optional[ContributorRole] = None
    sequence: Optional[Literal["first", "additional"]] = None


class PublicationDate(BaseModel):
    """Partial publication date. Source dates are often year-only."""

    year: Optional[int] = Field(default=None, ge=0, le=9999)
    month: Optional[int] = Field(default=None, ge=1, le=12)
    day: Optional[int] = Field(default=None, ge=1, le=31)

    @model_validator(mode="after")
    def components_are_nested(self) -> "PublicationDate":
        if self.month is not None and self.year is None:
            raise ValueError("month requires year")
        if self.day is not None and self.month is None:
            raise ValueError("day requires month")
        return self
