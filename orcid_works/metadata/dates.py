"""Publication date resolution from heterogeneous metadata date values."""

import logging
import re

from orcid_works.metadata.models import PublicationDate

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?")


def _to_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class DateResolver:
    """Extract a partial PublicationDate without fabricating missing parts.

    Accepted inputs: a ``{"year", "month", "day"}`` mapping, a CSL date
    (``{"date-parts": [[2020, 5, 17]]}``), an ISO 8601 string such as
    ``"2020-05"``, or a bare year.
    """

    def resolve(self, published) -> PublicationDate:
        year, month, day = self._components(published)

        year = _to_int(year)
        month = _to_int(month)
        day = _to_int(day)

        if year is None or not 0 <= year <= 9999:
            return PublicationDate()
        if month is None or not 1 <= month <= 12:
            return PublicationDate(year=year)
        if day is None or not 1 <= day <= 31:
            return PublicationDate(year=year, month=month)
        return PublicationDate(year=year, month=month, day=day)

    def _components(self, published) -> tuple:
        if published is None:
            return None, None, None

        if isinstance(published, dict):
            if "date-parts" in published:
                return self._from_date_parts(published["date-parts"])
            return published.get("year"), published.get("month"), published.get("day")

        if isinstance(published, (list, tuple)):
            return self._from_date_parts(published)

        if isinstance(published, int):
            return published, None, None

        match = _ISO_DATE.match(str(published).strip())
        if not match:
            logger.debug("Unparseable publication date: %r", published)
            return None, None, None
        return match.groups()

    @staticmethod
    def _from_date_parts(parts) -> tuple:
        # CSL wraps date-parts in an outer list: [[year, month, day]]
        if parts and isinstance(parts[0], (list, tuple)):
            parts = parts[0]
        parts = list(parts or [])[:3]
        parts += [None] * (3 - len(parts))
        return tuple(parts)
