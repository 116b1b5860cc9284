"""Contributor name resolution for CSL-JSON author entries."""

from orcid_works.metadata.models import Contributor


def _clean(value) -> str | None:
    if value is None:
        return None
    text = " ".join(str(value).split())
    return text or None


class NameResolver:
    """Derive credit names and BibTeX full names from raw author entries.

    Credit name precedence: an explicit ``literal`` name, then
    ``"given family"``, then whichever single fragment is available.
    """

    def credit_name(self, author: dict) -> str | None:
        literal = _clean(author.get("literal"))
        if literal:
            return literal

        given = _clean(author.get("given"))
        family = _clean(author.get("family"))
        if given and family:
            return f"{given} {family}"

        return family or given or _clean(author.get("name"))

    def full_name(self, author: dict) -> str | None:
        """Name in BibTeX ``Family, Given`` form when both parts exist."""
        given = _clean(author.get("given"))
        family = _clean(author.get("family"))
        if given and family and not _clean(author.get("literal")):
            return f"{family}, {given}"
        return self.credit_name(author)

    def contributor(self, author: dict) -> Contributor | None:
        credit_name = self.credit_name(author)
        if not credit_name:
            return None
        return Contributor(orcid=_clean(author.get("ORCID")), credit_name=credit_name)

    def contributors(self, authors: list[dict]) -> list[Contributor]:
        """Map author entries to contributors, keeping order and skipping nameless ones."""
        result = []
        for author in authors:
            if not isinstance(author, dict):
                continue
            contributor = self.contributor(author)
            if contributor:
                result.append(contributor)
        return result

    def author_string(self, authors: list[dict]) -> str:
        names = [self.full_name(a) for a in authors if isinstance(a, dict)]
        return " and ".join(n for n in names if n)
