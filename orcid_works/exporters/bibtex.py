"""BibTeX citation strings for ORCID work records."""

import re

_WHITESPACE = re.compile(r"\s+")


def format_entry(entry_type: str, key: str, fields: dict) -> str:
    """Serialize a BibTeX entry, one field per line. Empty fields are skipped.

    Braces in field values are balanced so every value stays inside its field.
    """
    lines = [f"@{entry_type}{{{key},"]
    body = [
        f"  {name} = {{{balance_braces(str(value))}}}"
        for name, value in fields.items()
        if value is not None and value != ""
    ]
    lines.append(",\n".join(body))
    lines.append("}")
    return "\n".join(lines)


def collapse_whitespace(text: str) -> str:
    """Squeeze every whitespace run, newlines included, to a single space."""
    return _WHITESPACE.sub(" ", text).strip()


def balance_braces(text: str) -> str:
    """Drop braces without a partner so the field cannot close the entry early.

    Matched pairs are kept, since BibTeX uses them to protect case. A
    backslash does not hide a brace from BibTeX's counting, so unmatched
    ones are removed rather than escaped.
    """
    unmatched = set()
    opened = []
    for i, char in enumerate(text):
        if char == "{":
            opened.append(i)
        elif char == "}":
            if opened:
                opened.pop()
            else:
                unmatched.add(i)
    unmatched.update(opened)
    if not unmatched:
        return text
    return "".join(char for i, char in enumerate(text) if i not in unmatched)


def work_citation(
    doi: str,
    author: str,
    title: str,
    publisher: str,
    year: int | None,
) -> str:
    """Single-line BibTeX ``@data`` entry keyed by the DOI resolver URL."""
    url = f"https://doi.org/{doi}"
    fields = {
        "author": author,
        "title": title,
        "publisher": publisher,
        "doi": doi,
        "url": url,
        "year": year,
    }
    return collapse_whitespace(format_entry("data", url, fields))
