"""Export convenience function."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from orcid_works.core.errors import IncompleteMetadata

if TYPE_CHECKING:
    from orcid_works.core.work import WorkRecord

logger = logging.getLogger(__name__)


def _safe_name(doi: str) -> str:
    return "".join(c if c.isalnum() or c in "-._" else "_" for c in doi)


def export_work(record: "WorkRecord", output_dir: str | Path) -> dict:
    """Write the work XML and BibTeX citation, return dict of file paths created."""
    data = record.data()
    if data is None:
        raise IncompleteMetadata(f"Missing required metadata for {record.doi}")

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    stem = _safe_name(record.doi)

    paths = {}

    xml_path = out / f"{stem}.xml"
    xml_path.write_text(data, encoding="utf-8")
    paths["work_xml"] = str(xml_path)

    bib_path = out / f"{stem}.bib"
    bib_path.write_text(record.citation() + "\n", encoding="utf-8")
    paths["citation_bib"] = str(bib_path)

    logger.info("Exported %s to %s", record.doi, out)
    return paths
