#!/usr/bin/env python3
"""Build an ORCID work from a DOI, validate it, and optionally submit it."""

import argparse
import logging
import os
import sys
from pathlib import Path

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from orcid_works.core.config import get_settings, load_environment
from orcid_works.core.errors import OrcidWorksError
from orcid_works.core.work import WorkRecord
from orcid_works.exporters import export_work

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("build_work")


def run(args: argparse.Namespace) -> int:
    load_environment()
    settings = get_settings()
    logger.info("ORCID API: %s", settings.orcid_api_url)

    token = args.token or os.environ.get("ORCID_ACCESS_TOKEN")
    record = WorkRecord(args.doi, args.orcid, token, put_code=args.put_code, settings=settings)

    if not record.has_required_elements():
        logger.error("Missing required metadata for %s", record.doi)
        return 1

    if args.citation:
        print(record.citation())
    else:
        print(record.data())

    if args.output_dir:
        paths = export_work(record, args.output_dir)
        for name, path in paths.items():
            logger.info("Wrote %s: %s", name, path)

    if args.validate or args.submit:
        errors = record.validation_errors()
        for error in errors:
            logger.error("Schema: %s", error)
        if errors:
            return 1
        logger.info("Work XML is valid against %s", record.validator.schema_path.name)

    if args.submit:
        if record.put_code:
            result = record.update_work()
        else:
            result = record.create_work()
        logger.info("ORCID responded %d (put-code %s)", result.status_code, result.put_code)

    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Build an ORCID work record from a DOI")
    parser.add_argument("doi", help="DOI of the work, e.g. 10.5061/dryad.8515")
    parser.add_argument("orcid", help="ORCID iD of the record owner")
    parser.add_argument("--token", help="ORCID access token (default: $ORCID_ACCESS_TOKEN)")
    parser.add_argument("--citation", action="store_true", help="Print the BibTeX citation instead of XML")
    parser.add_argument("--validate", action="store_true", help="Validate against the work XSD")
    parser.add_argument("--submit", action="store_true", help="Create (or update) the work on ORCID")
    parser.add_argument("--put-code", type=int, default=None, help="Existing work put-code to update")
    parser.add_argument("--output-dir", default=None, help="Also write .xml and .bib files here")
    args = parser.parse_args()

    try:
        sys.exit(run(args))
    except OrcidWorksError as exc:
        logger.error("%s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
