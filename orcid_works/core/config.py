"""Runtime configuration: environment loading, API constants and settings."""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
PACKAGE_ROOT = Path(__file__).resolve().parent.parent

ENV_FILE = PROJECT_ROOT / ".env"
CONTAINER_ENV_FILE = Path("/etc/container_environment.json")

# ── ORCID API ────────────────────────────────────────────────────────

API_VERSION = "2.0"

SCHEMA_PATH = PACKAGE_ROOT / "resources" / f"record_{API_VERSION}" / f"work-{API_VERSION}.xsd"

DEFAULT_ORCID_API_URL = "https://api.sandbox.orcid.org"
DEFAULT_METADATA_URL = "https://doi.org"
DEFAULT_TIMEOUT = 30.0

WORK_NS = "http://www.orcid.org/ns/work"
COMMON_NS = "http://www.orcid.org/ns/common"
XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

NSMAP = {"work": WORK_NS, "common": COMMON_NS, "xsi": XSI_NS}


# ── Environment ──────────────────────────────────────────────────────


_environment_loaded = False


def load_environment(
    env_file: str | Path | None = None,
    container_env_file: str | Path | None = None,
) -> None:
    """Populate os.environ from a local .env file and a container env dump.

    Variables already present in the process environment are not overridden
    by the .env file. The container dump (phusion/baseimage envvar_dumps)
    is applied afterwards and always wins.
    """
    global _environment_loaded
    _environment_loaded = True

    env_file = Path(env_file or ENV_FILE)
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)

    container_env_file = Path(container_env_file or CONTAINER_ENV_FILE)
    if container_env_file.exists():
        with open(container_env_file, encoding="utf-8") as f:
            env_vars = json.load(f)
        for key, value in env_vars.items():
            os.environ[key] = str(value)
        logger.debug("Loaded %d variables from %s", len(env_vars), container_env_file)


# ── Settings ─────────────────────────────────────────────────────────


class Settings(BaseModel):
    """Endpoints and HTTP options shared by the metadata and ORCID clients."""

    orcid_api_url: str = DEFAULT_ORCID_API_URL
    metadata_url: str = DEFAULT_METADATA_URL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    mailto: Optional[str] = None

    @property
    def user_agent(self) -> str:
        ua = "orcid-works/0.1"
        if self.mailto:
            ua += f" (mailto:{self.mailto})"
        return ua


def get_settings() -> Settings:
    """Build Settings from the current environment, with sandbox defaults.

    The .env file and container dump are read on the first call unless
    load_environment() already ran.
    """
    if not _environment_loaded:
        load_environment()
    return Settings(
        orcid_api_url=os.environ.get("ORCID_API_URL") or DEFAULT_ORCID_API_URL,
        metadata_url=os.environ.get("DOI_METADATA_URL") or DEFAULT_METADATA_URL,
        timeout=float(os.environ.get("HTTP_TIMEOUT") or DEFAULT_TIMEOUT),
        mailto=os.environ.get("CONTACT_EMAIL") or None,
    )
