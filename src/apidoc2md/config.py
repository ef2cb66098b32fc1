"""Local configuration for apidoc2md."""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_CACHE_DIR = ".apidoc2md_cache"
DEFAULT_CACHE_TTL_SECONDS = 24 * 60 * 60
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "apidoc2md/0.1 (+https://github.com/apidoc2md/apidoc2md)"
DEFAULT_SOURCE_EXTENSION = ".md"
DEFAULT_OUTPUT_EXTENSION = ".html"
DEFAULT_MDN_BASE_URL = "https://developer.mozilla.org/en-US/docs/Web/JavaScript"

# Local-only cache directory for fetched API documents.
APIDOC2MD_CACHE_PATH = Path(os.getenv("APIDOC2MD_CACHE_PATH", DEFAULT_CACHE_DIR)).expanduser().resolve()
APIDOC2MD_CACHE_TTL_SECONDS = int(os.getenv("APIDOC2MD_CACHE_TTL_SECONDS", str(DEFAULT_CACHE_TTL_SECONDS)))
APIDOC2MD_FETCH_TIMEOUT_S = float(os.getenv("APIDOC2MD_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
APIDOC2MD_FETCH_MAX_RETRIES = int(os.getenv("APIDOC2MD_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
APIDOC2MD_FETCH_BACKOFF_S = float(os.getenv("APIDOC2MD_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
APIDOC2MD_USER_AGENT = os.getenv("APIDOC2MD_USER_AGENT", DEFAULT_USER_AGENT)

# Extension of API doc sources, rewritten to the published extension in links.
APIDOC2MD_SOURCE_EXTENSION = os.getenv("APIDOC2MD_SOURCE_EXTENSION", DEFAULT_SOURCE_EXTENSION)
APIDOC2MD_OUTPUT_EXTENSION = os.getenv("APIDOC2MD_OUTPUT_EXTENSION", DEFAULT_OUTPUT_EXTENSION)
APIDOC2MD_MDN_BASE_URL = os.getenv("APIDOC2MD_MDN_BASE_URL", DEFAULT_MDN_BASE_URL).rstrip("/")
