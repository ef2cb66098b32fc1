"""Test setup for apidoc2md."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (make real network calls)",
    )


@pytest.fixture
def fs_api_doc_text() -> str:
    """A small API doc in the style of the Node.js reference docs."""
    return FS_API_DOC


FS_API_DOC = """# File system

<!--introduced_in=v0.10.0-->

> Stability: 2 - Stable

The `fs` module enables interacting with the file system. See the
[promises API][] and [`path`](path.md) for details.

## Class: `fs.Stats`
<!-- YAML
added: v0.1.21
-->

A `fs.Stats` object provides information about a file.

## `fs.readFile(path[, options], callback)`
<!-- YAML
added: v0.1.29
changes:
  - version: v7.6.0
    pr-url: https://github.com/nodejs/node/pull/10739
    description: The `path` parameter can be a WHATWG `URL` object.
-->

* `path` {string|Buffer|URL} filename or file descriptor
* `callback` {Function}

Asynchronously reads the entire contents of a file.

## Event: `'close'`

> Stability: 1 - Experimental

Emitted when the stream closes.

## Options

First options section.

## Options

Second options section.

[promises API]: fs.md#promises-api "Promises"
"""
