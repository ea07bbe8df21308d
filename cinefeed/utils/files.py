"""Source-handle helpers: local path resolution, size probe and payload reads.

A source handle is a local path, a ``file://`` URI, or an ``http(s)://`` URL.
Only :func:`read_payload` accepts remote URLs; the probe and the imaging
primitive work on local files.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from cinefeed.errors import Source
from cinefeed.models import FileInfo

logger = logging.getLogger(__name__)

_REMOTE_SCHEMES = ("http", "https")


def is_remote(source: Source) -> bool:
    return urlparse(os.fspath(source)).scheme in _REMOTE_SCHEMES


def local_path(source: Source) -> Path:
    text = os.fspath(source)
    if text.startswith("file://"):
        return Path(url2pathname(urlparse(text).path))
    return Path(text)


def probe_file(source: Source) -> FileInfo:
    """Return existence and byte size of a local source.

    Permission and other I/O errors propagate; only a missing file is
    reported as ``exists=False``.
    """

    try:
        stat = local_path(source).stat()
    except FileNotFoundError:
        return FileInfo(exists=False)
    return FileInfo(exists=True, size=stat.st_size)


def read_payload(source: Source, *, timeout: float = 10.0) -> bytes:
    """Read a source into memory.

    Raises ``OSError`` or ``ValueError`` (malformed paths and URLs) for
    local failures, and ``httpx.HTTPError`` or ``httpx.InvalidURL`` for
    remote ones (including non-2xx responses).
    """

    if is_remote(source):
        url = os.fspath(source)
        logger.debug("GET %s", url)
        resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
        return resp.content
    return local_path(source).read_bytes()
