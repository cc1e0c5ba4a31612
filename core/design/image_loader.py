"""Loads element and background image sources into Pillow images."""

import base64
import binascii
import io
import logging
import re
from collections import OrderedDict
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes

import requests
from PIL import Image

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*?),(?P<data>.*)$", re.DOTALL)

DEFAULT_MAX_CACHED_URLS = 32


class ImageLoadError(Exception):
    """Raised when an image source cannot be fetched or decoded."""


def decode_data_uri(uri: str) -> bytes:
    """Return the payload bytes of a data: URI."""
    match = _DATA_URI_RE.match(uri)
    if not match:
        raise ImageLoadError("Malformed data URI")
    payload = match.group("data")
    if ";base64" in (match.group("params") or ""):
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as e:
            raise ImageLoadError(f"Invalid base64 payload: {e}") from e
    return unquote_to_bytes(payload)


def encode_data_uri(data: bytes, mime: str = "image/png") -> str:
    """Build a base64 data URI, as produced when a user uploads a file."""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


class ImageLoader:
    """
    Resolves image sources for the rasterizer.

    Supports data URIs, http(s) URLs (fetched with requests and cached
    per loader, least recently used first out) and local file paths.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
        max_cached_urls: int = DEFAULT_MAX_CACHED_URLS
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_cached_urls = max_cached_urls
        self._url_cache: "OrderedDict[str, bytes]" = OrderedDict()

    def _read_bytes(self, src: str) -> bytes:
        if src.startswith("data:"):
            return decode_data_uri(src)

        if src.startswith(("http://", "https://")):
            if src in self._url_cache:
                self._url_cache.move_to_end(src)
                return self._url_cache[src]
            try:
                response = self.session.get(src, timeout=self.timeout)
                response.raise_for_status()
            except requests.exceptions.RequestException as e:
                raise ImageLoadError(f"Failed to fetch {src}: {e}") from e
            self._remember(src, response.content)
            return response.content

        path = Path(src).expanduser()
        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageLoadError(f"Failed to read {path}: {e}") from e

    def load(self, src: str) -> Image.Image:
        """
        Load src as an RGBA image.

        Raises:
            ImageLoadError: if the source is empty, unreachable or not an image
        """
        if not src:
            raise ImageLoadError("Empty image source")

        data = self._read_bytes(src)
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ImageLoadError(f"Cannot decode image: {e}") from e

    def _remember(self, src: str, data: bytes) -> None:
        if self.max_cached_urls <= 0:
            return
        self._url_cache[src] = data
        while len(self._url_cache) > self.max_cached_urls:
            evicted, _ = self._url_cache.popitem(last=False)
            logger.debug(f"Evicted cached image {evicted}")

    def clear_cache(self) -> None:
        self._url_cache.clear()
