"""
Product Image Validation

Downloads a product image URL with httpx and checks that Pillow can
decode the payload.

Outcomes:
    - ok(True): the URL served a decodable image
    - ok(False): the URL answered, but the body is not an image
    - fail(IMAGE_FETCH_ERROR): the URL is malformed (no http/https scheme)
      or the download failed (connection error, timeout, non-2xx status,
      body larger than max_bytes)
"""

import io
import logging
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from app.services.base import ErrorKind, ServiceResult

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("http", "https")
DEFAULT_MAX_BYTES = 10 * 1024 * 1024


class ImageValidator:
    """
    Fetch-and-decode check for product images.

    Attributes:
        timeout: Seconds allowed for the whole download
        max_bytes: Largest image body accepted
        transport: Optional httpx transport (tests plug in a MockTransport)

    Example:
        >>> validator = ImageValidator(timeout=5.0)
        >>> result = await validator.validate("https://example.com/pizza.png")
        >>> result.value
        True
    """

    def __init__(
        self,
        timeout: float = 10.0,
        max_bytes: int = DEFAULT_MAX_BYTES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._transport = transport

    async def validate(self, url: str) -> ServiceResult[bool]:
        """Fetch ``url`` and report whether it decodes as an image."""
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            logger.warning(f"Malformed image URL {url!r}: {e}")
            return ServiceResult.fail(ErrorKind.IMAGE_FETCH_ERROR, f"Malformed URL: {url}")

        if parsed.scheme not in SUPPORTED_SCHEMES:
            logger.warning(f"Image URL without a usable scheme: {url!r}")
            return ServiceResult.fail(ErrorKind.IMAGE_FETCH_ERROR, f"no protocol: {url}")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    content = await self._read_capped(response)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Could not fetch image {url}: {e}")
            return ServiceResult.fail(ErrorKind.IMAGE_FETCH_ERROR, f"Could not fetch {url}: {e}")

        if content is None:
            logger.warning(f"Image at {url} exceeds {self.max_bytes} bytes")
            return ServiceResult.fail(
                ErrorKind.IMAGE_FETCH_ERROR,
                f"Image at {url} is larger than {self.max_bytes} bytes",
            )

        return ServiceResult.ok(self.decodes(content))

    async def _read_capped(self, response: httpx.Response) -> Optional[bytes]:
        """Read the body, or None once it grows past ``max_bytes``."""
        chunks = bytearray()
        async for chunk in response.aiter_bytes():
            chunks.extend(chunk)
            if len(chunks) > self.max_bytes:
                return None
        return bytes(chunks)

    @staticmethod
    def decodes(content: bytes) -> bool:
        """Check whether Pillow recognises ``content`` as an intact image."""
        if not content:
            return False
        try:
            with Image.open(io.BytesIO(content)) as image:
                image.verify()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            logger.debug(f"Image decode failed: {e}")
            return False
        return True
