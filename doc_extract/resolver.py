"""Content-type resolution for URL-sourced documents."""

from typing import Optional

import httpx

from doc_extract.exceptions import MissingContentTypeError, ResolutionFailedError
from doc_extract.logger import Timer, get_logger

logger = get_logger(__name__)


def parse_mime_type(content_type: str) -> str:
    """Return the media type of a Content-Type value, dropping its parameters.

    >>> parse_mime_type("application/pdf; charset=binary")
    'application/pdf'
    """
    return content_type.split(";", 1)[0].strip()


class ContentTypeResolver:
    """Infers a document's MIME type from a HEAD request.

    Only the response metadata is read; the type is never guessed from the
    URL's extension or from the body.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0) -> None:
        """Initialize resolver.

        Args:
            client: HTTP client to probe with. If None, a short-lived client is
                opened for each probe.
            timeout: Probe timeout in seconds, applied to every probe including
                those sent through an injected client.
        """
        self.client = client
        self.timeout = timeout

    async def resolve(self, url: str) -> str:
        """Return the MIME type the server declares for ``url``.

        Raises:
            ResolutionFailedError: If the probe fails or returns a non-2xx status
            MissingContentTypeError: If no usable Content-Type header is returned
        """
        with Timer("content_type_probe") as timer:
            response = await self._head(url)

        logger.debug(
            "Content-type probe completed",
            extra_data={
                "url": url,
                "status_code": response.status_code,
                "probe_time_ms": timer.get_elapsed_ms(),
            },
        )

        if not response.is_success:
            logger.warning(
                "Content-type probe returned an error status",
                extra_data={"url": url, "status_code": response.status_code},
            )
            raise ResolutionFailedError(url, status_code=response.status_code)

        raw_content_type = response.headers.get("content-type")
        mime_type = parse_mime_type(raw_content_type) if raw_content_type else ""
        if not mime_type:
            logger.warning("Content-type probe returned no Content-Type", extra_data={"url": url})
            raise MissingContentTypeError(url)

        logger.debug(
            "Resolved document type from URL",
            extra_data={"url": url, "content_type": raw_content_type, "mime_type": mime_type},
        )
        return mime_type

    async def _head(self, url: str) -> httpx.Response:
        try:
            if self.client is not None:
                return await self.client.head(url, follow_redirects=True, timeout=self.timeout)
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                return await client.head(url)
        except httpx.RequestError as exc:
            logger.warning(
                "Content-type probe failed",
                extra_data={"url": url, "error_type": type(exc).__name__, "error": str(exc)},
            )
            raise ResolutionFailedError(url, reason=str(exc) or type(exc).__name__) from exc
