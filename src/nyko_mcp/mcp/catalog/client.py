"""Read-only client for the remote pattern catalog.

The catalog is a repository of YAML documents served over HTTP:

    <base>/patterns/_index.json
    <base>/patterns/<category>/<pattern_id>.yaml
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
import yaml
from pydantic import ValidationError

from nyko_mcp.mcp.config import MCPConfig
from nyko_mcp.mcp.errors import (
    CatalogUnavailableError,
    InvalidPatternDocumentError,
    PatternNotFoundError,
)
from nyko_mcp.mcp.models import Pattern, PatternIndex

if TYPE_CHECKING:
    from types import TracebackType

logger = structlog.get_logger(__name__)

_HTTP_NOT_FOUND = 404


class CatalogClient:
    """Fetches the pattern index and individual pattern documents.

    Owns an ``httpx.AsyncClient`` unless one is passed in, in which case the
    caller is responsible for closing it.

    Example:
        ```python
        async with CatalogClient(config) as catalog:
            index = await catalog.fetch_index()
            pattern = await catalog.fetch_pattern("supabase-google-oauth", "auth")
        ```
    """

    def __init__(
        self,
        config: MCPConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=config.request_timeout,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
        )

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_index(self) -> PatternIndex:
        """Fetch and parse the pattern index.

        Raises:
            CatalogUnavailableError: If the index cannot be read or parsed
        """
        url = self._config.index_url
        response = await self._get(url)

        if response.status_code != httpx.codes.OK:
            logger.warning("Index fetch failed", url=url, status=response.status_code)
            raise CatalogUnavailableError(url, response.status_code)

        try:
            index = PatternIndex.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning("Index document is invalid", url=url, error=str(e))
            raise CatalogUnavailableError(url, 0, reason=e.errors()[0]["msg"]) from e

        logger.debug("Fetched pattern index", version=index.version, patterns=len(index.patterns))
        return index

    async def fetch_pattern(self, pattern_id: str, category: str) -> Pattern:
        """Fetch one pattern document.

        The returned pattern always carries the requested ``pattern_id`` and
        ``category``, whatever the document itself declares.

        Args:
            pattern_id: Pattern identifier
            category: Category directory the document lives in

        Raises:
            PatternNotFoundError: If the document does not exist
            CatalogUnavailableError: On any other failed response
            InvalidPatternDocumentError: If the YAML cannot be parsed into a pattern
        """
        url = self._config.pattern_url(pattern_id, category)
        response = await self._get(url)

        if response.status_code == _HTTP_NOT_FOUND:
            raise PatternNotFoundError(pattern_id)
        if response.status_code != httpx.codes.OK:
            logger.warning("Pattern fetch failed", url=url, status=response.status_code)
            raise CatalogUnavailableError(url, response.status_code)

        try:
            document: Any = yaml.safe_load(response.text)
        except yaml.YAMLError as e:
            raise InvalidPatternDocumentError(pattern_id, f"malformed YAML: {e}") from e

        if not isinstance(document, dict):
            raise InvalidPatternDocumentError(pattern_id, "document is not a mapping")

        document = {**document, "id": pattern_id, "category": category}

        try:
            pattern = Pattern.model_validate(document)
        except ValidationError as e:
            raise InvalidPatternDocumentError(pattern_id, str(e)) from e

        logger.debug("Fetched pattern", pattern_id=pattern_id, category=category)
        return pattern

    async def _get(self, url: str) -> httpx.Response:
        try:
            return await self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning("Catalog request failed", url=url, error=str(e))
            raise CatalogUnavailableError(url, 0) from e
