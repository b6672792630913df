"""
Remote Definition Resolver
Fetches projection definitions for unknown authority codes (e.g. "EPSG:5000")
from an epsg.io style search service and installs them into the registry.

Lookups are asynchronous. Concurrent lookups of the same code share one
request, and codes already in the registry never touch the network.
"""
import asyncio
import logging
from concurrent.futures import Executor
from typing import Any, Dict, Optional

import requests

from config.settings import CRS_LOOKUP_SCHEME, CRS_LOOKUP_TIMEOUT, CRS_LOOKUP_URL

from .definitions import DefinitionRegistry
from .exceptions import DefinitionLookupError, DefinitionNotFoundError, UnsupportedSchemeError

logger = logging.getLogger(__name__)


class DefinitionResolver:
    """Asynchronous, de-duplicating lookup of projection definitions"""

    def __init__(
        self,
        registry: DefinitionRegistry,
        session: Optional[requests.Session] = None,
        base_url: str = CRS_LOOKUP_URL,
        timeout: float = CRS_LOOKUP_TIMEOUT,
        scheme: str = CRS_LOOKUP_SCHEME,
        executor: Optional[Executor] = None,
    ):
        self._registry = registry
        self._session = session if session is not None else requests.Session()
        self._base_url = base_url
        self._timeout = timeout
        self._scheme = scheme.upper()
        self._executor = executor
        self._inflight: Dict[str, "asyncio.Future[str]"] = {}
        self.request_count = 0

    def supports(self, code: str) -> bool:
        """True when code belongs to the authority scheme this resolver serves (scheme case is ignored)"""
        scheme, sep, number = code.partition(":")
        return bool(sep) and scheme.strip().upper() == self._scheme and number.strip() != ""

    def canonical_code(self, code: str) -> str:
        """
        Registry key for a supported code: upper-case scheme, trimmed number.

        "epsg:5000" and "EPSG:5000" share one key, so they share one request
        and one registry entry.
        """
        number = code.partition(":")[2].strip()
        return f"{self._scheme}:{number}"

    async def lookup(self, code: str) -> str:
        """
        Resolve code to a projection definition, registering it on success.

        Args:
            code: Authority code such as "EPSG:5000"

        Returns:
            str: The projection definition, registered under `canonical_code(code)`

        Raises:
            UnsupportedSchemeError: code is not of the supported scheme (no request made)
            DefinitionNotFoundError: the service returned no results
            DefinitionLookupError: transport or service failure
        """
        if not self.supports(code):
            logger.warning(f"⚠️ Unsupported projection scheme for lookup: {code}")
            raise UnsupportedSchemeError(code, f"Unsupported projection scheme: {code}")

        key = self.canonical_code(code)
        existing = self._registry.get(code) or self._registry.get(key)
        if existing is not None:
            return existing

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._resolve(key))
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        else:
            logger.debug(f"🔁 Joining in-flight lookup for {key}")

        return await asyncio.shield(task)

    def _forget(self, code: str, task: "asyncio.Future[str]") -> None:
        if self._inflight.get(code) is task:
            del self._inflight[code]

    async def _resolve(self, code: str) -> str:
        number = code.partition(":")[2].strip()
        loop = asyncio.get_running_loop()

        self.request_count += 1
        logger.info(f"🌐 Looking up projection definition for {code}")
        payload = await loop.run_in_executor(self._executor, self._fetch, code, number)

        status = payload.get("status")
        if status is not None and status != "ok":
            raise DefinitionLookupError(code, f"Projection lookup for {code} failed with status {status}")

        results = payload.get("results") or []
        if not payload.get("number_result") or not results:
            logger.warning(f"⚠️ No projection definition found for {code}")
            raise DefinitionNotFoundError(code, f"Projection definition not found: {code}")

        definition = results[0].get("proj4")
        if not definition:
            raise DefinitionNotFoundError(code, f"Projection definition not found: {code}")

        self._registry.define(code, definition)
        logger.info(f"✅ Registered projection definition for {code}")
        return definition

    def _fetch(self, code: str, number: str) -> Dict[str, Any]:
        try:
            response = self._session.get(
                self._base_url,
                params={"format": "json", "q": number},
                timeout=self._timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Projection lookup request for {code} failed: {str(e)}")
            raise DefinitionLookupError(code, f"Projection lookup for {code} failed: {str(e)}") from e
        except ValueError as e:
            logger.error(f"❌ Projection lookup for {code} returned invalid JSON: {str(e)}")
            raise DefinitionLookupError(code, f"Projection lookup for {code} returned invalid JSON") from e
