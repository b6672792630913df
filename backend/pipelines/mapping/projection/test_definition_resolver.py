from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest
import requests

from .definition_resolver import DefinitionResolver
from .definitions import DefinitionRegistry
from .exceptions import DefinitionLookupError, DefinitionNotFoundError, UnsupportedSchemeError

WGS84_PROJ4 = "+proj=longlat +datum=WGS84 +no_defs"


def lookup_payload(proj4: Optional[str]) -> Dict[str, Any]:
    if proj4 is None:
        return {"status": "ok", "number_result": 0, "results": []}
    return {
        "status": "ok",
        "number_result": 1,
        "results": [{
            "code": "5000",
            "kind": "CRS-PROJCRS",
            "bbox": [85.06, 180.0, 85.06, 180.0],
            "unit": "degree",
            "proj4": proj4,
            "name": "WGS 84",
            "area": "World",
            "default_trans": 0,
            "trans": [],
            "accuracy": ""
        }]
    }


@dataclass
class FakeResponse:
    payload: Dict[str, Any]
    status_code: int = 200

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self) -> Dict[str, Any]:
        return self.payload


@dataclass
class FakeSession:
    response: FakeResponse
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Optional[float] = None) -> FakeResponse:
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        return self.response


def _resolver(payload: Dict[str, Any], status_code: int = 200):
    registry = DefinitionRegistry()
    session = FakeSession(FakeResponse(payload, status_code=status_code))
    resolver = DefinitionResolver(registry, session=session, base_url="https://lookup.test/")
    return registry, session, resolver


def test_lookup_registers_definition() -> None:
    registry, session, resolver = _resolver(lookup_payload(WGS84_PROJ4))

    definition = asyncio.run(resolver.lookup("EPSG:5000"))

    assert definition == WGS84_PROJ4
    assert registry.get("EPSG:5000") == WGS84_PROJ4
    assert len(session.calls) == 1
    assert session.calls[0]["url"] == "https://lookup.test/"
    assert session.calls[0]["params"] == {"format": "json", "q": "5000"}


def test_repeated_lookup_uses_registry() -> None:
    _, session, resolver = _resolver(lookup_payload(WGS84_PROJ4))

    asyncio.run(resolver.lookup("EPSG:5000"))
    asyncio.run(resolver.lookup("EPSG:5000"))

    assert len(session.calls) == 1
    assert resolver.request_count == 1


def test_builtin_code_needs_no_request() -> None:
    registry, session, resolver = _resolver(lookup_payload(WGS84_PROJ4))

    definition = asyncio.run(resolver.lookup("EPSG:4326"))

    assert definition == registry.get("EPSG:4326")
    assert session.calls == []


def test_concurrent_lookups_share_one_request() -> None:
    _, session, resolver = _resolver(lookup_payload(WGS84_PROJ4))

    async def lookup_twice():
        return await asyncio.gather(resolver.lookup("EPSG:5000"), resolver.lookup("EPSG:5000"))

    results = asyncio.run(lookup_twice())

    assert results == [WGS84_PROJ4, WGS84_PROJ4]
    assert len(session.calls) == 1


def test_invalid_projection_code() -> None:
    registry, session, resolver = _resolver(lookup_payload(None))

    with pytest.raises(DefinitionNotFoundError) as excinfo:
        asyncio.run(resolver.lookup("EPSG:5001"))

    assert excinfo.value.code == "EPSG:5001"
    assert not registry.has("EPSG:5001")
    assert len(session.calls) == 1


def test_concurrent_failures_fan_out() -> None:
    registry, session, resolver = _resolver(lookup_payload(None))

    async def lookup_twice():
        return await asyncio.gather(
            resolver.lookup("EPSG:5001"), resolver.lookup("EPSG:5001"), return_exceptions=True
        )

    results = asyncio.run(lookup_twice())

    assert all(isinstance(result, DefinitionNotFoundError) for result in results)
    assert len(session.calls) == 1
    assert not registry.has("EPSG:5001")


def test_failed_lookup_is_not_remembered() -> None:
    _, session, resolver = _resolver(lookup_payload(None))

    for _ in range(2):
        with pytest.raises(DefinitionNotFoundError):
            asyncio.run(resolver.lookup("EPSG:5001"))

    assert len(session.calls) == 2


@pytest.mark.parametrize("code", ["unknown:5002", "5002", "EPSG:"])
def test_unknown_projection_type(code: str) -> None:
    registry, session, resolver = _resolver(lookup_payload(WGS84_PROJ4))

    with pytest.raises(UnsupportedSchemeError):
        asyncio.run(resolver.lookup(code))

    assert not registry.has(code)
    assert session.calls == []


def test_http_error_is_lookup_error() -> None:
    registry, _, resolver = _resolver({"detail": "boom"}, status_code=500)

    with pytest.raises(DefinitionLookupError) as excinfo:
        asyncio.run(resolver.lookup("EPSG:5000"))

    assert not isinstance(excinfo.value, DefinitionNotFoundError)
    assert not registry.has("EPSG:5000")


def test_supports_is_case_insensitive_on_scheme() -> None:
    _, _, resolver = _resolver(lookup_payload(WGS84_PROJ4))
    assert resolver.supports("epsg:5000")
    assert resolver.supports("EPSG:5000")
    assert not resolver.supports("ESRI:102100")


def test_scheme_spellings_share_one_request_and_key() -> None:
    registry, session, resolver = _resolver(lookup_payload(WGS84_PROJ4))

    async def lookup_both():
        return await asyncio.gather(resolver.lookup("epsg:5000"), resolver.lookup("EPSG:5000"))

    assert asyncio.run(lookup_both()) == [WGS84_PROJ4, WGS84_PROJ4]
    assert asyncio.run(resolver.lookup("Epsg: 5000")) == WGS84_PROJ4

    assert len(session.calls) == 1
    assert registry.has("EPSG:5000")
    assert not registry.has("epsg:5000")
    assert resolver.canonical_code("epsg: 5000") == "EPSG:5000"
