"""HTTP client and data types for the PokeAPI endpoints used by the REPL."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any

_TIMEOUT = 30.0


class ClientError(Exception):
    """Raised when a request fails or its response cannot be decoded."""


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _int(value: Any) -> int:
    return 0 if value is None else int(value)


@dataclass
class APIResource:
    name: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> APIResource:
        return cls(name=_str(data.get("name")), url=_str(data.get("url")))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "url": self.url}


@dataclass
class MapResponse:
    count: int = 0
    next: str = ""
    previous: str = ""
    results: list[APIResource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapResponse:
        return cls(
            count=_int(data.get("count")),
            next=_str(data.get("next")),
            previous=_str(data.get("previous")),
            results=[APIResource.from_dict(r) for r in data.get("results") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "next": self.next,
            "previous": self.previous,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class PokeStat:
    base_stat: int = 0
    stat: APIResource = field(default_factory=APIResource)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PokeStat:
        return cls(
            base_stat=_int(data.get("base_stat")),
            stat=APIResource.from_dict(data.get("stat") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"base_stat": self.base_stat, "stat": self.stat.to_dict()}


@dataclass
class PokemonType:
    slot: int = 0
    poke_type: APIResource = field(default_factory=APIResource)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PokemonType:
        return cls(
            slot=_int(data.get("slot")),
            poke_type=APIResource.from_dict(data.get("type") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"slot": self.slot, "type": self.poke_type.to_dict()}


@dataclass
class PokemonDetail:
    base_experience: int = 0
    name: str = ""
    height: int = 0
    weight: int = 0
    stats: list[PokeStat] = field(default_factory=list)
    types: list[PokemonType] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PokemonDetail:
        return cls(
            base_experience=_int(data.get("base_experience")),
            name=_str(data.get("name")),
            height=_int(data.get("height")),
            weight=_int(data.get("weight")),
            stats=[PokeStat.from_dict(s) for s in data.get("stats") or []],
            types=[PokemonType.from_dict(t) for t in data.get("types") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_experience": self.base_experience,
            "name": self.name,
            "height": self.height,
            "weight": self.weight,
            "stats": [s.to_dict() for s in self.stats],
            "types": [t.to_dict() for t in self.types],
        }


def _fetch_json(url: str) -> dict[str, Any]:
    if not url:
        raise ClientError("url is empty")
    try:
        with urllib.request.urlopen(url, timeout=_TIMEOUT) as response:
            if response.status != 200:
                raise ClientError(f"error: received status code {response.status}")
            try:
                body = response.read()
            except OSError as exc:
                raise ClientError(f"error reading response body: {exc}") from exc
    except urllib.error.HTTPError as exc:
        exc.close()
        raise ClientError(f"error: received status code {exc.code}") from exc
    except urllib.error.URLError as exc:
        raise ClientError(f"error fetching data: {exc.reason}") from exc
    except (OSError, ValueError) as exc:
        raise ClientError(f"error fetching data: {exc}") from exc

    try:
        data = json.loads(body)
    except ValueError as exc:
        raise ClientError(f"error unmarshalling JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ClientError("error unmarshalling JSON: expected an object")
    return data


def _decode(cls: Any, data: dict[str, Any]) -> Any:
    try:
        return cls.from_dict(data)
    except (TypeError, ValueError, AttributeError) as exc:
        raise ClientError(f"error unmarshalling JSON: {exc}") from exc


def get_map(url: str) -> MapResponse:
    """Fetch one page of location areas."""
    return _decode(MapResponse, _fetch_json(url))


def get_explore_area(url: str) -> list[str]:
    """Fetch a location area and return the unique Pokemon names found there."""
    data = _fetch_json(url)
    try:
        names = [
            _str((encounter.get("pokemon") or {}).get("name"))
            for encounter in data.get("pokemon_encounters") or []
        ]
    except (TypeError, AttributeError) as exc:
        raise ClientError(f"error unmarshalling JSON: {exc}") from exc
    return list(dict.fromkeys(names))


def get_pokemon_info(url: str) -> PokemonDetail:
    """Fetch the details of one Pokemon."""
    return _decode(PokemonDetail, _fetch_json(url))