"""Frozen domain types for the caniuse compatibility dataset.

A Dataset is a snapshot: refreshing the cache builds a new one, nothing
mutates an existing snapshot. All mappings keep the upstream JSON key
order, which is load-bearing: exact matching is "first hit wins" and
disambiguation lists are reported in discovery order.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _require_mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(
            f"{what} must be an object, got {type(value).__name__}"
        )
    return value


@dataclass(frozen=True)
class Link:
    """External resource attached to a feature."""

    url: str
    title: str


@dataclass(frozen=True)
class Feature:
    """One compatibility entry, e.g. ``flexbox``."""

    title: str
    description: str = ""
    spec: str | None = None
    status: str | None = None
    usage_perc_y: float = 0.0
    links: tuple[Link, ...] = ()
    # browser code -> version range -> support flags ("y", "a x #2", ...)
    stats: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_dict(cls, data: Any) -> Feature:
        data = _require_mapping(data, "feature entry")
        links = tuple(
            Link(url=str(link["url"]), title=str(link.get("title", "")))
            for link in data.get("links") or []
        )
        raw_stats = _require_mapping(data.get("stats") or {}, "stats")
        stats = MappingProxyType({
            str(browser): MappingProxyType({
                str(v): str(flag)
                for v, flag in _require_mapping(
                    versions, f"stats.{browser}"
                ).items()
            })
            for browser, versions in raw_stats.items()
        })
        return cls(
            title=str(data["title"]),
            description=str(data.get("description") or ""),
            spec=data.get("spec") or None,
            status=data.get("status") or None,
            usage_perc_y=float(data.get("usage_perc_y") or 0.0),
            links=links,
            stats=stats,
        )


@dataclass(frozen=True)
class Agent:
    """Browser metadata; only the display name is rendered."""

    browser: str
    versions: tuple[str | None, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> Agent:
        data = _require_mapping(data, "agent entry")
        return cls(
            browser=str(data["browser"]),
            versions=tuple(data.get("versions") or ()),
        )


@dataclass(frozen=True)
class Dataset:
    """Versioned snapshot of the upstream compatibility data.

    The mappings are read-only views over the parsed sections.
    """

    features: Mapping[str, Feature]
    statuses: Mapping[str, str]
    agents: Mapping[str, Agent]

    @classmethod
    def from_dict(cls, data: Any) -> Dataset:
        """Build a snapshot from the upstream ``data.json`` document.

        Raises KeyError / TypeError / ValueError on malformed input.
        """
        data = _require_mapping(data, "dataset document")
        features = _require_mapping(data["data"], "data")
        statuses = _require_mapping(data["statuses"], "statuses")
        agents = _require_mapping(data["agents"], "agents")
        return cls(
            features=MappingProxyType({
                str(key): Feature.from_dict(entry)
                for key, entry in features.items()
            }),
            statuses=MappingProxyType({
                str(code): str(name) for code, name in statuses.items()
            }),
            agents=MappingProxyType({
                str(code): Agent.from_dict(entry)
                for code, entry in agents.items()
            }),
        )

    def sorted_keys(self) -> list[str]:
        return sorted(self.features)
