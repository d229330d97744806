"""Wire <-> domain key mapping for Zimbra objects.

Zimbra abbreviates most JSON keys (``l`` for parent folder, ``f`` for flags,
``e`` for email addresses...). An ``Entity`` lists the renames for one object
type and the nested entities below it; ``normalize`` maps wire objects to
domain objects and ``denormalize`` goes the other way. Keys an entity does not
mention pass through unchanged.
"""

from __future__ import annotations

from typing import Any, Callable


class Entity:
    def __init__(self, name: str, fields: dict[str, str] | None = None):
        self.name = name
        # wire key -> domain key
        self.fields: dict[str, str] = dict(fields or {})
        # wire key -> entity for the nested value
        self.nested: dict[str, Entity] = {}

    def nest(self, wire_key: str, entity: Entity, domain_key: str | None = None) -> Entity:
        """Declare a nested entity; returns self so declarations can chain."""
        if domain_key:
            self.fields[wire_key] = domain_key
        self.nested[wire_key] = entity
        return self

    @property
    def inverse(self) -> dict[str, str]:
        return {domain: wire for wire, domain in self.fields.items()}

    def __repr__(self) -> str:
        return f"Entity({self.name!r})"


def _map(value: Any, entity: Entity, to_domain: bool) -> Any:
    if isinstance(value, list):
        return [_map(v, entity, to_domain) for v in value]
    if not isinstance(value, dict):
        return value

    renames = entity.fields if to_domain else entity.inverse
    out: dict[str, Any] = {}
    for key, item in value.items():
        if item is None and not to_domain:
            continue
        wire_key = key if to_domain else renames.get(key, key)
        nested = entity.nested.get(wire_key)
        if nested is not None:
            item = _map(item, nested, to_domain)
        out[renames.get(key, key)] = item
    return out


def normalize(entity: Entity) -> Callable[[Any], Any]:
    return lambda value: _map(value, entity, True)


def denormalize(entity: Entity) -> Callable[[Any], Any]:
    return lambda value: _map(value, entity, False)


__all__ = ["Entity", "denormalize", "normalize"]
