from typing import Any, Generic, Literal, TypeVar

from loguru import logger

from app.models.records import AdapterDescriptor
from app.shared.ids import parse_content_id

A = TypeVar("A")


class UnknownAdapterError(LookupError):
    """Raised when an administrative lookup names an adapter that is not registered."""


class AdapterRegistry(Generic[A]):
    """
    Lookup table of adapters keyed by lower-cased name.

    Each adapter has a descriptor carrying its enabled flag; fan-outs only see
    enabled adapters and content ids are routed back to their owner by name.
    """

    def __init__(self, kind: Literal["source", "torrent"] = "source"):
        self.kind = kind
        self._adapters: dict[str, A] = {}
        self._descriptors: dict[str, AdapterDescriptor] = {}

    def __len__(self) -> int:
        return len(self._adapters)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._adapters

    def register(self, adapter: A, enabled: bool = True) -> AdapterDescriptor:
        name = adapter.name.lower()
        if name in self._adapters:
            logger.warning(f"Replacing already registered {self.kind} adapter '{name}'")
        self._adapters[name] = adapter
        descriptor = AdapterDescriptor(
            name=name, enabled=enabled, base_url=getattr(adapter, "base_url", None), kind=self.kind
        )
        self._descriptors[name] = descriptor
        logger.info(f"- {name}: {'enabled' if enabled else 'disabled'}")
        return descriptor

    def get(self, name: str) -> A | None:
        return self._adapters.get(name.lower())

    def is_enabled(self, name: str) -> bool:
        descriptor = self._descriptors.get(name.lower())
        return bool(descriptor and descriptor.enabled)

    def enabled(self) -> list[A]:
        return [self._adapters[name] for name, d in self._descriptors.items() if d.enabled]

    def set_enabled(self, name: str, enabled: bool) -> AdapterDescriptor:
        descriptor = self._descriptors.get(name.lower())
        if descriptor is None:
            raise UnknownAdapterError(f"Unknown {self.kind} adapter: {name}")
        descriptor.enabled = enabled
        logger.info(f"{descriptor.name} {self.kind} adapter {'enabled' if enabled else 'disabled'}")
        return descriptor

    def descriptors(self) -> list[AdapterDescriptor]:
        return [d.model_copy() for d in self._descriptors.values()]

    def route(self, content_id: str) -> A | None:
        """Return the enabled adapter that produced ``content_id``, if any."""
        ref = parse_content_id(content_id)
        if ref is None or ref.adapter is None:
            return None
        if not self.is_enabled(ref.adapter):
            logger.debug(f"No enabled {self.kind} adapter owns id {content_id}")
            return None
        return self._adapters[ref.adapter]

    def stats(self) -> dict[str, Any]:
        return {
            "total": len(self._descriptors),
            "enabled": sum(1 for d in self._descriptors.values() if d.enabled),
            "adapters": [d.model_dump() for d in self._descriptors.values()],
        }

    async def close(self) -> None:
        for name, adapter in self._adapters.items():
            try:
                await adapter.close()
            except Exception as e:
                logger.warning(f"Failed to close {self.kind} adapter {name}: {e}")
