import pytest

from app.services.sources.registry import AdapterRegistry, UnknownAdapterError
from conftest import FakeSourceAdapter


@pytest.fixture
def registry():
    registry = AdapterRegistry("source")
    registry.register(FakeSourceAdapter("alpha"))
    registry.register(FakeSourceAdapter("beta"), enabled=False)
    return registry


def test_lookup_is_case_insensitive(registry):
    assert registry.get("ALPHA").name == "alpha"
    assert "Beta" in registry
    assert len(registry) == 2


def test_enabled_lists_only_enabled_adapters(registry):
    assert [a.name for a in registry.enabled()] == ["alpha"]


def test_toggle(registry):
    registry.set_enabled("Beta", True)
    registry.set_enabled("alpha", False)

    assert [a.name for a in registry.enabled()] == ["beta"]
    assert registry.is_enabled("beta") and not registry.is_enabled("alpha")


def test_toggle_unknown_raises(registry):
    with pytest.raises(UnknownAdapterError):
        registry.set_enabled("gamma", True)


def test_route(registry):
    assert registry.route("scraped:alpha:dune").name == "alpha"
    assert registry.route("scraped:ALPHA:dune:1:2").name == "alpha"
    assert registry.route("scraped:beta:dune") is None
    assert registry.route("scraped:gamma:dune") is None
    assert registry.route("tt0133093") is None


def test_descriptors_are_copies(registry):
    registry.descriptors()[0].enabled = False

    assert registry.is_enabled("alpha")


def test_stats(registry):
    stats = registry.stats()

    assert stats["total"] == 2 and stats["enabled"] == 1
    assert stats["adapters"][1] == {
        "name": "beta",
        "enabled": False,
        "base_url": "https://beta.example",
        "kind": "source",
    }


@pytest.mark.asyncio
async def test_close_closes_every_adapter(registry):
    await registry.close()

    assert registry.get("alpha").closed and registry.get("beta").closed
