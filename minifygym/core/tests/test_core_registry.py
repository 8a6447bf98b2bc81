import pytest

from minifygym.core import Registry


def test_register_and_get():
    registry = Registry()
    registry.register("gzip", object)
    assert "gzip" in registry
    assert registry.get("gzip") is object
    assert registry.list() == ("gzip",)


def test_duplicate_and_missing_names():
    registry = Registry()
    registry.register("a", 1)
    with pytest.raises(KeyError):
        registry.register("a", 2)
    with pytest.raises(KeyError):
        registry.get("b")


def test_frozen_registry_rejects_registration():
    registry = Registry()
    registry.register("a", 1)
    registry.freeze()
    assert registry.frozen
    with pytest.raises(RuntimeError):
        registry.register("b", 2)
    assert registry.items() == {"a": 1}
