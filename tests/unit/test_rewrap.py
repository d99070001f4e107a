"""Unit tests for the result rewrapping engine and adapter instances."""

import pytest
from pymongo_legacy.adapter import AdapterBase, AdapterRegistry, rewrap
from pymongo_legacy.models import ConfigurationError, SequenceWrap, SingleWrap, WrapRule

from fakes import RawClient, RawCollection, RawDb, make_adapter_classes, make_registry


@pytest.fixture
def registry() -> AdapterRegistry:
    return make_registry(*make_adapter_classes())


@pytest.fixture
def raw_db() -> RawDb:
    return RawDb(RawClient("mongodb://iLoveJavascript"), "animals")


class TestRewrap:
    """Test cases for rewrap()."""

    def test_no_rule_passes_value_through(self, registry: AdapterRegistry) -> None:
        value = {"ok": 1}
        assert rewrap(value, None, registry) is value
        assert rewrap(value, WrapRule(), registry) is value

    def test_single_wrap(self, registry: AdapterRegistry, raw_db: RawDb) -> None:
        raw = RawCollection(raw_db, "pets")

        wrapped = rewrap(raw, SingleWrap("Collection"), registry)

        assert isinstance(wrapped, registry.resolve("Collection"))
        assert wrapped.unwrap() is raw
        assert wrapped.name == "pets"

    def test_single_wrap_never_double_wraps(
        self, registry: AdapterRegistry, raw_db: RawDb
    ) -> None:
        rule = SingleWrap("Collection")
        once = rewrap(RawCollection(raw_db, "pets"), rule, registry)

        assert rewrap(once, rule, registry) is once

    def test_single_wrap_passes_none(self, registry: AdapterRegistry) -> None:
        assert rewrap(None, SingleWrap("Collection"), registry) is None

    def test_single_wrap_rejects_foreign_values(self, registry: AdapterRegistry) -> None:
        with pytest.raises(TypeError, match="wraps RawCollection instances"):
            rewrap({"name": "pets"}, SingleWrap("Collection"), registry)

    def test_sequence_wrap_preserves_order(
        self, registry: AdapterRegistry, raw_db: RawDb
    ) -> None:
        raw = [RawCollection(raw_db, name) for name in ("c", "a", "b")]

        wrapped = rewrap(raw, SequenceWrap("Collection"), registry)

        assert [item.unwrap() for item in wrapped] == raw
        assert [item.name for item in wrapped] == ["c", "a", "b"]

    def test_sequence_wrap_does_not_mutate_input(
        self, registry: AdapterRegistry, raw_db: RawDb
    ) -> None:
        raw = [RawCollection(raw_db, "a")]
        snapshot = list(raw)

        wrapped = rewrap(raw, SequenceWrap("Collection"), registry)

        assert raw == snapshot
        assert wrapped is not raw

    def test_sequence_wrap_accepts_any_iterable(
        self, registry: AdapterRegistry, raw_db: RawDb
    ) -> None:
        raw = (RawCollection(raw_db, name) for name in ("a", "b"))

        assert len(rewrap(raw, SequenceWrap("Collection"), registry)) == 2

    def test_sequence_wrap_empty(self, registry: AdapterRegistry) -> None:
        assert rewrap([], SequenceWrap("Collection"), registry) == []
        assert rewrap(None, SequenceWrap("Collection"), registry) == []

    def test_sequence_wrap_rejects_non_sequences(self, registry: AdapterRegistry) -> None:
        with pytest.raises(TypeError, match="expected a sequence"):
            rewrap({"a": 1}, SequenceWrap("Collection"), registry)

    def test_unregistered_target(self, registry: AdapterRegistry) -> None:
        with pytest.raises(ConfigurationError, match="No adapter class registered"):
            rewrap(object(), SingleWrap("Admin"), registry)


class TestAdapterRegistry:
    """Test cases for AdapterRegistry."""

    def test_register_and_resolve(self) -> None:
        client, _, _ = make_adapter_classes()
        registry = AdapterRegistry()

        assert registry.register("MongoClient", client) is client
        assert registry.resolve("MongoClient") is client
        assert "MongoClient" in registry
        assert registry.names() == ("MongoClient",)
        assert len(registry) == 1

    def test_register_same_class_twice(self) -> None:
        client, _, _ = make_adapter_classes()
        registry = AdapterRegistry()

        registry.register("MongoClient", client)
        registry.register("MongoClient", client)

        assert len(registry) == 1

    def test_register_conflicting_class(self) -> None:
        client, db, _ = make_adapter_classes()
        registry = AdapterRegistry()
        registry.register("MongoClient", client)

        with pytest.raises(ConfigurationError, match="already registered"):
            registry.register("MongoClient", db)

    def test_register_non_adapter(self) -> None:
        with pytest.raises(ConfigurationError, match="not an adapter class"):
            AdapterRegistry().register("Thing", dict)  # type: ignore[arg-type]


class TestAdapterBase:
    """Test cases for adapter instances."""

    def test_round_trip(self, raw_db: RawDb) -> None:
        _, db_adapter, _ = make_adapter_classes()

        assert db_adapter(raw_db).unwrap() is raw_db
        assert db_adapter.wrap(raw_db).unwrap() is raw_db

    def test_type_check(self) -> None:
        _, db_adapter, _ = make_adapter_classes()

        with pytest.raises(TypeError):
            db_adapter(object())

    def test_untyped_adapter_accepts_anything(self) -> None:
        value = object()
        assert AdapterBase(value).unwrap() is value

    def test_attribute_forwarding(self, raw_db: RawDb) -> None:
        _, db_adapter, _ = make_adapter_classes()
        db = db_adapter(raw_db)

        assert db.name == "animals"
        with pytest.raises(AttributeError):
            db.missing_attribute

    def test_equality_follows_wrapped_instance(self, raw_db: RawDb) -> None:
        _, db_adapter, _ = make_adapter_classes()
        other = RawDb(raw_db.client, "animals")

        assert db_adapter(raw_db) == db_adapter(raw_db)
        assert db_adapter(raw_db) != db_adapter(other)
        assert hash(db_adapter(raw_db)) == hash(db_adapter(raw_db))
        assert db_adapter(raw_db) != raw_db

    def test_repr(self, raw_db: RawDb) -> None:
        _, db_adapter, _ = make_adapter_classes()
        assert repr(db_adapter(raw_db)).startswith("DbAdapter(<")
