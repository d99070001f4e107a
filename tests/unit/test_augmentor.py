"""Unit tests for the class augmentor."""

import inspect
import logging
from typing import Any

import pytest
from pymongo_legacy.adapter import AdapterBase, AdapterRegistry, augment
from pymongo_legacy.models import (
    ConfigurationError,
    Manifest,
    ManifestEntry,
    SingleWrap,
)

from fakes import FAKE_ENTRIES, RawCollection, make_adapter_classes, make_registry


class TestAugment:
    """Test cases for installing dual-mode methods."""

    def test_installs_every_entry(self) -> None:
        client, db, collection = make_adapter_classes()
        registry = make_registry(client, db, collection)

        augment(Manifest(FAKE_ENTRIES), registry)

        for entry in FAKE_ENTRIES:
            adapter_class = registry.resolve(entry.owner)
            method = adapter_class.__dict__[entry.operation]
            assert method.__manifest_entry__.operation == entry.operation

    def test_resolves_arities(self) -> None:
        client, db, collection = make_adapter_classes()
        bound = augment(Manifest(FAKE_ENTRIES), make_registry(client, db, collection))

        assert len(bound) == len(FAKE_ENTRIES)
        assert bound.entry("Collection", "count_documents").arity == 2
        assert bound.entry("Db", "create_collection").arity == 2
        assert bound.entry("MongoClient", "connect").arity == 0
        assert all(entry.arity is not None for entry in bound)

    def test_declared_arity_must_match(self) -> None:
        client, db, collection = make_adapter_classes()
        manifest = Manifest(
            [ManifestEntry(owner="Collection", operation="rename", arity=2)]
        )

        with pytest.raises(ConfigurationError, match="declared arity 2") as exc_info:
            augment(manifest, make_registry(client, db, collection))

        assert exc_info.value.owner == "Collection"
        assert exc_info.value.operation == "rename"

    def test_accepts_mapping_and_entry_list(self) -> None:
        client, db, collection = make_adapter_classes()

        bound = augment(
            [ManifestEntry(owner="Collection", operation="rename")],
            {"Collection": collection},
        )

        assert bound.entry("Collection", "rename").arity == 1
        assert "rename" in collection.__dict__

    def test_is_idempotent(self, raw_collection: RawCollection) -> None:
        client, db, collection = make_adapter_classes()
        registry = make_registry(client, db, collection)
        manifest = Manifest(FAKE_ENTRIES)

        first = augment(manifest, registry)
        first_method = collection.__dict__["rename"]
        second = augment(manifest, registry)

        assert list(first) == list(second)
        second_method = collection.__dict__["rename"]
        assert second_method is not first_method
        assert inspect.signature(second_method) == inspect.signature(first_method)
        assert (
            second_method.__manifest_entry__ == first_method.__manifest_entry__
        )

    def test_does_not_touch_underlying_class(self) -> None:
        client, db, collection = make_adapter_classes()
        original = RawCollection.__dict__["rename"]

        augment(Manifest(FAKE_ENTRIES), make_registry(client, db, collection))

        assert RawCollection.__dict__["rename"] is original

    def test_logs_installed_operations(self, caplog: Any) -> None:
        client, db, collection = make_adapter_classes()

        with caplog.at_level(logging.INFO, logger="pymongo_legacy.adapter.augmentor"):
            augment(Manifest(FAKE_ENTRIES), make_registry(client, db, collection))

        assert "Installed 4 dual-mode operations on CollectionAdapter" in caplog.text


class TestAugmentConfigurationErrors:
    """Test cases for configuration failures detected at setup time."""

    def test_duplicate_operation(self) -> None:
        with pytest.raises(ConfigurationError, match="more than once"):
            Manifest(
                [
                    ManifestEntry(owner="Collection", operation="rename"),
                    ManifestEntry(owner="Collection", operation="rename"),
                ]
            )

    def test_unresolved_wrap_target_installs_nothing(self) -> None:
        client, db, collection = make_adapter_classes()
        registry = make_registry(client, db, collection)
        manifest = Manifest(
            [
                ManifestEntry(owner="Collection", operation="count_documents"),
                ManifestEntry(
                    owner="Collection", operation="rename", wrap=SingleWrap("Renamed")
                ),
            ]
        )

        with pytest.raises(ConfigurationError, match="Renamed"):
            augment(manifest, registry)

        assert "count_documents" not in collection.__dict__
        assert "rename" not in collection.__dict__

    def test_forward_reference_resolved_before_augment(self) -> None:
        client, db, collection = make_adapter_classes()
        registry = AdapterRegistry()
        registry.register("Collection", collection)
        manifest = Manifest(
            [ManifestEntry(owner="Collection", operation="rename", wrap=SingleWrap("Db"))]
        )

        with pytest.raises(ConfigurationError):
            augment(manifest, registry)

        registry.register("Db", db)
        assert augment(manifest, registry).entry("Collection", "rename").arity == 1

    def test_unknown_owner(self) -> None:
        client, db, collection = make_adapter_classes()
        manifest = Manifest([ManifestEntry(owner="Admin", operation="ping")])

        with pytest.raises(ConfigurationError, match="no adapter class registered"):
            augment(manifest, make_registry(client, db, collection))

    def test_unknown_operation(self) -> None:
        client, db, collection = make_adapter_classes()
        manifest = Manifest([ManifestEntry(owner="Collection", operation="explode")])

        with pytest.raises(ConfigurationError, match="has no operation 'explode'"):
            augment(manifest, make_registry(client, db, collection))

    def test_missing_underlying_class(self) -> None:
        class Orphan(AdapterBase):
            pass

        manifest = Manifest([ManifestEntry(owner="Orphan", operation="close")])

        with pytest.raises(ConfigurationError, match="underlying_class"):
            augment(manifest, {"Orphan": Orphan})

    def test_var_positional_operation(self) -> None:
        class RawCursor:
            async def sort(self, *keys: Any) -> None:
                pass

        class CursorAdapter(AdapterBase):
            underlying_class = RawCursor

        manifest = Manifest([ManifestEntry(owner="Cursor", operation="sort")])

        with pytest.raises(ConfigurationError, match="cannot determine arity"):
            augment(manifest, {"Cursor": CursorAdapter})

    def test_refuses_to_shadow_hand_written_members(self) -> None:
        class CollectionAdapter(AdapterBase):
            underlying_class = RawCollection

            def rename(self, new_name: str) -> str:
                return new_name

        manifest = Manifest([ManifestEntry(owner="Collection", operation="rename")])

        with pytest.raises(ConfigurationError, match="already defines 'rename'"):
            augment(manifest, {"Collection": CollectionAdapter})
