"""Shared fixtures for the adapter layer tests."""

from collections.abc import Callable
from typing import Any

import pytest
from fakes import (
    FAKE_ENTRIES,
    CallbackRecorder,
    FakeApi,
    RawClient,
    RawCollection,
    RawDb,
    make_adapter_classes,
    make_registry,
    settled_future,
)
from pymongo_legacy.adapter import augment
from pymongo_legacy.models import Manifest


@pytest.fixture
def fake_api() -> FakeApi:
    """Adapter classes for the fake library, augmented with FAKE_ENTRIES."""
    client, db, collection = make_adapter_classes()
    registry = make_registry(client, db, collection)
    manifest = augment(Manifest(FAKE_ENTRIES), registry)
    return FakeApi(
        registry=registry,
        manifest=manifest,
        Client=client,
        Db=db,
        Collection=collection,
    )


@pytest.fixture
def raw_collection() -> RawCollection:
    return RawCollection(RawDb(RawClient("mongodb://iLoveJavascript"), "animals"), "pets")


@pytest.fixture
def callback() -> CallbackRecorder:
    return CallbackRecorder()


@pytest.fixture
def make_future() -> Callable[..., Any]:
    return settled_future
