"""Class augmentor: installs dual-mode methods on adapter classes."""

import inspect
import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from ..models.manifest import ConfigurationError, Manifest, ManifestEntry
from .base import AdapterBase
from .dual_mode import dual_mode, positional_arity
from .rewrap import AdapterRegistry

logger = logging.getLogger(__name__)


def _as_registry(
    adapters: AdapterRegistry | Mapping[str, type[AdapterBase]],
) -> AdapterRegistry:
    if isinstance(adapters, AdapterRegistry):
        return adapters
    registry = AdapterRegistry()
    for name, cls in adapters.items():
        registry.register(name, cls)
    return registry


def _bind_entry(
    entry: ManifestEntry, registry: AdapterRegistry
) -> tuple[type[AdapterBase], ManifestEntry, inspect.Signature, str | None]:
    """Check one entry against its adapter class and resolve its arity."""
    if entry.owner not in registry:
        raise ConfigurationError(
            f"{entry.qualified_name}: no adapter class registered as '{entry.owner}'",
            owner=entry.owner,
            operation=entry.operation,
        )
    adapter_class = registry.resolve(entry.owner)

    underlying = adapter_class.underlying_class
    if underlying is None:
        raise ConfigurationError(
            f"{entry.qualified_name}: {adapter_class.__name__} does not declare "
            f"an underlying_class",
            owner=entry.owner,
            operation=entry.operation,
        )

    function = getattr(underlying, entry.operation, None)
    if function is None or not callable(function):
        raise ConfigurationError(
            f"{entry.qualified_name}: {underlying.__name__} has no operation "
            f"'{entry.operation}'",
            owner=entry.owner,
            operation=entry.operation,
        )

    # Hand-written members of the adapter class must not be replaced
    existing = adapter_class.__dict__.get(entry.operation)
    if existing is not None and not hasattr(existing, "__manifest_entry__"):
        raise ConfigurationError(
            f"{entry.qualified_name}: {adapter_class.__name__} already defines "
            f"'{entry.operation}'",
            owner=entry.owner,
            operation=entry.operation,
        )

    try:
        signature = inspect.signature(function)
        arity = positional_arity(signature)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"{entry.qualified_name}: cannot determine arity: {e}",
            owner=entry.owner,
            operation=entry.operation,
        ) from e

    if entry.arity is None:
        entry = entry.model_copy(update={"arity": arity})
    elif entry.arity != arity:
        raise ConfigurationError(
            f"{entry.qualified_name}: declared arity {entry.arity} does not match "
            f"{underlying.__name__}.{entry.operation} which takes {arity}",
            owner=entry.owner,
            operation=entry.operation,
        )

    return adapter_class, entry, signature, inspect.getdoc(function)


def augment(
    manifest: Manifest | Iterable[ManifestEntry],
    adapters: AdapterRegistry | Mapping[str, type[AdapterBase]],
) -> Manifest:
    """Install one dual-mode method per manifest entry on its adapter class.

    Every entry is validated before anything is installed, so a bad
    manifest leaves the adapter classes untouched. Running this again with
    the same manifest replaces the installed methods with equivalent ones.

    Args:
        manifest: Operations to install
        adapters: Registry, or mapping of owner name to adapter class

    Returns:
        The manifest with every arity resolved

    Raises:
        ConfigurationError: If an owner, operation or wrap target cannot be
            resolved, an arity does not match, or an operation is declared twice
    """
    if not isinstance(manifest, Manifest):
        manifest = Manifest(manifest)
    registry = _as_registry(adapters)

    missing = sorted(
        target for target in manifest.wrap_targets() if target not in registry
    )
    if missing:
        raise ConfigurationError(
            f"Wrap targets are not registered adapter classes: {', '.join(missing)}"
        )

    bound = [_bind_entry(entry, registry) for entry in manifest]

    installed: Counter[str] = Counter()
    for adapter_class, entry, signature, doc in bound:
        setattr(
            adapter_class,
            entry.operation,
            dual_mode(entry, registry, signature, doc),
        )
        installed[adapter_class.__name__] += 1

    for class_name, count in installed.items():
        logger.info(f"Installed {count} dual-mode operations on {class_name}")

    return Manifest(entry for _, entry, _, _ in bound)
