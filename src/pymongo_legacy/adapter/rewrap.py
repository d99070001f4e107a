"""Result rewrapping engine.

Turns raw values resolved by underlying operations into the adapter-facing
values described by a :class:`~pymongo_legacy.models.manifest.WrapRule`.
"""

import logging
from collections.abc import Iterable
from typing import Any

from ..models.manifest import ConfigurationError, WrapKind, WrapRule
from .base import AdapterBase

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name to adapter class mapping used to resolve wrap targets.

    Wrap rules may reference classes that are registered later, as long as
    they are registered before the first call that needs them.
    """

    def __init__(self) -> None:
        self._classes: dict[str, type[AdapterBase]] = {}

    def register(self, name: str, cls: type[AdapterBase]) -> type[AdapterBase]:
        """Register an adapter class under ``name``.

        Args:
            name: Registry name used by manifest owners and wrap targets
            cls: Adapter class

        Returns:
            The registered class, so this can be used after a class statement

        Raises:
            ConfigurationError: If another class is already registered as ``name``
        """
        if not (isinstance(cls, type) and issubclass(cls, AdapterBase)):
            raise ConfigurationError(f"{cls!r} is not an adapter class", owner=name)

        existing = self._classes.get(name)
        if existing is not None and existing is not cls:
            raise ConfigurationError(
                f"Adapter name '{name}' is already registered to {existing.__name__}",
                owner=name,
            )

        self._classes[name] = cls
        logger.debug(f"Registered adapter class {cls.__name__} as '{name}'")
        return cls

    def resolve(self, name: str) -> type[AdapterBase]:
        """Return the adapter class registered as ``name``.

        Raises:
            ConfigurationError: If nothing is registered under ``name``
        """
        try:
            return self._classes[name]
        except KeyError:
            raise ConfigurationError(
                f"No adapter class registered as '{name}'", owner=name
            ) from None

    def names(self) -> tuple[str, ...]:
        return tuple(self._classes)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __len__(self) -> int:
        return len(self._classes)


def _wrap_one(value: Any, target: type[AdapterBase]) -> Any:
    if value is None or isinstance(value, target):
        return value
    return target.wrap(value)


def rewrap(value: Any, rule: WrapRule | None, registry: AdapterRegistry) -> Any:
    """Shape a raw resolved value according to ``rule``.

    The raw value is never mutated; only new adapter objects are built
    around it. Values that are already adapters of the target class are
    returned as they are.

    Args:
        value: Value resolved by the underlying operation
        rule: Wrapping rule of the operation, or None
        registry: Registry used to resolve the rule's target

    Returns:
        ``value`` itself, one adapter, or a list of adapters in input order

    Raises:
        ConfigurationError: If the rule's target is not registered
        TypeError: If the value cannot be wrapped by the target class
    """
    if rule is None or rule.kind == WrapKind.NONE:
        return value

    target = registry.resolve(rule.target)  # type: ignore[arg-type]

    if rule.kind == WrapKind.SINGLE:
        return _wrap_one(value, target)

    if value is None:
        return []
    if not isinstance(value, Iterable) or isinstance(value, (str, bytes, dict)):
        raise TypeError(
            f"SequenceWrap({rule.target}) expected a sequence, got {type(value).__name__}"
        )
    return [_wrap_one(item, target) for item in value]
