"""Operation manifest models for the dual calling convention layer."""

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ConfigurationError(Exception):
    """Raised when a manifest or its adapter classes are inconsistent.

    Configuration errors are detected at load time, before any adapted
    operation can be called.
    """

    def __init__(
        self, message: str, owner: str | None = None, operation: str | None = None
    ) -> None:
        super().__init__(message)
        self.owner = owner
        self.operation = operation


class WrapKind(str, Enum):
    """How the resolved value of an operation is rewrapped."""

    NONE = "none"
    SINGLE = "single"
    SEQUENCE = "sequence"


class WrapRule(BaseModel):
    """Result wrapping rule for one operation."""

    model_config = ConfigDict(frozen=True)

    kind: WrapKind = Field(default=WrapKind.NONE, description="Wrapping strategy")
    target: str | None = Field(
        default=None, description="Registry name of the adapter class to build"
    )

    @model_validator(mode="after")
    def check_target(self) -> "WrapRule":
        if self.kind == WrapKind.NONE and self.target is not None:
            raise ValueError("A 'none' wrap rule cannot name a target")
        if self.kind != WrapKind.NONE and not (self.target and self.target.strip()):
            raise ValueError(f"A '{self.kind.value}' wrap rule requires a target")
        return self

    def __str__(self) -> str:
        if self.kind == WrapKind.SINGLE:
            return f"SingleWrap({self.target})"
        if self.kind == WrapKind.SEQUENCE:
            return f"SequenceWrap({self.target})"
        return "-"


def _target_name(target: str | type) -> str:
    return target if isinstance(target, str) else target.__name__


def SingleWrap(target: str | type) -> WrapRule:  # noqa: N802
    """Wrap the resolved value in one adapter of ``target``."""
    return WrapRule(kind=WrapKind.SINGLE, target=_target_name(target))


def SequenceWrap(target: str | type) -> WrapRule:  # noqa: N802
    """Wrap each element of the resolved sequence in an adapter of ``target``."""
    return WrapRule(kind=WrapKind.SEQUENCE, target=_target_name(target))


class ManifestEntry(BaseModel):
    """One adaptable asynchronous operation."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., description="Adapter class owning the operation")
    operation: str = Field(..., description="Name of the underlying operation")
    arity: int | None = Field(
        default=None,
        ge=0,
        description="Positional parameters of the underlying operation "
        "(resolved from its signature when omitted)",
    )
    wrap: WrapRule | None = Field(default=None, description="Result wrapping rule")

    @field_validator("owner", "operation")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"'{v}' is not a valid Python identifier")
        return v

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.operation}"

    @property
    def wraps_result(self) -> bool:
        return self.wrap is not None and self.wrap.kind != WrapKind.NONE


class Manifest:
    """Immutable, ordered table of manifest entries grouped by owner.

    Construction fails fast with :class:`ConfigurationError` when the same
    operation is declared twice for one owner.
    """

    def __init__(self, entries: Iterable[ManifestEntry]) -> None:
        self._entries: tuple[ManifestEntry, ...] = tuple(entries)
        self._by_owner: dict[str, dict[str, ManifestEntry]] = {}

        for entry in self._entries:
            operations = self._by_owner.setdefault(entry.owner, {})
            if entry.operation in operations:
                raise ConfigurationError(
                    f"Operation {entry.qualified_name} is declared more than once",
                    owner=entry.owner,
                    operation=entry.operation,
                )
            operations[entry.operation] = entry

    @classmethod
    def from_table(cls, rows: Iterable[tuple[Any, ...]]) -> "Manifest":
        """Build a manifest from ``(owner, operation[, wrap])`` tuples."""
        entries = []
        for row in rows:
            if len(row) == 2:
                owner, operation = row
                wrap = None
            elif len(row) == 3:
                owner, operation, wrap = row
            else:
                raise ConfigurationError(f"Malformed manifest row: {row!r}")
            entries.append(ManifestEntry(owner=owner, operation=operation, wrap=wrap))
        return cls(entries)

    def owners(self) -> tuple[str, ...]:
        return tuple(self._by_owner)

    def operations(self, owner: str) -> tuple[ManifestEntry, ...]:
        return tuple(self._by_owner.get(owner, {}).values())

    def entry(self, owner: str, operation: str) -> ManifestEntry:
        try:
            return self._by_owner[owner][operation]
        except KeyError:
            raise KeyError(f"{owner}.{operation}") from None

    def wrap_targets(self) -> set[str]:
        """Names of every adapter class referenced by a wrap rule."""
        return {
            entry.wrap.target
            for entry in self._entries
            if entry.wrap is not None and entry.wrap.target is not None
        }

    def __iter__(self) -> Iterator[ManifestEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item: object) -> bool:
        return item in self._entries

    def __repr__(self) -> str:
        return f"Manifest({len(self._entries)} operations, owners={list(self._by_owner)})"
