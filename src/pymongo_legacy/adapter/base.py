"""Base class for adapter instances."""

from typing import Any, ClassVar


class AdapterBase:
    """Adapter owning exactly one underlying-library instance.

    Attributes that the adapter does not define itself are read from the
    wrapped instance. The adapter never assigns attributes on it.
    """

    underlying_class: ClassVar[type | None] = None

    def __init__(self, wrapped: Any) -> None:
        """Initialize the adapter around an underlying instance.

        Args:
            wrapped: Instance of ``underlying_class`` to delegate to

        Raises:
            TypeError: If ``wrapped`` is not an instance of ``underlying_class``
        """
        underlying = type(self).underlying_class
        if underlying is not None and not isinstance(wrapped, underlying):
            raise TypeError(
                f"{type(self).__name__} wraps {underlying.__name__} instances, "
                f"got {type(wrapped).__name__}"
            )
        self._wrapped = wrapped

    @classmethod
    def wrap(cls, wrapped: Any) -> "AdapterBase":
        """Build an adapter around ``wrapped`` without running subclass constructors."""
        adapter = cls.__new__(cls)
        AdapterBase.__init__(adapter, wrapped)
        return adapter

    def unwrap(self) -> Any:
        """Return the underlying instance owned by this adapter."""
        return self._wrapped

    def __getattr__(self, name: str) -> Any:
        # Only reached for attributes missing on the adapter itself
        if name == "_wrapped":
            raise AttributeError(name)
        return getattr(self._wrapped, name)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AdapterBase):
            return bool(self._wrapped == other._wrapped)
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash(self._wrapped)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._wrapped!r})"
