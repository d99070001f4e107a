"""Dual-mode invocation core.

Builds methods that accept either calling convention for an asynchronous
operation:

* awaitable mode: ``result = await collection.rename("pets")``
* callback mode: ``collection.rename("pets", callback)`` where ``callback``
  is invoked once as ``callback(error, result)`` after the operation settles.

The convention is chosen per call. A trailing positional argument is only
treated as the callback when it occupies a slot beyond the operation's
declared positional parameters, so callables passed as regular arguments are
forwarded untouched. ``callback=`` may be passed as a keyword instead.
"""

import asyncio
import functools
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..models.manifest import ManifestEntry, WrapKind, WrapRule
from .base import AdapterBase
from .rewrap import AdapterRegistry, rewrap

logger = logging.getLogger(__name__)

Callback = Callable[[BaseException | None, Any], Any]

CALLBACK_KEYWORD = "callback"


class CallingConvention(str, Enum):
    """Calling convention selected for one call."""

    PROMISE = "promise"
    CALLBACK = "callback"


@dataclass(eq=False)
class PendingOperation:
    """One in-flight callback-mode call.

    Kept referenced until the underlying awaitable settles so the scheduled
    task cannot be garbage collected mid-flight.
    """

    operation: str
    args: tuple[Any, ...]
    kwargs: dict[str, Any]
    convention: CallingConvention
    future: "asyncio.Future[Any] | None" = None
    settled: bool = field(default=False)


_in_flight: set[PendingOperation] = set()


def pending_operations() -> tuple[PendingOperation, ...]:
    """Snapshot of callback-mode calls that have not settled yet."""
    return tuple(_in_flight)


def positional_parameters(
    signature: inspect.Signature, bound: bool = True
) -> tuple[inspect.Parameter, ...]:
    """List the positional parameters of an operation.

    Args:
        signature: Signature of the underlying function
        bound: Whether the first parameter is ``self`` and must be skipped

    Returns:
        Positional parameters in declaration order

    Raises:
        ValueError: If the signature takes ``*args``
    """
    parameters = list(signature.parameters.values())
    if bound:
        parameters = parameters[1:]

    positional = []
    for parameter in parameters:
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            raise ValueError("operations taking *args have no fixed arity")
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            positional.append(parameter)
    return tuple(positional)


def positional_arity(signature: inspect.Signature, bound: bool = True) -> int:
    """Count the positional parameters of an operation."""
    return len(positional_parameters(signature, bound))


def split_callback(
    args: tuple[Any, ...], kwargs: dict[str, Any], arity: int
) -> tuple[tuple[Any, ...], dict[str, Any], Callback | None]:
    """Separate the callback, if any, from the arguments of one call.

    Returns:
        The arguments to forward, the keyword arguments to forward and the
        callback (None in awaitable mode)

    Raises:
        TypeError: If ``callback=`` is not callable or a callback is given twice
    """
    callback = None
    if CALLBACK_KEYWORD in kwargs:
        kwargs = dict(kwargs)
        callback = kwargs.pop(CALLBACK_KEYWORD)
        if callback is not None and not callable(callback):
            raise TypeError(
                f"callback must be callable, got {type(callback).__name__}"
            )

    if len(args) > arity and callable(args[-1]):
        if callback is not None:
            raise TypeError("callback was passed both positionally and by keyword")
        callback = args[-1]
        args = args[:-1]

    return args, kwargs, callback


def _unwrap_argument(value: Any) -> Any:
    if isinstance(value, AdapterBase):
        return value.unwrap()
    return value


async def _resolve_wrapped(
    awaitable: Awaitable[Any], rule: WrapRule, registry: AdapterRegistry
) -> Any:
    return rewrap(await awaitable, rule, registry)


def _settle(
    pending: PendingOperation,
    callback: Callback,
    rule: WrapRule | None,
    registry: AdapterRegistry,
    future: "asyncio.Future[Any]",
) -> None:
    _in_flight.discard(pending)
    if pending.settled:
        return
    pending.settled = True

    error: BaseException | None
    result = None
    if future.cancelled():
        error = asyncio.CancelledError()
    else:
        error = future.exception()
        if error is None:
            try:
                result = rewrap(future.result(), rule, registry)
            except Exception as exc:
                error = exc

    if error is not None:
        logger.debug(f"{pending.operation} failed, passing {error!r} to callback")
    callback(error, result)


def _warn_callable_in_optional_slot(
    name: str, args: tuple[Any, ...], parameters: tuple[inspect.Parameter, ...]
) -> None:
    if not args or not callable(args[-1]) or len(args) > len(parameters):
        return
    parameter = parameters[len(args) - 1]
    if parameter.default is inspect.Parameter.empty:
        return
    logger.warning(
        f"{name}() received a callable for its optional parameter '{parameter.name}' "
        f"and runs in awaitable mode; pass callback=... to be called back"
    )


def invoke(
    name: str,
    operation: Callable[..., Any],
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    arity: int,
    rule: WrapRule | None,
    registry: AdapterRegistry,
    parameters: tuple[inspect.Parameter, ...] = (),
) -> Any:
    """Run one adapted call in the convention chosen by its arguments.

    Args:
        name: Qualified operation name, used in messages
        operation: Underlying operation, already bound to its instance
        args: Positional arguments as supplied by the caller
        kwargs: Keyword arguments as supplied by the caller
        arity: Number of positional parameters the operation declares
        rule: Result wrapping rule
        registry: Registry resolving the rule's target
        parameters: Positional parameters of the operation, used to spot
            callbacks that were passed in an optional parameter's slot

    Returns:
        An awaitable in awaitable mode, None in callback mode

    Raises:
        RuntimeError: If a callback is given outside a running event loop
        TypeError: If the operation does not return an awaitable
    """
    args, kwargs, callback = split_callback(args, kwargs, arity)
    convention = (
        CallingConvention.PROMISE if callback is None else CallingConvention.CALLBACK
    )
    logger.debug(f"Dispatching {name} in {convention.value} mode")
    if callback is None:
        _warn_callable_in_optional_slot(name, args, parameters)

    # Adapters passed back in are replaced by the instances they own
    args = tuple(_unwrap_argument(arg) for arg in args)
    kwargs = {key: _unwrap_argument(value) for key, value in kwargs.items()}

    if callback is not None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            raise RuntimeError(
                f"{name}() was called with a callback outside of a running event loop. "
                f"Use 'await {name}()' or call it from a coroutine instead."
            ) from None

    awaitable = operation(*args, **kwargs)
    if not inspect.isawaitable(awaitable):
        raise TypeError(
            f"{name}() returned {type(awaitable).__name__}, expected an awaitable"
        )

    if callback is None:
        if rule is None or rule.kind == WrapKind.NONE:
            return awaitable
        return _resolve_wrapped(awaitable, rule, registry)

    future = asyncio.ensure_future(awaitable)
    pending = PendingOperation(
        operation=name,
        args=args,
        kwargs=kwargs,
        convention=convention,
        future=future,
    )
    _in_flight.add(pending)
    future.add_done_callback(
        functools.partial(_settle, pending, callback, rule, registry)
    )
    return None


def dual_mode(
    entry: ManifestEntry,
    registry: AdapterRegistry,
    signature: inspect.Signature,
    doc: str | None = None,
) -> Callable[..., Any]:
    """Synthesize the adapter method for one manifest entry.

    The returned function reports ``signature`` through ``__signature__``,
    so introspection sees the same parameters as the underlying operation.
    The underlying operation is looked up on the wrapped instance at call
    time.

    Args:
        entry: Manifest entry with a resolved arity
        registry: Registry resolving the entry's wrap target
        signature: Signature of the underlying function, including ``self``
        doc: Docstring to expose

    Returns:
        A function suitable for installation on the adapter class
    """
    if entry.arity is None:
        raise ValueError(f"{entry.qualified_name} has no resolved arity")

    name = entry.qualified_name
    operation_name = entry.operation
    arity = entry.arity
    rule = entry.wrap
    parameters = positional_parameters(signature)

    def method(self: Any, *args: Any, **kwargs: Any) -> Any:
        operation = getattr(self.unwrap(), operation_name)
        return invoke(
            name, operation, args, kwargs, arity, rule, registry, parameters
        )

    method.__name__ = operation_name
    method.__qualname__ = name
    method.__doc__ = doc
    method.__signature__ = signature  # type: ignore[attr-defined]
    method.__manifest_entry__ = entry  # type: ignore[attr-defined]
    return method


def dual_mode_function(
    function: Callable[..., Awaitable[Any]],
    registry: AdapterRegistry,
    rule: WrapRule | None = None,
    name: str | None = None,
) -> Callable[..., Any]:
    """Wrap a free-standing coroutine function in the dual calling convention.

    Used for operations that are not bound to an adapter instance, such as
    class-level constructors that connect before resolving.
    """
    signature = inspect.signature(function)
    parameters = positional_parameters(signature, bound=False)
    arity = len(parameters)
    qualified_name = name or function.__qualname__

    @functools.wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return invoke(
            qualified_name, function, args, kwargs, arity, rule, registry, parameters
        )

    wrapper.__signature__ = signature  # type: ignore[attr-defined]
    return wrapper
