"""Cache-aside decorators for async data-access functions.

These decorators wrap repository or service functions so that reads
go through the cache and writes clear the keys they affect. The cache
service is passed explicitly rather than configured globally.
"""

import functools
import inspect
import re
from collections.abc import Callable
from typing import Any, TypeVar

from shopcache.core.services.cache_service import TTL, CacheService

F = TypeVar("F", bound=Callable[..., Any])


def cached(
    cache: CacheService,
    key: str | Callable[..., str],
    ttl: TTL = None,
) -> Callable[[F], F]:
    """Decorator for caching async function results.

    On a hit the function is not called. On a miss its result is
    stored under the key with the TTL and returned.

    Args:
        cache: The cache service to read from and write to.
        key: Key template with ``{arg_name}`` placeholders, or a
            callable receiving the call's arguments and returning the key.
        ttl: Time-to-live in seconds or timedelta. Uses config default if None.

    Returns:
        Decorated function.

    Example:
        @cached(cache, key="product:id={product_id}", ttl=CacheTTL.DETAIL)
        async def get_product(product_id: str) -> dict:
            return await db.products.find_one({"_id": product_id})
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache_key = _resolve_key(key, signature, args, kwargs)
            return await cache.get_or_set(
                cache_key,
                lambda: func(*args, **kwargs),
                ttl,
            )

        return wrapper  # type: ignore

    return decorator


def invalidates(cache: CacheService, *patterns: str) -> Callable[[F], F]:
    """Decorator for invalidating cache entries after a write.

    Executes the decorated function and then deletes every key matching
    the patterns. Patterns without ``*`` are deleted as single keys.

    Args:
        cache: The cache service to delete from.
        *patterns: Keys or glob patterns. Supports {arg_name} interpolation.

    Returns:
        Decorated function.

    Example:
        @invalidates(cache, "product:id={product_id}", "products:*")
        async def update_product(product_id: str, data: dict) -> dict:
            return await db.products.update_one(...)
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            # Execute function first
            result = await func(*args, **kwargs)

            arguments = _bind_arguments(signature, args, kwargs)
            for pattern in patterns:
                resolved = _interpolate_string(pattern, arguments)
                if "*" in resolved:
                    await cache.delete_pattern(resolved)
                else:
                    await cache.delete(resolved)

            return result

        return wrapper  # type: ignore

    return decorator


def _resolve_key(
    key: str | Callable[..., str],
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> str:
    if callable(key):
        return key(*args, **kwargs)
    return _interpolate_string(key, _bind_arguments(signature, args, kwargs))


def _bind_arguments(
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Map positional and keyword arguments to parameter names."""
    bound = signature.bind_partial(*args, **kwargs)
    bound.apply_defaults()
    return dict(bound.arguments)


def _interpolate_string(template: str, arguments: dict[str, Any]) -> str:
    """Interpolate {arg_name} placeholders in string.

    Args:
        template: String with {arg_name} placeholders.
        arguments: Bound call arguments by parameter name.

    Returns:
        Interpolated string. Unknown placeholders are kept as-is.
    """
    pattern = r"\{(\w+)\}"

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in arguments:
            return str(arguments[name])
        return match.group(0)  # Keep original if not found

    return re.sub(pattern, replacer, template)
