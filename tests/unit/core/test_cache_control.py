"""Tests for cache status and HTTP cache-control entities."""

from shopcache.core.entities import (
    CacheLookup,
    CacheScope,
    CacheStatus,
    ResponseCachePolicy,
)


class TestCacheLookup:
    """Tests for CacheLookup."""

    def test_hit(self) -> None:
        lookup = CacheLookup.hit({"a": 1})

        assert lookup.is_hit is True
        assert lookup.status == CacheStatus.HIT
        assert lookup.value == {"a": 1}

    def test_miss(self) -> None:
        lookup = CacheLookup.miss()

        assert lookup.is_hit is False
        assert lookup.value is None

    def test_hit_may_carry_falsy_value(self) -> None:
        """Test an empty cached list is still a hit."""
        assert CacheLookup.hit([]).is_hit is True


class TestResponseCachePolicy:
    """Tests for ResponseCachePolicy."""

    def test_public_header(self) -> None:
        assert ResponseCachePolicy(max_age=300).to_http_header() == "public, max-age=300"

    def test_private_header(self) -> None:
        policy = ResponseCachePolicy(max_age=60, scope=CacheScope.PRIVATE)
        assert policy.to_http_header() == "private, max-age=60"

    def test_zero_max_age_is_not_cacheable(self) -> None:
        policy = ResponseCachePolicy(max_age=0)

        assert policy.is_cacheable is False
        assert policy.to_http_header() == "no-store"
