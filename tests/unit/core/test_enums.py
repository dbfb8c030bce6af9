"""Unit tests for core enums."""

from laakhay.cdf.core import ErrorKind, HttpMethod


def test_post_is_not_idempotent():
    """Test only POST is treated as non-idempotent."""
    assert not HttpMethod.POST.is_idempotent
    assert HttpMethod.GET.is_idempotent
    assert HttpMethod.PUT.is_idempotent
    assert HttpMethod.DELETE.is_idempotent


def test_error_kind_values_are_strings():
    """Test error kinds log as plain strings."""
    assert ErrorKind.RATE_LIMITED == "rate_limited"
    assert ErrorKind("not_found") is ErrorKind.NOT_FOUND
