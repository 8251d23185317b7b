"""Outbound chat rate limiting."""

from .rate_limiter import ChatRateLimiter  # noqa: F401

__all__ = ["ChatRateLimiter"]
