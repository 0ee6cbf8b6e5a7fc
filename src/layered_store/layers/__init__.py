"""Layers that wrap accessors."""

from layered_store.layers._sanity_check import (
    ListerState,
    SanityCheckAccessor,
    SanityCheckLayer,
    SanityCheckLister,
    check_path_mode,
    unexpected_response,
)

__all__ = [
    "ListerState",
    "SanityCheckAccessor",
    "SanityCheckLayer",
    "SanityCheckLister",
    "check_path_mode",
    "unexpected_response",
]
