"""Limit/offset normalization for list endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from rbac_core.core.config import RBACOptions

RawNumber = Union[int, float, str, None]


@dataclass(frozen=True)
class PaginationConfig:
    default_limit: int = 10
    max_limit: int = 100
    default_offset: int = 0

    @classmethod
    def from_options(cls, options: RBACOptions) -> "PaginationConfig":
        return cls(
            default_limit=options.default_limit,
            max_limit=options.max_limit,
            default_offset=options.default_offset,
        )


def _to_int(value: RawNumber) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def get_pagination_params(limit: RawNumber, offset: RawNumber, config: PaginationConfig) -> Tuple[int, int]:
    """Return the effective ``(limit, offset)`` for a list request.

    Absent, non-numeric or non-positive limits fall back to the default limit and
    the result never exceeds ``max_limit``. Absent, non-numeric or negative
    offsets fall back to the default offset; offsets have no upper bound.
    """

    requested_limit = _to_int(limit)
    if not requested_limit or requested_limit < 0:
        requested_limit = config.default_limit
    effective_limit = min(requested_limit, config.max_limit)

    requested_offset = _to_int(offset)
    if not requested_offset or requested_offset < 0:
        requested_offset = config.default_offset

    return effective_limit, requested_offset
