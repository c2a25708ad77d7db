from __future__ import annotations

import pytest

from rbac_core.core.config import RBACOptions
from rbac_core.services.pagination import PaginationConfig, get_pagination_params

DEFAULTS = PaginationConfig()


@pytest.mark.parametrize(
    ("limit", "offset", "expected"),
    [
        (None, None, (10, 0)),
        ("abc", "xyz", (10, 0)),
        ("", "", (10, 0)),
        (25, 5, (25, 5)),
        ("25", "5", (25, 5)),
        (100, 0, (100, 0)),
        (101, 0, (100, 0)),
        (5000, 0, (100, 0)),
        ("5000", None, (100, 0)),
        (0, None, (10, 0)),
        (-5, -3, (10, 0)),
        (10, 1_000_000, (10, 1_000_000)),
    ],
)
def test_get_pagination_params(limit, offset, expected) -> None:
    assert get_pagination_params(limit, offset, DEFAULTS) == expected


def test_limit_never_exceeds_max_for_any_large_value() -> None:
    for requested in (101, 250, 10**6):
        limit, _ = get_pagination_params(requested, None, DEFAULTS)
        assert limit == DEFAULTS.max_limit


def test_config_is_built_from_options() -> None:
    config = PaginationConfig.from_options(RBACOptions(default_limit=20, max_limit=50, default_offset=2))

    assert get_pagination_params(None, None, config) == (20, 2)
    assert get_pagination_params(80, "7", config) == (50, 7)
