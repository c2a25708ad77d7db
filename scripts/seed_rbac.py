#!/usr/bin/env python
"""CLI utility to seed permissions and roles from a JSON file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from rbac_core.core.config import SeedPermission, SeedRole, get_settings
from rbac_core.core.database import session_scope
from rbac_core.services.seed import seed_rbac_data


class SeedFile(BaseModel):
    permissions: list[SeedPermission] = Field(default_factory=list)
    roles: list[SeedRole] = Field(default_factory=list)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed RBAC permissions and roles.")
    parser.add_argument("--file", required=True, type=Path, help='JSON file shaped like {"permissions": [...], "roles": [...]}.')
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        seed = SeedFile.model_validate(json.loads(args.file.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        logging.error("Could not read seed file %s: %s", args.file, exc)
        return 1

    with session_scope() as session:
        report = seed_rbac_data(
            session,
            get_settings().options,
            permissions=seed.permissions,
            roles=seed.roles,
        )

    logging.info(
        "Seeded %s permissions and %s roles (%s skipped, %s invalid, %s missing permission references)",
        len(report.permissions_created),
        len(report.roles_created),
        len(report.skipped),
        len(report.invalid),
        len(report.missing_permissions),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
