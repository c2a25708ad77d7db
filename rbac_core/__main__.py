"""Run the service with uvicorn: ``python -m rbac_core``."""

from __future__ import annotations

import uvicorn

from rbac_core.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("rbac_core.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
