"""CLI entry point: python -m medassess"""

from __future__ import annotations

import uvicorn

from medassess.config import MedAssessConfig
from medassess.observability.logging import setup_logging


def main() -> None:
    config = MedAssessConfig.from_yaml()
    setup_logging(config.log_level)

    uvicorn.run(
        "medassess.app:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
