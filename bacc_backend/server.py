"""Process entry point: configure logging, build the app, serve."""

import logging
import sys

from bacc_backend.app import create_app
from bacc_backend.config import load_config
from bacc_backend.core.research import ResearchStoreError

logger = logging.getLogger("bacc_backend")


def main() -> int:
    """Start the HTTP server. Returns 1 if the research store cannot be opened."""
    config = load_config()
    logging.basicConfig(
        level=config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )

    try:
        app = create_app(config)
    except ResearchStoreError as exc:
        logger.error("Research store unavailable, refusing to start: %s", exc)
        return 1

    logger.info("Server is running at http://%s:%s", config["HOST"], config["PORT"])
    app.run(host=config["HOST"], port=config["PORT"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
