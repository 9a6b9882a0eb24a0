"""Log query service entry point: loads config and starts the Flask app."""

import logging
import sys

from logquery.app import create_app
from logquery.config import load_config

logger = logging.getLogger(__name__)


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=config["logging"]["level"],
        format="%(asctime)s [log-query] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    server = config["server"]
    app = create_app(config)
    logger.info("Log store: %s", config["storage"]["path"])
    logger.info("Server is running on port %d", server["port"])
    app.run(host=server["host"], port=server["port"], debug=server["debug"])


if __name__ == "__main__":
    main()
