"""Run the preview server with ``python -m server``."""

from __future__ import annotations

import uvicorn

from orgview.config import ORGVIEW_HOST, ORGVIEW_PORT, ORGVIEW_RELOAD, ORGVIEW_WORKSPACE
from orgview.utils.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def main() -> None:
    configure_logging()
    logger.info(
        "Starting orgview server",
        extra={"host": ORGVIEW_HOST, "port": ORGVIEW_PORT, "workspace": str(ORGVIEW_WORKSPACE)},
    )
    # uvicorn's own logging config would replace the orgview handlers.
    uvicorn.run("server.main:app", host=ORGVIEW_HOST, port=ORGVIEW_PORT, reload=ORGVIEW_RELOAD, log_config=None)


if __name__ == "__main__":
    main()
