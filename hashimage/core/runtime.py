from __future__ import annotations

import logging

from hashimage.core.config import settings

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the package logger at LOG_LEVEL."""
    pkg_logger = logging.getLogger("hashimage")
    if not pkg_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level or settings.LOG_LEVEL)


def configure_opencv_threads() -> None:
    """Configure OpenCV thread count from settings (no-op when unset)."""
    n = settings.OPENCV_NUM_THREADS
    if n is None:
        return
    try:
        import cv2

        cv2.setNumThreads(int(n))
        logger.info("OpenCV configured with %d threads", n)
    except Exception as e:  # cv2 can be absent in some environments
        logger.warning("Failed to configure OpenCV threads: %s", e)
