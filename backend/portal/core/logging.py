import logging
import sys


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Console logging for the whole `portal` package."""
    logger = logging.getLogger("portal")
    logger.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    # Evita handlers duplicados al recargar
    if not logger.handlers:
        logger.addHandler(handler)

    return logger
