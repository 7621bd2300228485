import logging

EXTRACTION_LOGGER = "json_salvage.extraction"


def configure_logging(level: str = "INFO", *, debug_extraction: bool = False) -> None:
    """
    Log to stderr (stdout carries CLI results). `debug_extraction` shows which
    stage produced each value, independently of the global level.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    if debug_extraction:
        logging.getLogger(EXTRACTION_LOGGER).setLevel(logging.DEBUG)
