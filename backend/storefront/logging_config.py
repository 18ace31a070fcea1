import logging


def configure_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger once and set its level.

    Leaves existing handlers alone (uvicorn or pytest may have installed
    their own) and only adjusts the level in that case.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
    )
    root.addHandler(handler)
