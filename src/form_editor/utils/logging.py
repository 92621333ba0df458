import logging
from pathlib import Path


def setup_logger(name: str, log_dir: Path = Path("logs"), level: int = logging.INFO) -> logging.Logger:
    """
    Set up and configure logger with both file and console handlers.

    Args:
        name: Name of the logger, typically "form_editor" or __name__
        log_dir: Directory for the editor.log file, created if missing
        level: Level for the logger and both handlers

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Add handlers only once, repeated calls return the configured logger
    if logger.handlers:
        return logger

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # Create file handler
    fh = logging.FileHandler(log_dir / "editor.log", encoding="utf-8")
    fh.setLevel(level)

    # Create console handler
    ch = logging.StreamHandler()
    ch.setLevel(logging.WARNING)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    fh.setFormatter(formatter)
    ch.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    return logger
