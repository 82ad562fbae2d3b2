"""
Logging configuration for command line runs.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s]-[Seed: {seed}] - %(message)s'


def setup_logging(
    log_dir: str = 'logs',
    *,
    run_name: str = 'hybrid',
    seed: Optional[int] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Returns the `knapsack.<run_name>` logger writing to `<log_dir>/<run_name>.log`
    and to the console. Calling it again for the same run reuses the handlers.
    """
    log_dir_path = Path(log_dir)
    log_dir_path.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(f"knapsack.{run_name}")
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT.format(seed=seed if seed is not None else "-"))
        for handler in (logging.FileHandler(log_dir_path / f"{run_name}.log", mode='a'), logging.StreamHandler()):
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    return logger
