"""
Logging configuration for the forwarder
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Set up logging configuration for the forwarder

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger instance
    """
    if level is None:
        level = os.environ.get('LOG_LEVEL', 'INFO')
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        stream=sys.stdout
    )

    # Lambda installs its own handler on the root logger before our code runs
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers:
        handler.setLevel(log_level)

    # urllib3 debug lines include the uploadLogs URL, which carries the API key
    logging.getLogger('urllib3').setLevel(max(log_level, logging.WARNING))

    logger = logging.getLogger('scalyr_forwarder')
    logger.setLevel(log_level)

    return logger

