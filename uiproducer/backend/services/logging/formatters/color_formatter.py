# uiproducer/backend/services/logging/formatters/color_formatter.py

import datetime
import logging
from typing import Any, Dict, Optional

from colorama import Fore

from .....utils.color_support import color_support


class ColorFormatter(logging.Formatter):
    """Console formatter coloring the level name and message by severity."""

    LEVEL_STYLES: Dict[int, Dict[str, Any]] = {
        logging.DEBUG: {'color': Fore.CYAN},
        logging.INFO: {'color': Fore.GREEN},
        logging.WARNING: {'color': Fore.YELLOW, 'bright': True},
        logging.ERROR: {'color': Fore.RED, 'bright': True},
        logging.CRITICAL: {'color': Fore.MAGENTA, 'bright': True},
    }

    DEFAULT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    DEFAULT_DATEFMT = '%H:%M:%S'

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt or self.DEFAULT_FORMAT, datefmt or self.DEFAULT_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        # Save original values
        orig_msg = record.msg
        orig_levelname = record.levelname

        try:
            if color_support.supports_color():
                style = self.LEVEL_STYLES.get(record.levelno, {})
                color = style.get('color')
                record.levelname = color_support.colored(
                    record.levelname, color=color, bright=style.get('bright', False)
                )
                if isinstance(record.msg, str) and color:
                    record.msg = color_support.colored(record.msg, color)

            return super().format(record)
        finally:
            # Restore original values
            record.msg = orig_msg
            record.levelname = orig_levelname

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        ct = datetime.datetime.fromtimestamp(record.created)
        return ct.strftime(datefmt or self.DEFAULT_DATEFMT) + f".{int(record.msecs):03d}"
