"""
Logging setup for rbit

Console output is the user interface: status lines, tables and the
[dry-run]/[verbose] diagnostics are all emitted through loggers and printed
to stdout without decoration. An optional log file receives timestamped
records, with module/function/line details in trace mode.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT_SIMPLE = '%(asctime)s - %(levelname)s - %(message)s'
LOG_FORMAT_DETAILED = '%(asctime)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'
LOG_FORMAT_CONSOLE = '%(message)s'


def setup_logging(log_level: str = 'INFO', log_file: Optional[Union[str, Path]] = None,
                  trace_mode: bool = False):
    """
    Configure the root logger

    Args:
        log_level: Console verbosity (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path of a log file; parent directories are created
        trace_mode: Use the detailed format in the log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    level = getattr(logging, str(log_level).upper(), logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT_CONSOLE))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(LOG_FORMAT_DETAILED if trace_mode else LOG_FORMAT_SIMPLE)
            )
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"WARNING: Failed to setup file logging at {log_path}: {e}", file=sys.stderr)

    # requests/urllib3 debug output would interleave with the table
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger"""
    return logging.getLogger(name)
