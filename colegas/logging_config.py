"""Logging setup for the management CLI."""

import logging
import sys
from datetime import date
from pathlib import Path

FILE_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'
CONSOLE_FORMAT = '%(levelname)s: %(message)s'


def setup_logging(log_dir: Path, command: str, quiet: bool = False) -> Path:
    """
    Send 'colegas.*' records to a daily CLI log file.

    Console records go to stderr so command output on stdout stays clean;
    quiet drops the console handler entirely. Handlers from an earlier
    call are closed first, so repeated runs in one process don't stack.

    Returns:
        Path of the log file being appended to
    """
    root = logging.getLogger('colegas')
    root.setLevel(logging.INFO)
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f'manage_{date.today():%Y%m%d}.log'
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(file_handler)

    if not quiet:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root.addHandler(console)

    root.info(f'manage.py {command}')
    return log_file
