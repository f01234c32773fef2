"""
Logging helpers shared by the CLI and the engine.

Only entrypoints call configure_logging(); every other module just does
``logger = logging.getLogger(__name__)`` and leaves handlers alone.
"""
import logging
import os
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Sequence, Union

LEVEL_CHOICES = ('DEBUG', 'INFO', 'WARNING', 'ERROR')

_logging_configured = False
_HANDLER_TAG = "_curator_handler"
_CONSOLE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(message)s'
_FILE_FMT = '%(asctime)s | %(levelname)-5s | %(name)s | %(funcName)s:%(lineno)d | %(message)s'

# Third-party loggers that flood DEBUG output
_QUIET_LOGGERS = ('mutagen',)

Metric = Union[int, float, str]


def _level_number(name: Optional[str], default: int) -> int:
    if not name:
        return default
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else default


def _tagged(handler: logging.Handler, level: int, fmt: str, datefmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    setattr(handler, _HANDLER_TAG, True)
    return handler


def configure_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    file_level: str = 'DEBUG',
    force: bool = False,
    console: bool = True,
) -> None:
    """
    Install the curator's console and file handlers on the root logger.

    Only handlers installed here are replaced on reconfiguration, so handlers
    added by a host application (or pytest's caplog) survive. Calls after the
    first are no-ops unless ``force`` is set.

    Environment variable overrides:
        LOG_LEVEL: Replaces ``level``
        LOG_FILE: Used when ``log_file`` is not given
    """
    global _logging_configured
    if _logging_configured and not force:
        return

    level = os.getenv('LOG_LEVEL', level).upper()
    log_file = log_file or os.getenv('LOG_FILE')

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    if console:
        root.addHandler(_tagged(
            logging.StreamHandler(sys.stdout), _level_number(level, logging.INFO), _CONSOLE_FMT, '%H:%M:%S'
        ))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_tagged(
            logging.FileHandler(log_file, encoding='utf-8'),
            _level_number(file_level, logging.DEBUG),
            _FILE_FMT,
            '%Y-%m-%d %H:%M:%S',
        ))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True
    logging.getLogger(__name__).debug(f"Logging configured: level={level}, file={log_file or 'none'}")


def human_time(seconds: float) -> str:
    """"850ms", "4.2s" or "3m 05s"."""
    seconds = max(0.0, seconds)
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, sec = divmod(int(seconds), 60)
    return f"{minutes}m {sec:02d}s"


@contextmanager
def stage_timer(stage_name: str, logger: Optional[logging.Logger] = None):
    """
    Log how long a stage took, even when it raises.

    Usage:
        with stage_timer("Library scan", logger):
            engine.scan_directory(music_dir)
    """
    logger = logger or logging.getLogger(__name__)
    logger.debug(f"{stage_name} starting")
    started = time.perf_counter()
    try:
        yield
    finally:
        logger.info(f"{stage_name} completed in {human_time(time.perf_counter() - started)}")


def format_count(n: int, singular: str, plural: Optional[str] = None) -> str:
    """"1 playlist", "12 playlists", "1,204 tracks"."""
    word = singular if n == 1 else (plural or f"{singular}s")
    return f"{n:,} {word}"


def truncate_list(items: Sequence[Any], max_items: int = 3,
                  format_fn: Callable[[Any], str] = str) -> str:
    """Comma-joined head of ``items`` with a "(+N more)" tail."""
    if not items:
        return "(none)"
    shown = ', '.join(format_fn(item) for item in items[:max_items])
    hidden = len(items) - max_items
    return f"{shown} (+{hidden} more)" if hidden > 0 else shown


class ProgressLogger:
    """
    Periodic progress lines for long loops, plus a closing summary.

    Items can be reported as skipped; the summary line counts them separately.
    """

    def __init__(self, logger: logging.Logger, total: Optional[int], label: str,
                 unit: str = "files", every_n: int = 500):
        self.logger = logger
        self.total = total if total and total > 0 else None
        self.label = label
        self.unit = unit
        self.every_n = max(1, every_n)
        self.processed = 0
        self.skipped = 0
        self._started = time.perf_counter()

    def update(self, n: int = 1, skipped: bool = False) -> None:
        self.processed += n
        if skipped:
            self.skipped += n
        if self.processed % self.every_n == 0:
            of_total = f"/{self.total:,}" if self.total else ""
            self.logger.info(f"{self.label}: {self.processed:,}{of_total} {self.unit}")

    def finish(self) -> None:
        elapsed = human_time(time.perf_counter() - self._started)
        skipped = f" ({self.skipped:,} skipped)" if self.skipped else ""
        self.logger.info(f"{self.label} complete: {self.processed:,} {self.unit}{skipped} in {elapsed}")


def add_logging_args(parser) -> None:
    """
    Add --log-level/--debug/--quiet/--log-file to an argparse parser.

    --log-level has no default so a configured level can apply when the flag
    is absent; see resolve_log_level().
    """
    group = parser.add_argument_group('logging')
    group.add_argument('--log-level', choices=LEVEL_CHOICES, default=None,
                       help='Console log level (default: config logging.level, else INFO)')
    group.add_argument('--debug', action='store_true', help='Same as --log-level DEBUG')
    group.add_argument('--quiet', action='store_true', help='Same as --log-level WARNING')
    group.add_argument('--log-file', type=str, metavar='PATH', help='Also write DEBUG logs to PATH')


def resolve_log_level(args, fallback: str = 'INFO') -> str:
    """--debug wins over --quiet, which wins over --log-level, then ``fallback``."""
    if getattr(args, 'debug', False):
        return 'DEBUG'
    if getattr(args, 'quiet', False):
        return 'WARNING'
    return getattr(args, 'log_level', None) or fallback


class RunSummary:
    """
    Named metrics collected during a run, logged as one block at the end.

    Usage:
        summary = RunSummary("Playlist Generation", logger)
        summary.update(index.stats())
        summary.increment("by_genres")
        summary.log()
    """

    def __init__(self, title: str, logger: Optional[logging.Logger] = None):
        self.title = title
        self.logger = logger or logging.getLogger(__name__)
        self.metrics: Dict[str, Metric] = {}
        self._started = time.perf_counter()

    def add(self, key: str, value: Metric) -> None:
        self.metrics[key] = value

    def update(self, values: Union[Dict[str, Metric], Iterable]) -> None:
        self.metrics.update(values)

    def increment(self, key: str, amount: int = 1) -> None:
        self.metrics[key] = self.metrics.get(key, 0) + amount

    def as_dict(self) -> Dict[str, Metric]:
        return dict(self.metrics)

    def log(self, level: int = logging.INFO) -> None:
        rule = "=" * 60
        self.logger.log(level, rule)
        self.logger.log(level, f"{self.title.upper()} SUMMARY")
        for key, value in self.metrics.items():
            label = key.replace('_', ' ').title()
            shown = f"{value:.2f}" if isinstance(value, float) else value
            self.logger.log(level, f"  {label}: {shown}")
        self.logger.log(level, f"  Total Time: {human_time(time.perf_counter() - self._started)}")
        self.logger.log(level, rule)
