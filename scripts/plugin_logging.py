"""
Process-wide log setup for the hook entry points.

Each hook runs as a short-lived process. The first call to
setup_plugin_logging() points the root logger at logs/plugin.log under the
plugin root; modules imported by the hook log through their own
logging.getLogger(__name__) and end up in the same file.

stdout is reserved for the hook response, so nothing here writes to it.

SOUNDS_LOG_LEVEL selects the level by name (DEBUG, INFO, WARNING, ERROR).
Unknown names mean INFO.
"""
import inspect
import logging
import os
from pathlib import Path

_PLUGIN_ROOT = Path(__file__).parent.parent
LOG_DIR = _PLUGIN_ROOT / "logs"
LOG_FILE = LOG_DIR / "plugin.log"

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

_logging_configured = False


def get_log_level() -> int:
    level = getattr(logging, os.environ.get("SOUNDS_LOG_LEVEL", "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def _caller_name() -> str:
    # Two frames up: past this helper and past setup_plugin_logging
    frame = inspect.currentframe()
    for _ in range(2):
        if frame is None:
            return "__main__"
        frame = frame.f_back
    if frame is None:
        return "__main__"
    return frame.f_globals.get("__name__", "__main__")


def setup_plugin_logging(name: str | None = None) -> logging.Logger:
    """Send root logging to logs/plugin.log and hand back a named logger.

    Only the first call in a process touches the root logger. The logger
    returned is named after ``name`` or, by default, the calling module.
    """
    global _logging_configured

    if not _logging_configured:
        LOG_DIR.mkdir(exist_ok=True)
        logging.basicConfig(
            level=get_log_level(),
            format=LOG_FORMAT,
            handlers=[logging.FileHandler(LOG_FILE)],
            force=True,
        )
        _logging_configured = True

    return logging.getLogger(name or _caller_name())
