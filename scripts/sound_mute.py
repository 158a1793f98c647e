"""
Quiet mode for notification sounds.

The mute state is a single file, ${PLUGIN_ROOT}/.config/mute_until
(SOUND_MUTE_FILE points it elsewhere):

    missing      sounds play
    empty        silent until unmuted
    a timestamp  silent until that Unix time; the file is removed once it passes

Durations are short phrases: "30m", "2 hours", "for 45 minutes", "1.5h".
Muting only silences sounds. The env-file guard keeps blocking reads.
"""
import argparse
import logging
import os
import re
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import NamedTuple

_PLUGIN_ROOT = Path(__file__).parent.parent
_CONFIG_DIR = _PLUGIN_ROOT / ".config"
MUTE_FILE = Path(os.environ.get("SOUND_MUTE_FILE") or _CONFIG_DIR / "mute_until")

log = logging.getLogger(__name__)

UNMUTE_KEYWORDS = ["resume", "off", "unmute", "cancel"]

_UNIT_SECONDS = {
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
}

_DURATION_RE = re.compile(r"^(?:for\s+)?(\d+(?:\.\d+)?|an?)\s*([a-z]+)$")


class MuteStatus(NamedTuple):
    is_muted: bool
    expires_at: float | None  # None while muted means "until unmuted"
    remaining_seconds: float | None


_NOT_MUTED = MuteStatus(is_muted=False, expires_at=None, remaining_seconds=None)


def is_muted() -> bool:
    return get_mute_status().is_muted


def clear_mute() -> None:
    """Turn sounds back on. A missing mute file is already unmuted."""
    if not MUTE_FILE.exists():
        return
    try:
        MUTE_FILE.unlink()
    except OSError as e:
        log.warning(f"Could not remove {MUTE_FILE}: {e}")
        return
    log.info("Sounds unmuted")


def _read_mute_file() -> str | None:
    try:
        return MUTE_FILE.read_text().strip()
    except OSError:
        return None


def get_mute_status() -> MuteStatus:
    """Read the mute file. An expired timestamp is deleted and reads as unmuted."""
    content = _read_mute_file()
    if content is None:
        return _NOT_MUTED
    if content == "":
        return MuteStatus(is_muted=True, expires_at=None, remaining_seconds=None)

    try:
        expires_at = float(content)
    except ValueError:
        log.debug(f"Unreadable mute file content {content!r}, treating as unmuted")
        return _NOT_MUTED

    remaining = expires_at - time.time()
    if remaining <= 0:
        clear_mute()
        return _NOT_MUTED
    return MuteStatus(is_muted=True, expires_at=expires_at, remaining_seconds=remaining)


def parse_duration(phrase: str) -> float:
    """Parse a duration phrase into seconds.

    Args:
        phrase: Duration such as "30m", "2 hours", "for an hour".

    Returns:
        Duration in seconds (always positive).

    Raises:
        ValueError: If the phrase is not a recognizable duration.
    """
    match = _DURATION_RE.match(phrase.strip().lower())
    if not match:
        raise ValueError(
            f"Could not parse duration from: {phrase!r}. "
            f"Try a phrase like '30m', '2 hours' or 'for 45 minutes'."
        )

    amount, unit = match.groups()
    if unit not in _UNIT_SECONDS:
        raise ValueError(f"Unknown duration unit {unit!r} in {phrase!r}")

    value = 1.0 if amount in ("a", "an") else float(amount)
    seconds = value * _UNIT_SECONDS[unit]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {phrase!r}")
    return seconds


def set_mute(duration_phrase: str | None = None) -> float | None:
    """Mute sounds and return the expiry time.

    No phrase means "until unmuted" and returns None, as does an unmute
    keyword, which clears the mute instead. Anything else must parse as a
    duration; a ValueError leaves the current state untouched.
    """
    phrase = (duration_phrase or "").strip().lower()
    if phrase in UNMUTE_KEYWORDS:
        clear_mute()
        return None

    expires_at = time.time() + parse_duration(phrase) if phrase else None

    MUTE_FILE.parent.mkdir(parents=True, exist_ok=True)
    if expires_at is None:
        MUTE_FILE.write_text("")
        log.info("Sounds muted until unmuted")
    else:
        MUTE_FILE.write_text(str(expires_at))
        log.info(f"Sounds muted until {datetime.fromtimestamp(expires_at):%Y-%m-%d %H:%M:%S}")
    return expires_at


def format_remaining_time(seconds: float | None) -> str:
    """'indefinitely', 'N seconds', 'N minute(s)', then hours and days to one decimal."""
    if seconds is None:
        return "indefinitely"
    if seconds < 60:
        return f"{int(seconds)} seconds"
    if seconds < 3600:
        minutes = int(seconds // 60)
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    if seconds < 86400:
        return f"{seconds / 3600:.1f} hours"
    return f"{seconds / 86400:.1f} days"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: sound_mute.py [DURATION | resume | status]."""
    parser = argparse.ArgumentParser(
        prog="sound_mute.py",
        description="Mute notification sounds, indefinitely or for a while.",
    )
    parser.add_argument("duration", nargs="*", help="e.g. '30m', '2 hours', 'resume', 'status'")
    args = parser.parse_args(argv)
    phrase = " ".join(args.duration)

    if phrase.strip().lower() == "status":
        status = get_mute_status()
        if status.is_muted:
            print(f"Muted {format_remaining_time(status.remaining_seconds)}")
        else:
            print("Not muted")
        return

    try:
        expires_at = set_mute(phrase)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if phrase.strip().lower() in UNMUTE_KEYWORDS:
        print("Sounds unmuted")
    elif expires_at is None:
        print("Sounds muted indefinitely")
    else:
        print(f"Sounds muted until {datetime.fromtimestamp(expires_at):%H:%M}")


if __name__ == "__main__":
    main()
