"""
Sound notification settings.

Reads and writes the sound keys of the plugin config file (see
plugin_config):

    {
        "sounds_dir": "~/.config/opencode/plugins/sounds",
        "player": ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"],
        "events": {
            "session.idle": {"sounds": ["PeonBuildingComplete1.ogg"]}
        }
    }

Features:
- Per-event sound overrides (one file, or several picked at random)
- Sound discovery from the sounds directory
- Cascading resolution (built-in defaults -> config file -> environment)
- Safe sound name validation
"""
import argparse
import logging
import os
import re
import sys
from pathlib import Path

import plugin_config
from plugin_config import get_config_path, get_section, get_string_list, save_config

log = logging.getLogger(__name__)

# =============================================================================
# Defaults
# =============================================================================

SESSION_CREATED = "session.created"
SESSION_COMPACTED = "session.compacted"
SESSION_ERROR = "session.error"
SESSION_IDLE = "session.idle"
PERMISSION_ASKED = "permission.asked"
PERMISSION_REPLIED = "permission.replied"

EVENT_TYPES = [
    SESSION_CREATED,
    SESSION_COMPACTED,
    SESSION_ERROR,
    SESSION_IDLE,
    PERMISSION_ASKED,
    PERMISSION_REPLIED,
]

DEFAULT_EVENT_SOUNDS = {
    SESSION_CREATED: ["PeasantWhat3.ogg", "PeasantYesAttack1.ogg", "PeasantYes4.ogg"],
    SESSION_COMPACTED: ["PeasantPissed5.ogg"],
    SESSION_ERROR: ["HumanPesantMaleDeathA.ogg"],
    SESSION_IDLE: ["PeonBuildingComplete1.ogg"],
    PERMISSION_ASKED: ["PeonWhat3.ogg"],
    PERMISSION_REPLIED: ["PeonYes4.ogg"],
}

DEFAULT_SOUNDS_DIR = "~/.config/opencode/plugins/sounds"

# No video window, exit when playback ends, silence ffplay's own logging
DEFAULT_PLAYER = ["ffplay", "-nodisp", "-autoexit", "-loglevel", "quiet"]

AUDIO_EXTENSIONS = {".ogg", ".oga", ".opus", ".wav", ".mp3", ".flac"}

# Valid characters for sound file names (security)
SOUND_NAME_PATTERN = re.compile(r'^[a-zA-Z0-9_][a-zA-Z0-9_.-]*$')

DEFAULT_CONFIG = {
    "sounds_dir": DEFAULT_SOUNDS_DIR,
    "player": list(DEFAULT_PLAYER),
    "events": {},
}


def load_config() -> dict:
    """Load the config file merged over the sound defaults."""
    return plugin_config.load_config(DEFAULT_CONFIG)


def _events_for_update(config: dict) -> dict:
    events = config.get("events")
    if not isinstance(events, dict):
        events = config["events"] = {}
    return events


# =============================================================================
# Player and Sounds Directory
# =============================================================================


def get_sounds_dir() -> Path:
    """Get the sounds directory. SOUNDS_DIR env var wins over the config file."""
    env_dir = os.environ.get("SOUNDS_DIR")
    if env_dir:
        return Path(os.path.expanduser(env_dir))
    sounds_dir = load_config().get("sounds_dir")
    if not isinstance(sounds_dir, str) or not sounds_dir:
        if sounds_dir:
            log.warning(f"Ignoring config 'sounds_dir': expected a path, got {sounds_dir!r}")
        sounds_dir = DEFAULT_SOUNDS_DIR
    return Path(os.path.expanduser(sounds_dir))


def get_player_command() -> list[str]:
    """Get the player argv prefix (the sound path is appended per call)."""
    config = load_config()
    player = config.get("player")
    if isinstance(player, str):
        return player.split() or list(DEFAULT_PLAYER)
    return get_string_list(config, "player") or list(DEFAULT_PLAYER)


def discover_sounds() -> list[str]:
    """Discover all audio files in the sounds directory.

    Returns sorted file names (with extension).
    """
    sounds_dir = get_sounds_dir()
    if not sounds_dir.is_dir():
        return []

    return sorted(
        path.name
        for path in sounds_dir.iterdir()
        if path.is_file() and path.suffix.lower() in AUDIO_EXTENSIONS
    )


def validate_sound_name(sound_name: str) -> None:
    """Reject names that could escape the sounds directory."""
    if not sound_name or sound_name.startswith("/"):
        raise ValueError(f"Invalid sound name: {sound_name!r}")
    if ".." in sound_name or not SOUND_NAME_PATTERN.match(sound_name):
        raise ValueError(f"Invalid sound name: {sound_name!r}")


def resolve_sound_path(sound_name: str, sounds_dir: Path | None = None) -> Path:
    """Resolve a sound file name to its path under the sounds directory.

    Validates the name only. The file is not required to exist: a missing
    file is reported by the player at playback time.
    """
    validate_sound_name(sound_name)
    if sounds_dir is None:
        sounds_dir = get_sounds_dir()
    return Path(sounds_dir) / sound_name


# =============================================================================
# Per-Event Sounds
# =============================================================================


def _check_event_type(event_type: str) -> None:
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Invalid event type: {event_type}. Valid: {EVENT_TYPES}")


def get_event_override(event_type: str) -> list[str] | None:
    """Get the configured sounds for an event, or None if it uses the defaults."""
    _check_event_type(event_type)

    events = get_section(load_config(), "events")
    entry = get_section(events, event_type)
    if isinstance(entry.get("sounds"), str):
        return [entry["sounds"]]
    return get_string_list(entry, "sounds") or None


def get_event_sounds(event_type: str) -> list[str]:
    """Get the candidate sound files for an event (override or default)."""
    override = get_event_override(event_type)
    if override:
        return override
    return list(DEFAULT_EVENT_SOUNDS[event_type])


def get_effective_event_sounds() -> dict[str, list[str]]:
    """Get the sound candidates for every event type."""
    return {event_type: get_event_sounds(event_type) for event_type in EVENT_TYPES}


def set_event_sounds(event_type: str, sounds: list[str] | str) -> None:
    """Override the sound candidates for an event type."""
    _check_event_type(event_type)

    if isinstance(sounds, str):
        sounds = [sounds]
    if not sounds:
        raise ValueError(f"At least one sound is required for {event_type}")
    for sound in sounds:
        validate_sound_name(sound)

    config = load_config()
    events = _events_for_update(config)
    if not isinstance(events.get(event_type), dict):
        events[event_type] = {}
    events[event_type]["sounds"] = list(sounds)
    save_config(config)


def clear_event_sounds(event_type: str) -> None:
    """Clear the override for an event type (fall back to the default sounds)."""
    _check_event_type(event_type)

    config = load_config()
    events = _events_for_update(config)
    entry = events.get(event_type)
    if isinstance(entry, dict):
        entry.pop("sounds", None)
    if event_type in events and not (isinstance(entry, dict) and entry):
        del events[event_type]
    save_config(config)


# =============================================================================
# CLI
# =============================================================================


def format_current_config() -> str:
    """Format the current configuration for display, read guard settings included."""
    from path_guard import get_blocked_patterns, get_guarded_tools

    lines = [
        f"Sounds dir: {get_sounds_dir()}",
        f"Player: {' '.join(get_player_command())}",
        "Event sounds:",
    ]
    for event_type, sounds in get_effective_event_sounds().items():
        lines.append(f"  {event_type}: {', '.join(sounds)}")
    lines.append(f"Blocked patterns: {', '.join(get_blocked_patterns())}")
    lines.append(f"Guarded tools: {', '.join(get_guarded_tools())}")
    return "\n".join(lines)


def cmd_show() -> None:
    """Show current configuration."""
    print("Current Sound Configuration:")
    print(format_current_config())


def cmd_status() -> None:
    """Show current configuration, missing sound files and mute state."""
    from sound_mute import get_mute_status, format_remaining_time

    sounds_dir = get_sounds_dir()
    available = set(discover_sounds())

    print("Sound Configuration Status")
    print("=" * 40)
    print(f"Config file: {get_config_path()}")
    print(format_current_config())
    print()

    missing = sorted(
        {sound for sounds in get_effective_event_sounds().values() for sound in sounds}
        - available
    )
    if missing:
        print(f"Missing from {sounds_dir}:")
        for sound in missing:
            print(f"  {sound}")
    else:
        print("All configured sounds found.")

    status = get_mute_status()
    if status.is_muted:
        print(f"Muted: {format_remaining_time(status.remaining_seconds)}")
    else:
        print("Muted: no")


def cmd_play(event_type: str) -> None:
    """Play the sound for an event type once, as the notification hook would."""
    from notifications import play_event
    from plugin_host import PluginContext

    _check_event_type(event_type)
    play_event(PluginContext.from_environment(), event_type)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sound_config.py",
        description="Inspect and change notification sound settings.",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("status", help="Show configuration and missing sounds")
    sub.add_parser("show", help="Show configuration")

    set_sound = sub.add_parser("set-sound", help="Override sounds for an event")
    set_sound.add_argument("event", choices=EVENT_TYPES)
    set_sound.add_argument("sounds", nargs="+")

    clear_sound = sub.add_parser("clear-sound", help="Restore default sounds for an event")
    clear_sound.add_argument("event", choices=EVENT_TYPES)

    play = sub.add_parser("play", help="Play the sound for an event")
    play.add_argument("event", choices=EVENT_TYPES)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.command in (None, "status"):
            cmd_status()
        elif args.command == "show":
            cmd_show()
        elif args.command == "set-sound":
            set_event_sounds(args.event, args.sounds)
            print(f"{args.event}: {', '.join(args.sounds)}")
        elif args.command == "clear-sound":
            clear_event_sounds(args.event)
            print(f"{args.event}: {', '.join(get_event_sounds(args.event))} (default)")
        elif args.command == "play":
            cmd_play(args.event)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
