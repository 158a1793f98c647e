#!/usr/bin/env python3
"""
Sound Notification Hook - Plays a sound on session and permission events.

The event type comes from (first match wins):
- --event TYPE on the command line
- an {"event": {"type": ...}} payload on stdin
- the host's hook_event_name (see HOST_EVENT_MAP)

Exits 0 after playback, 1 if the player failed (non-blocking for the host).
"""
import argparse
import json
import os
import subprocess
import sys

# Add scripts directory to path (must be before local imports)
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
SCRIPTS_DIR = os.path.join(os.path.dirname(SCRIPT_DIR), "scripts")
sys.path.insert(0, SCRIPTS_DIR)

from plugin_logging import setup_plugin_logging  # noqa: E402
from plugin_host import EVENT, PluginContext, load_hooks, run_hook  # noqa: E402
from notifications import notification_plugin  # noqa: E402
from sound_config import (  # noqa: E402
    EVENT_TYPES,
    PERMISSION_ASKED,
    SESSION_COMPACTED,
    SESSION_CREATED,
    SESSION_ERROR,
    SESSION_IDLE,
)

log = setup_plugin_logging()

HOST_EVENT_MAP = {
    "SessionStart": SESSION_CREATED,
    "PreCompact": SESSION_COMPACTED,
    "Stop": SESSION_IDLE,
    "StopFailure": SESSION_ERROR,
    "PermissionRequest": PERMISSION_ASKED,
}

NOTIFICATION_TYPE_MAP = {
    "permission_prompt": PERMISSION_ASKED,
    "idle_prompt": SESSION_IDLE,
}


def get_hook_input() -> dict:
    """Read hook input from stdin."""
    if sys.stdin is None or sys.stdin.isatty():
        return {}
    try:
        hook_input = json.load(sys.stdin)
    except (json.JSONDecodeError, EOFError):
        return {}
    return hook_input if isinstance(hook_input, dict) else {}


def resolve_event_type(hook_input: dict, explicit: str | None = None) -> str | None:
    """Work out which event type this invocation is for."""
    if explicit:
        return explicit

    event = hook_input.get("event")
    if isinstance(event, dict) and event.get("type"):
        return event["type"]

    hook_event = hook_input.get("hook_event_name")
    if hook_event == "Notification":
        return NOTIFICATION_TYPE_MAP.get(hook_input.get("notification_type", ""))
    return HOST_EVENT_MAP.get(hook_event)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a notification sound for a host event.")
    parser.add_argument("--event", choices=EVENT_TYPES, help="Event type to play")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    hook_input = get_hook_input() if not args.event else {}

    event_type = resolve_event_type(hook_input, args.event)
    if event_type is None:
        log.info(f"No event type for hook input keys {list(hook_input.keys())}, skipping")
        sys.exit(0)

    hooks = load_hooks(PluginContext.from_environment(), [notification_plugin])
    try:
        run_hook(hooks, EVENT, {"event": {"type": event_type}})
    except (OSError, subprocess.CalledProcessError):
        log.exception(f"Sound playback failed for {event_type}")
        sys.exit(1)

    sys.exit(0)


if __name__ == "__main__":
    main()
