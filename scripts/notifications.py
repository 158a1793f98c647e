"""
Notification sound plugin.

Plays a sound when the agent host reports a session lifecycle event
(created, compacted, errored, idle) or a permission event (asked, replied).
session.created picks uniformly at random among several sounds.

Playback runs the configured player (ffplay by default) through the
context's shell capability and waits for it to finish. A missing player
or sound file is not handled here.
"""
import logging
import random
from pathlib import Path
from typing import Mapping

from plugin_host import EVENT, PluginContext
from sound_config import (
    DEFAULT_EVENT_SOUNDS,
    DEFAULT_PLAYER,
    get_effective_event_sounds,
    get_player_command,
    get_sounds_dir,
    resolve_sound_path,
)
from sound_mute import is_muted

log = logging.getLogger(__name__)


def choose_sound(
    event_type: str,
    rng: random.Random,
    mapping: Mapping[str, list[str]] = DEFAULT_EVENT_SOUNDS,
) -> str | None:
    """Resolve an event type to one sound file name, or None if unmapped."""
    candidates = mapping.get(event_type)
    if not candidates:
        return None
    if len(candidates) == 1:
        return candidates[0]
    return rng.choice(candidates)


def build_player_command(sound_path: Path | str, player: list[str] = DEFAULT_PLAYER) -> list[str]:
    """Build the player argv for a sound file."""
    return [*player, str(sound_path)]


def notification_plugin(
    ctx: PluginContext,
    rng: random.Random | None = None,
    mapping: Mapping[str, list[str]] | None = None,
    sounds_dir: Path | str | None = None,
    player: list[str] | None = None,
    respect_mute: bool = True,
) -> dict:
    """Register the sound dispatcher on the event hook.

    Unset arguments fall back to the configured values. Pass a seeded
    random.Random to make multi-sound events deterministic.
    """
    if rng is None:
        rng = random.Random()
    if mapping is None:
        mapping = get_effective_event_sounds()
    if sounds_dir is None:
        sounds_dir = get_sounds_dir()
    if player is None:
        player = get_player_command()

    def on_event(payload: Mapping) -> None:
        event_type = payload["event"]["type"]

        sound = choose_sound(event_type, rng, mapping)
        if sound is None:
            log.debug(f"No sound mapped for {event_type}")
            return

        if respect_mute and is_muted():
            log.info(f"Sounds muted, skipping {event_type}")
            return

        sound_path = resolve_sound_path(sound, Path(sounds_dir))
        log.info(f"{event_type} -> {sound}")
        ctx.shell(build_player_command(sound_path, player))

    return {EVENT: on_event}


def play_event(ctx: PluginContext, event_type: str, rng: random.Random | None = None) -> None:
    """Play the configured sound for one event type, ignoring mute."""
    hooks = notification_plugin(ctx, rng=rng, respect_mute=False)
    hooks[EVENT]({"event": {"type": event_type}})
