"""
Sound Configuration TUI.

Textual-based terminal UI for choosing which sound plays for each
session/permission event.

- One row per event type: sound picker (or the built-in default) and Play
- Mute switch for all notification sounds

Run with: uv run python scripts/sound_tui.py
"""
import subprocess

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Footer, Header, Label, Select, Static, Switch

from notifications import play_event
from plugin_host import PluginContext
from sound_config import (
    DEFAULT_EVENT_SOUNDS,
    EVENT_TYPES,
    clear_event_sounds,
    discover_sounds,
    get_event_override,
    get_sounds_dir,
    set_event_sounds,
)
from sound_mute import clear_mute, format_remaining_time, get_mute_status, set_mute


def build_sound_options(available: list[str], extra: list[str] | None = None) -> list[tuple[str, str]]:
    """Select options for the sound picker: discovered files plus any extras."""
    names = sorted(set(available) | set(extra or []))
    return [(name, name) for name in names]


def describe_default(event_type: str) -> str:
    """Short label for an event's built-in sounds."""
    sounds = DEFAULT_EVENT_SOUNDS[event_type]
    if len(sounds) == 1:
        return f"default: {sounds[0]}"
    return f"default: random of {len(sounds)}"


def widget_id(event_type: str) -> str:
    return "event-" + event_type.replace(".", "-")


class EventSoundRow(Horizontal):
    """Sound picker and Play button for one event type."""

    DEFAULT_CSS = """
    EventSoundRow {
        height: auto;
        padding: 0 1;
    }
    EventSoundRow .event-name {
        width: 22;
        padding: 1 0;
    }
    EventSoundRow Select {
        width: 1fr;
    }
    """

    def __init__(self, event_type: str, available: list[str], **kwargs) -> None:
        super().__init__(id=widget_id(event_type), **kwargs)
        self.event_type = event_type
        self.available = available
        self._initialized = False

    def compose(self) -> ComposeResult:
        override = get_event_override(self.event_type) or []
        select_kwargs = {}
        # A multi-sound override has no single selection to show
        if len(override) == 1:
            select_kwargs["value"] = override[0]

        yield Label(self.event_type, classes="event-name")
        yield Select(
            build_sound_options(self.available, override),
            prompt=f"({describe_default(self.event_type)})",
            allow_blank=True,
            **select_kwargs,
        )
        yield Button("Play", variant="primary")

    def on_mount(self) -> None:
        self.call_after_refresh(self._mark_initialized)

    def _mark_initialized(self) -> None:
        self._initialized = True

    def on_select_changed(self, event: Select.Changed) -> None:
        event.stop()
        if not self._initialized:
            return
        # Anything but a sound name is the blank sentinel: back to the defaults
        if not isinstance(event.value, str):
            clear_event_sounds(self.event_type)
            self.notify(f"{self.event_type}: default sounds")
        else:
            set_event_sounds(self.event_type, [event.value])
            self.notify(f"{self.event_type}: {event.value}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        self.play_sound()

    @work(thread=True, exclusive=True)
    def play_sound(self) -> None:
        try:
            play_event(PluginContext.from_environment(), self.event_type)
        except (OSError, subprocess.CalledProcessError) as e:
            self.app.call_from_thread(
                self.notify, f"Playback failed: {e}", severity="error"
            )


class MuteBar(Horizontal):
    """Mute switch with the current mute state."""

    DEFAULT_CSS = """
    MuteBar {
        height: auto;
        padding: 0 1;
    }
    MuteBar Label {
        padding: 1 1;
    }
    """

    def compose(self) -> ComposeResult:
        status = get_mute_status()
        yield Label("Mute sounds")
        yield Switch(value=status.is_muted, id="mute-switch")
        yield Label(self._status_text(), id="mute-status")

    def _status_text(self) -> str:
        status = get_mute_status()
        if not status.is_muted:
            return "Sounds on"
        return f"Muted {format_remaining_time(status.remaining_seconds)}"

    def on_switch_changed(self, event: Switch.Changed) -> None:
        event.stop()
        if event.value == get_mute_status().is_muted:
            return
        if event.value:
            set_mute(None)
        else:
            clear_mute()
        self.query_one("#mute-status", Label).update(self._status_text())


class SoundConfigApp(App):
    """Pick notification sounds per event."""

    TITLE = "Notification Sounds"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("m", "toggle_mute", "Mute"),
    ]

    def compose(self) -> ComposeResult:
        available = discover_sounds()
        yield Header()
        yield Static(f"Sounds: {get_sounds_dir()} ({len(available)} found)", id="sounds-dir")
        yield MuteBar()
        with VerticalScroll(id="events"):
            for event_type in EVENT_TYPES:
                yield EventSoundRow(event_type, available)
        yield Footer()

    def action_toggle_mute(self) -> None:
        switch = self.query_one("#mute-switch", Switch)
        switch.value = not switch.value


def main() -> None:
    SoundConfigApp().run()


if __name__ == "__main__":
    main()
