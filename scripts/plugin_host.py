"""
Plugin host contract.

A plugin is a registration function that receives a PluginContext and
returns a mapping of hook names to handlers:

    def my_plugin(ctx: PluginContext) -> dict:
        return {"event": handle_event}

Hook names and handler signatures:
    tool.execute.before   handler(input, output)
                          input["tool"] is the tool id,
                          output["args"]["filePath"] the path the tool targets.
    event                 handler({"event": event})
                          event["type"] is a lifecycle/permission event type.

Handlers run synchronously. Exceptions are not caught here: the host
reports them (a raised error aborts that single tool call).
"""
import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Any, Callable

log = logging.getLogger(__name__)

TOOL_EXECUTE_BEFORE = "tool.execute.before"
EVENT = "event"

HOOK_NAMES = [TOOL_EXECUTE_BEFORE, EVENT]

ShellRunner = Callable[[list[str]], Any]
Handler = Callable[..., Any]
Plugin = Callable[["PluginContext"], dict[str, Handler]]


def run_shell(argv: list[str]) -> subprocess.CompletedProcess:
    """Run a command, wait for it, and discard its output.

    Raises:
        FileNotFoundError: If the binary does not exist.
        subprocess.CalledProcessError: If the command exits non-zero.
    """
    log.debug(f"Running: {argv}")
    return subprocess.run(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=True,
    )


@dataclass
class PluginContext:
    """What the host hands to every plugin at registration time."""

    directory: str
    worktree: str
    project: dict = field(default_factory=dict)
    shell: ShellRunner = run_shell

    @classmethod
    def from_environment(cls, shell: ShellRunner = run_shell) -> "PluginContext":
        """Build a context for the current process (used by hook scripts)."""
        directory = os.environ.get("CLAUDE_PROJECT_DIR") or os.getcwd()
        return cls(
            directory=directory,
            worktree=directory,
            project={"root": directory},
            shell=shell,
        )


def default_plugins() -> list[Plugin]:
    """The plugins shipped with this repository, in registration order."""
    from notifications import notification_plugin
    from path_guard import env_protection_plugin

    return [env_protection_plugin, notification_plugin]


def load_hooks(ctx: PluginContext, plugins: list[Plugin] | None = None) -> dict[str, list[Handler]]:
    """Register plugins and collect their handlers by hook name."""
    if plugins is None:
        plugins = default_plugins()

    hooks: dict[str, list[Handler]] = {}
    for plugin in plugins:
        registered = plugin(ctx)
        for name, handler in registered.items():
            if name not in HOOK_NAMES:
                log.warning(f"Plugin {getattr(plugin, '__name__', plugin)!r} registered unknown hook {name!r}")
            hooks.setdefault(name, []).append(handler)
    return hooks


def run_hook(hooks: dict[str, list[Handler]], name: str, *args: Any) -> None:
    """Invoke every handler registered for a hook, in registration order."""
    for handler in hooks.get(name, []):
        handler(*args)
