"""
Env protection plugin.

Blocks read tool calls whose target path contains ".env" or ".dev".
Only read tools are guarded; writes and other tools pass through, and
calls without a file path are allowed.

Patterns and tools can be changed under "protection" in the plugin config
file. Values of the wrong type fall back to the defaults, so a bad edit
never switches the guard off.
"""
import logging
from typing import Iterable, Mapping

from plugin_config import get_section, get_string_list, load_config
from plugin_host import TOOL_EXECUTE_BEFORE, PluginContext

log = logging.getLogger(__name__)

DEFAULT_BLOCKED_PATTERNS = [".env", ".dev"]
DEFAULT_GUARDED_TOOLS = ["read"]

BLOCKED_PATTERNS = tuple(DEFAULT_BLOCKED_PATTERNS)
GUARDED_TOOLS = tuple(DEFAULT_GUARDED_TOOLS)

PROTECTION_MESSAGE = "Do not read .env files"


def get_blocked_patterns() -> list[str]:
    """Configured path substrings that block a read, or the defaults."""
    protection = get_section(load_config(), "protection")
    return get_string_list(protection, "blocked_patterns") or list(DEFAULT_BLOCKED_PATTERNS)


def get_guarded_tools() -> list[str]:
    """Configured tool ids the guard applies to (lowercase), or the defaults."""
    protection = get_section(load_config(), "protection")
    tools = get_string_list(protection, "guarded_tools") or DEFAULT_GUARDED_TOOLS
    return [tool.lower() for tool in tools]


class EnvProtectionError(Exception):
    """Raised to abort a tool call that would read a protected file."""

    def __init__(self, message: str = PROTECTION_MESSAGE, path: str | None = None):
        super().__init__(message)
        self.path = path


def is_blocked_path(path: str, patterns: Iterable[str] = BLOCKED_PATTERNS) -> bool:
    """Check if a path contains any blocked substring."""
    return any(pattern in path for pattern in patterns)


def is_guarded_tool(tool: str | None, tools: Iterable[str] = GUARDED_TOOLS) -> bool:
    """Check if a tool id is a read tool (case-insensitive)."""
    if not tool:
        return False
    return tool.lower() in {t.lower() for t in tools}


def get_file_path(output: Mapping | None) -> str | None:
    """Extract output["args"]["filePath"], tolerating missing levels."""
    if not output:
        return None
    args = output.get("args") or {}
    path = args.get("filePath")
    if not isinstance(path, str):
        return None
    return path


def check_tool_call(
    input: Mapping,
    output: Mapping,
    patterns: Iterable[str] = BLOCKED_PATTERNS,
    tools: Iterable[str] = GUARDED_TOOLS,
) -> None:
    """Raise EnvProtectionError if this call reads a protected path."""
    tool = input.get("tool") if input else None
    if not is_guarded_tool(tool, tools):
        return

    path = get_file_path(output)
    if path is None:
        return

    if is_blocked_path(path, patterns):
        log.warning(f"Blocked {tool} of protected path: {path}")
        raise EnvProtectionError(path=path)


def env_protection_plugin(
    ctx: PluginContext,
    patterns: Iterable[str] | None = None,
    tools: Iterable[str] | None = None,
) -> dict:
    """Register the read guard on tool.execute.before.

    Patterns and tools default to the configured values.
    """
    if patterns is None:
        patterns = get_blocked_patterns()
    if tools is None:
        tools = get_guarded_tools()

    patterns = tuple(patterns)
    tools = tuple(tools)

    def before_tool_execute(input: Mapping, output: Mapping) -> None:
        check_tool_call(input, output, patterns=patterns, tools=tools)

    return {TOOL_EXECUTE_BEFORE: before_tool_execute}
