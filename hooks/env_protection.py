#!/usr/bin/env python3
"""
Env Protection Hook - PreToolUse guard that blocks reading .env/.dev files.

Reads the tool call from stdin, hands it to the env protection plugin and
translates a protection error into a deny decision. Allowed calls produce
no output so the normal permission flow continues.
"""
import json
import os
import sys

# Add scripts directory to path (must be before local imports)
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
SCRIPTS_DIR = os.path.join(os.path.dirname(SCRIPT_DIR), "scripts")
sys.path.insert(0, SCRIPTS_DIR)

from plugin_logging import setup_plugin_logging  # noqa: E402
from plugin_host import TOOL_EXECUTE_BEFORE, PluginContext, load_hooks, run_hook  # noqa: E402
from path_guard import EnvProtectionError, env_protection_plugin  # noqa: E402

log = setup_plugin_logging()


def get_hook_input() -> dict | None:
    """Read hook input from stdin. Returns None if it is not a JSON object."""
    try:
        hook_input = json.load(sys.stdin)
    except (json.JSONDecodeError, EOFError):
        return None
    if not isinstance(hook_input, dict):
        return None
    return hook_input


def to_plugin_args(hook_input: dict) -> tuple[dict, dict]:
    """Adapt a PreToolUse payload to the (input, output) pair plugins expect."""
    tool_name = hook_input.get("tool_name") or ""
    tool_input = hook_input.get("tool_input") or {}
    file_path = tool_input.get("file_path") or tool_input.get("filePath")
    return (
        {"tool": tool_name.lower(), "sessionID": hook_input.get("session_id")},
        {"args": {"filePath": file_path}},
    )


def deny_response(reason: str) -> dict:
    """Hook response that blocks the tool call."""
    return {
        "hookSpecificOutput": {
            "hookEventName": "PreToolUse",
            "permissionDecision": "deny",
            "permissionDecisionReason": f"[BLOCKED] {reason}",
        }
    }


def main() -> None:
    hook_input = get_hook_input()
    if hook_input is None:
        log.warning("Env protection hook got no valid JSON on stdin")
        sys.exit(1)

    input, output = to_plugin_args(hook_input)
    hooks = load_hooks(PluginContext.from_environment(), [env_protection_plugin])

    try:
        run_hook(hooks, TOOL_EXECUTE_BEFORE, input, output)
    except EnvProtectionError as e:
        print(json.dumps(deny_response(str(e))))
        sys.exit(0)

    log.debug(f"Allowed {input['tool']}: {output['args']['filePath']}")
    sys.exit(0)


if __name__ == "__main__":
    main()
