"""
Unit tests for the env protection plugin.

Run with: uv run pytest tests/unit/test_path_guard.py -v

The guard blocks a tool call when:
1. The tool is a read tool ("read", any case)
2. AND the target path contains ".env" or ".dev"
"""
import os
import sys

import pytest

# Add scripts to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", "scripts"))


def make_call(tool, file_path):
    """Build the (input, output) pair the tool.execute.before hook receives."""
    return {"tool": tool}, {"args": {"filePath": file_path}}


class TestIsBlockedPath:
    """Tests for substring matching of blocked patterns."""

    @pytest.mark.parametrize("path", [
        "/project/.env",
        "/project/.env.local",
        "/project/.envrc",
        "config/.dev/settings.json",
        "/home/user/app/.development",
        ".env",
    ])
    def test_blocked_paths(self, path):
        """Paths containing .env or .dev should be blocked."""
        from path_guard import is_blocked_path

        assert is_blocked_path(path) is True

    @pytest.mark.parametrize("path", [
        "/project/README.md",
        "/project/env.py",
        "/project/src/environment.ts",
        "/project/dev/notes.txt",
        "",
    ])
    def test_allowed_paths(self, path):
        """Paths without a blocked substring should be allowed."""
        from path_guard import is_blocked_path

        assert is_blocked_path(path) is False

    def test_custom_patterns(self):
        """Custom patterns replace the defaults."""
        from path_guard import is_blocked_path

        assert is_blocked_path("/project/secrets.yaml", ["secrets"]) is True
        assert is_blocked_path("/project/.env", ["secrets"]) is False


class TestIsGuardedTool:
    """Tests for read tool detection."""

    def test_read_is_guarded(self):
        from path_guard import is_guarded_tool

        assert is_guarded_tool("read") is True

    def test_case_insensitive(self):
        """Hosts spell the tool "Read" or "read"."""
        from path_guard import is_guarded_tool

        assert is_guarded_tool("Read") is True

    @pytest.mark.parametrize("tool", ["write", "edit", "bash", "", None])
    def test_other_tools_not_guarded(self, tool):
        from path_guard import is_guarded_tool

        assert is_guarded_tool(tool) is False


class TestCheckToolCall:
    """Tests for the corrected guard semantics."""

    def test_read_env_local_raises(self):
        """read of /project/.env.local should raise EnvProtectionError."""
        from path_guard import EnvProtectionError, check_tool_call

        with pytest.raises(EnvProtectionError) as exc_info:
            check_tool_call(*make_call("read", "/project/.env.local"))

        assert str(exc_info.value) == "Do not read .env files"
        assert exc_info.value.path == "/project/.env.local"

    def test_read_dev_path_raises(self):
        """The .dev pattern applies to reads too."""
        from path_guard import EnvProtectionError, check_tool_call

        with pytest.raises(EnvProtectionError):
            check_tool_call(*make_call("read", "/project/.dev/config"))

    def test_write_envrc_allowed(self):
        """write of /project/.envrc is not a read and should be allowed."""
        from path_guard import check_tool_call

        assert check_tool_call(*make_call("write", "/project/.envrc")) is None

    def test_non_read_dev_path_allowed(self):
        """The .dev check is scoped to read tools like the .env check."""
        from path_guard import check_tool_call

        assert check_tool_call(*make_call("edit", "/project/.dev/config")) is None

    def test_read_ordinary_file_allowed(self):
        from path_guard import check_tool_call

        assert check_tool_call(*make_call("read", "/project/src/main.py")) is None

    def test_missing_file_path_allowed(self):
        """A read without filePath should not crash."""
        from path_guard import check_tool_call

        assert check_tool_call({"tool": "read"}, {"args": {}}) is None
        assert check_tool_call({"tool": "read"}, {"args": {"filePath": None}}) is None
        assert check_tool_call({"tool": "read"}, {}) is None

    def test_missing_tool_allowed(self):
        from path_guard import check_tool_call

        assert check_tool_call({}, {"args": {"filePath": "/project/.env"}}) is None

    def test_custom_tools(self):
        """Guarded tools can be extended, e.g. to grep."""
        from path_guard import EnvProtectionError, check_tool_call

        with pytest.raises(EnvProtectionError):
            check_tool_call(*make_call("grep", "/project/.env"), tools=["read", "grep"])


class TestEnvProtectionPlugin:
    """Tests for plugin registration."""

    def test_registers_tool_execute_before(self):
        from path_guard import env_protection_plugin
        from plugin_host import PluginContext

        hooks = env_protection_plugin(PluginContext(directory="/p", worktree="/p"), patterns=[".env"], tools=["read"])

        assert list(hooks) == ["tool.execute.before"]

    def test_handler_raises_for_blocked_read(self):
        from path_guard import EnvProtectionError, env_protection_plugin
        from plugin_host import PluginContext

        hooks = env_protection_plugin(PluginContext(directory="/p", worktree="/p"), patterns=[".env"], tools=["read"])
        handler = hooks["tool.execute.before"]

        with pytest.raises(EnvProtectionError):
            handler(*make_call("read", "/p/.env"))
        assert handler(*make_call("read", "/p/app.py")) is None

    def test_defaults_come_from_config(self, tmp_path, monkeypatch):
        """Unset patterns/tools are read from the config file."""
        import json

        from path_guard import EnvProtectionError, env_protection_plugin
        from plugin_host import PluginContext

        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "protection": {"blocked_patterns": ["secret"], "guarded_tools": ["Read", "Grep"]}
        }))
        monkeypatch.setenv("SOUND_CONFIG_PATH", str(config_path))

        handler = env_protection_plugin(PluginContext(directory="/p", worktree="/p"))["tool.execute.before"]

        with pytest.raises(EnvProtectionError):
            handler(*make_call("grep", "/p/secret.txt"))
        assert handler(*make_call("read", "/p/.env")) is None


@pytest.fixture
def protection_config(tmp_path, monkeypatch):
    """Write a config file and point the guard at it."""
    import json

    config_path = tmp_path / "config.json"
    monkeypatch.setenv("SOUND_CONFIG_PATH", str(config_path))

    def write(protection):
        config_path.write_text(json.dumps({"protection": protection}))

    return write


class TestProtectionConfig:

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        from path_guard import get_blocked_patterns, get_guarded_tools

        monkeypatch.setenv("SOUND_CONFIG_PATH", str(tmp_path / "missing.json"))

        assert get_blocked_patterns() == [".env", ".dev"]
        assert get_guarded_tools() == ["read"]

    def test_guarded_tools_lowercased(self, protection_config):
        from path_guard import get_guarded_tools

        protection_config({"guarded_tools": ["Read", "Grep"]})

        assert get_guarded_tools() == ["read", "grep"]

    def test_empty_lists_use_defaults(self, protection_config):
        from path_guard import get_blocked_patterns, get_guarded_tools

        protection_config({"blocked_patterns": [], "guarded_tools": []})

        assert get_blocked_patterns() == [".env", ".dev"]
        assert get_guarded_tools() == ["read"]

    @pytest.mark.parametrize("protection", [
        None,
        "off",
        [".env"],
        {"guarded_tools": "read"},
        {"guarded_tools": None},
        {"guarded_tools": [None]},
        {"blocked_patterns": ".env"},
        {"blocked_patterns": [".env", 1]},
        {"blocked_patterns": {".env": True}, "guarded_tools": "Read"},
    ])
    def test_malformed_values_keep_env_reads_blocked(self, protection_config, protection):
        from path_guard import EnvProtectionError, env_protection_plugin
        from plugin_host import PluginContext

        protection_config(protection)
        handler = env_protection_plugin(PluginContext(directory="/p", worktree="/p"))["tool.execute.before"]

        with pytest.raises(EnvProtectionError):
            handler(*make_call("Read", "/p/.env"))
        with pytest.raises(EnvProtectionError):
            handler(*make_call("read", "/p/config.dev.json"))

    def test_string_tools_are_not_split_into_letters(self, protection_config):
        from path_guard import get_guarded_tools

        protection_config({"guarded_tools": "read"})

        assert get_guarded_tools() == ["read"]
