"""Tests for direct (shell-less) command parsing and execution."""

import os

import pytest

from shinline import (
    CommandParseError,
    CommandSpec,
    NonZeroExit,
    SpawnError,
    command,
    commandify,
    execute,
)


# =============================================================================
# commandify()
# =============================================================================


class TestCommandify:
    def test_simple_command(self):
        spec = commandify("echo hi there")
        assert spec == CommandSpec(binary="echo", args=["hi", "there"])
        assert spec.argv == ["echo", "hi", "there"]

    def test_cd_and_exports(self):
        spec = commandify(
            """
            cd /tmp
            export A=1 B='two words'
            export C=
            ls -l
            """
        )
        assert spec.cwd == "/tmp"
        assert spec.env == {"A": "1", "B": "two words", "C": ""}
        assert spec.argv == ["ls", "-l"]

    def test_blank_lines_before_command(self):
        spec = commandify("\n\n  export A=1\n\n  true\n")
        assert spec.env == {"A": "1"}
        assert spec.argv == ["true"]

    def test_line_continuation(self):
        spec = commandify("ls \\\n  -l \\\n  -a")
        assert spec.argv == ["ls", "-l", "-a"]

    def test_multiline_command_after_first_command_line(self):
        """Once the command starts, cd/export lines are just arguments."""
        spec = commandify("echo a\nexport B=1")
        assert spec.argv == ["echo", "a", "export", "B=1"]
        assert spec.env == {}

    def test_cd_after_export_rejected(self):
        with pytest.raises(CommandParseError):
            commandify("export A=1\ncd /tmp\ntrue")

    def test_second_cd_rejected(self):
        with pytest.raises(CommandParseError):
            commandify("cd /tmp\ncd /var\ntrue")

    @pytest.mark.parametrize("line", ["cd", "cd a b"])
    def test_cd_wrong_arity(self, line):
        with pytest.raises(CommandParseError):
            commandify(f"{line}\ntrue")

    @pytest.mark.parametrize("line", ["export", "export A", "export =1"])
    def test_bad_export(self, line):
        with pytest.raises(CommandParseError):
            commandify(f"{line}\ntrue")

    @pytest.mark.parametrize("text", ["", "   \n  ", "cd /tmp", "export A=1"])
    def test_missing_command(self, text):
        with pytest.raises(CommandParseError) as exc_info:
            commandify(text)
        assert isinstance(exc_info.value, ValueError)

    def test_unbalanced_quotes(self):
        with pytest.raises(CommandParseError):
            commandify("echo 'oops")


# =============================================================================
# command() / execute()
# =============================================================================


class TestCommand:
    def test_placeholders_become_single_args(self):
        spec = command("printf %s ${{ value }}", value="a b; rm -rf /")
        assert spec.argv == ["printf", "%s", "a b; rm -rf /"]

    def test_list_placeholder_becomes_several_args(self):
        spec = command("printf %s-${{ args }}", args=["a b", "c"])
        assert spec.argv == ["printf", "%s-a b", "c"]

    def test_empty_value_is_dropped_arg(self):
        spec = command("ls ${{ opt }}", opt=None)
        assert spec.argv == ["ls"]

    def test_capture_output(self):
        result = command("echo ${{ a }}", a="SENTINEL").output()
        assert result.stdout == b"SENTINEL\n"

    def test_cwd(self, tmp_path):
        result = command("cd ${{ d }}\npwd", d=tmp_path).output()
        assert result.stdout.decode().strip() == os.path.realpath(tmp_path)

    def test_exported_env_reaches_child(self):
        result = execute(
            "export SHINLINE_T=${{ v }}\n"
            "sh -c 'test \"$SHINLINE_T\" = \"x y\"'",
            v="x y",
        )
        assert result.ok

    def test_missing_cwd_is_spawn_error(self, tmp_path):
        with pytest.raises(SpawnError):
            command("cd ${{ d }}\ntrue", d=tmp_path / "missing").run()

    def test_execute_raises_on_failure(self):
        with pytest.raises(NonZeroExit) as exc_info:
            execute("false")
        assert exc_info.value.returncode == 1
