"""
Tests for the command-line entry point.
"""

import io

import pytest

from gitmask.cli import main
from gitmask.config import DEFAULT_MANIFEST, ENV_PROFILE, ENV_VERBOSE, TOOL_VERSION, USAGE_MESSAGE


def run(argv, data: bytes = b""):
    """Invoke main() with in-memory stdin/stdout."""
    stdin = io.BytesIO(data)
    stdout = io.BytesIO()
    code = main(argv, stdin=stdin, stdout=stdout)
    return code, stdout.getvalue()


class TestFilterCommand:
    """clean/smudge through the CLI."""

    def test_clean_with_builtin_mapping(self) -> None:
        code, out = run(["clean"], b"pw=devPassword devPassword devPassword\n")
        assert code == 0
        assert out == (
            b"pw=obfuscatedDevelopmentPassword obfuscatedDevelopmentPassword "
            b"obfuscatedDevelopmentPassword\n"
        )

    def test_smudge_with_builtin_mapping(self) -> None:
        code, out = run(["smudge"], b"pw=obfuscatedProductionPassword")
        assert code == 0
        assert out == b"pw=prodPassword"

    def test_git_path_argument_is_accepted(self) -> None:
        code, out = run(["clean", "config/app.properties"], b"prodPassword")
        assert code == 0
        assert out == b"obfuscatedProductionPassword"

    def test_empty_input(self) -> None:
        assert run(["clean"], b"") == (0, b"")

    def test_manifest_option(self, write_manifest) -> None:
        path = write_manifest({
            "version": 1,
            "profiles": {
                "default": {"mappings": [{"plaintext": "hunter2", "obfuscated": "*******"}]},
            },
        })
        code, out = run(["-m", str(path), "clean"], b"password: hunter2")
        assert code == 0
        assert out == b"password: *******"

    def test_default_manifest_file_picked_up(self, write_manifest) -> None:
        write_manifest(
            {"version": 1, "profiles": {"default": {"mappings": []}}},
            name=DEFAULT_MANIFEST,
        )
        code, out = run(["clean"], b"prodPassword")
        assert code == 0
        assert out == b"prodPassword"

    def test_profile_from_option_and_env(self, write_manifest, monkeypatch) -> None:
        path = write_manifest({
            "version": 1,
            "profiles": {
                "default": {"mappings": []},
                "ci": {"mappings": [{"plaintext": "tok", "obfuscated": "TOK_MASK"}]},
            },
        })
        assert run(["-m", str(path), "-p", "ci", "clean"], b"tok")[1] == b"TOK_MASK"

        monkeypatch.setenv(ENV_PROFILE, "ci")
        assert run(["-m", str(path), "clean"], b"tok")[1] == b"TOK_MASK"


class TestErrors:
    """Exit codes and messages."""

    @pytest.mark.parametrize("argv", [[], ["unknown"], ["CLEAN"], ["-v"]])
    def test_invalid_direction(self, argv, capsys) -> None:
        code, out = run(argv, b"prodPassword")
        assert code == 1
        assert out == b""
        assert USAGE_MESSAGE in capsys.readouterr().err

    def test_missing_manifest(self, capsys) -> None:
        code, out = run(["-m", "nowhere.yml", "clean"], b"prodPassword")
        assert code == 1
        assert out == b""
        assert "Manifest file not found" in capsys.readouterr().err

    def test_unknown_profile(self, capsys) -> None:
        code, out = run(["-p", "staging", "smudge"], b"data")
        assert code == 1
        assert out == b""
        assert "Profile not found: staging" in capsys.readouterr().err


class TestOutputChannels:
    """Only filtered content goes to stdout."""

    def test_verbose_diagnostics_on_stderr(self, capsys) -> None:
        code, out = run(["-v", "clean"], b"devPassword devPassword devPassword")
        captured = capsys.readouterr()

        assert code == 0
        assert out == b" ".join([b"obfuscatedDevelopmentPassword"] * 3)
        assert "Entry #0: 0 replacement(s)" in captured.err
        assert "Entry #1: 3 replacement(s)" in captured.err
        assert "built-in mapping" in captured.err
        assert "devPassword" not in captured.err
        assert captured.out == ""

    def test_verbose_from_environment(self, monkeypatch, capsys) -> None:
        monkeypatch.setenv(ENV_VERBOSE, "yes")
        run(["smudge"], b"")
        assert "Direction: smudge" in capsys.readouterr().err

    def test_quiet_by_default(self, capsys) -> None:
        run(["clean"], b"prodPassword")
        assert capsys.readouterr().err == ""

    def test_help(self, capsys) -> None:
        assert main(["--help"]) == 0
        err = capsys.readouterr().err
        assert "clean|smudge" in err
        assert "filter.gitmask.clean" in err

    def test_version(self, capsys) -> None:
        assert main(["--version"]) == 0
        assert TOOL_VERSION in capsys.readouterr().out


class RaisingStream(io.BytesIO):
    """stdin stand-in whose read() raises the given exception."""

    def __init__(self, exc: BaseException):
        super().__init__()
        self.exc = exc

    def read(self, *args):
        raise self.exc


class TestExitPaths:
    """Interrupts, unexpected failures and stray arguments."""

    def test_keyboard_interrupt_exits_130(self, capsys) -> None:
        stdout = io.BytesIO()
        code = main(["clean"], stdin=RaisingStream(KeyboardInterrupt()), stdout=stdout)
        assert code == 130
        assert stdout.getvalue() == b""
        assert "Interrupted" in capsys.readouterr().err

    def test_unexpected_error_exits_1(self, capsys) -> None:
        stdout = io.BytesIO()
        code = main(["smudge"], stdin=RaisingStream(RuntimeError("pipe closed")), stdout=stdout)
        assert code == 1
        assert stdout.getvalue() == b""
        err = capsys.readouterr().err
        assert "Unexpected error: pipe closed" in err
        assert "Traceback" not in err

    def test_unexpected_error_traceback_when_verbose(self, capsys) -> None:
        code = main(["-v", "clean"], stdin=RaisingStream(RuntimeError("boom")), stdout=io.BytesIO())
        assert code == 1
        assert "Traceback" in capsys.readouterr().err

    def test_non_text_manifest_encoding(self, write_manifest, capsys) -> None:
        path = write_manifest({
            "version": 1,
            "encoding": "rot13",
            "profiles": {"default": {"mappings": []}},
        })
        code, out = run(["-m", str(path), "clean"], b"data")
        assert code == 1
        assert out == b""
        err = capsys.readouterr().err
        assert "Unknown encoding: rot13" in err
        assert "Unexpected error" not in err

    @pytest.mark.parametrize("argv", [
        ["--bogus", "clean"],
        ["clean", "--bogus"],
        ["clean", "config/app.properties", "extra"],
    ])
    def test_unrecognized_arguments(self, argv, capsys) -> None:
        code, out = run(argv, b"prodPassword")
        assert code == 1
        assert out == b""
        err = capsys.readouterr().err
        assert "Unrecognized arguments" in err
        assert USAGE_MESSAGE in err
