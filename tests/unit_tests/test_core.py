"""
Process-wide initialization, settings and module-level emission.
"""

import io
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

import logrouter
from logrouter import LogConfigError, LoggerNotInitializedError, LoggingSettings, RunMode

from tests.conftest import read_json_lines


@pytest.fixture
def settings(log_paths) -> LoggingSettings:
    info_file, error_file = log_paths
    return LoggingSettings(file_info=str(info_file), file_error=str(error_file), max_backups=2, max_age=1)


class TestLoggingSettings:
    def test_defaults(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        s = LoggingSettings()
        assert s.mode is RunMode.DEVELOPMENT
        assert (s.max_size, s.max_backups, s.max_age) == (100, 5, 30)
        assert s.file_info == "logs/info.log"
        assert s.file_error == "logs/error.log"

    def test_environment_overrides(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGROUTER_RUNMODE", "release")
        monkeypatch.setenv("LOGROUTER_MAX_SIZE", "5")
        monkeypatch.setenv("LOGROUTER_FILE_ERROR", "/var/log/cms/error.log")
        s = LoggingSettings()
        assert s.mode is RunMode.PRODUCTION
        assert s.rotation().max_bytes == 5 * 1024 * 1024
        assert s.file_error == "/var/log/cms/error.log"

    def test_dotenv_file_is_read(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("LOGROUTER_MAX_BACKUPS=9\n")
        assert LoggingSettings().max_backups == 9

    def test_negative_limits_are_rejected(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LOGROUTER_MAX_AGE", "-1")
        with pytest.raises(ValidationError):
            LoggingSettings()

    @pytest.mark.parametrize(("runmode", "expected"), [("release", RunMode.PRODUCTION), ("RELEASE", RunMode.PRODUCTION), ("debug", RunMode.DEVELOPMENT), ("test", RunMode.DEVELOPMENT), ("", RunMode.DEVELOPMENT)])
    def test_runmode_mapping(self, runmode, expected) -> None:
        assert RunMode.from_runmode(runmode) is expected


class TestInitLogger:
    def test_emission_before_init_raises(self) -> None:
        with pytest.raises(LoggerNotInitializedError):
            logrouter.info("too early")

    def test_release_installs_production_pipeline(self, settings, log_paths) -> None:
        info_file, error_file = log_paths
        logrouter.init_logger("release", settings)

        logrouter.info("dropped")
        logrouter.errorf("failed to listen on %s", ":443")

        assert not info_file.exists()
        (record,) = read_json_lines(error_file)
        assert record["message"] == "failed to listen on :443"
        assert record["caller"].startswith("unit_tests/test_core.py:")

    def test_other_runmode_installs_development_pipeline(self, settings, log_paths) -> None:
        info_file, error_file = log_paths
        stdout, stderr = io.StringIO(), io.StringIO()
        logrouter.init_logger("debug", settings, stdout=stdout, stderr=stderr)

        logrouter.info("started", port=8080)
        logrouter.warnf("slow query: %dms", 1200)
        logrouter.error("boom")
        logrouter.sync()

        assert [r["message"] for r in read_json_lines(info_file)] == ["started", "slow query: 1200ms"]
        assert [r["message"] for r in read_json_lines(error_file)] == ["boom"]
        assert "started" in stdout.getvalue() and "boom" in stderr.getvalue()

    def test_get_logger_returns_named_child(self, settings, log_paths) -> None:
        _, error_file = log_paths
        logrouter.init_logger("release", settings)
        logrouter.get_logger("taxonomy").error("delete failed", term_id=3)
        (record,) = read_json_lines(error_file)
        assert record["name"] == "taxonomy"
        assert record["term_id"] == 3

    def test_failed_init_keeps_previous_logger(self, settings, tmp_path, log_paths) -> None:
        _, error_file = log_paths
        logrouter.init_logger("release", settings)
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        broken = LoggingSettings(file_info=str(blocker / "i.log"), file_error=str(blocker / "e.log"))

        with pytest.raises(LogConfigError):
            logrouter.init_logger("release", broken)

        logrouter.error("still here")
        assert [r["message"] for r in read_json_lines(error_file)] == ["still here"]

    def test_reinit_closes_previous_router(self, settings) -> None:
        logrouter.init_logger("release", settings)
        first = logrouter.get_logger().router
        logrouter.init_logger("release", settings)
        assert first.closed
        assert not logrouter.get_logger().router.closed

    def test_shutdown_uninstalls(self, settings) -> None:
        logrouter.init_logger("release", settings)
        router = logrouter.get_logger().router
        logrouter.shutdown()
        assert router.closed
        with pytest.raises(LoggerNotInitializedError):
            logrouter.get_logger()

    def test_module_level_dpanic_follows_mode(self, settings) -> None:
        logrouter.init_logger("release", settings)
        logrouter.dpanic("tolerated in production")
        logrouter.init_logger("debug", settings, stdout=io.StringIO(), stderr=io.StringIO())
        with pytest.raises(logrouter.LoggerPanic):
            logrouter.dpanicf("not tolerated in %s", "development")

    def test_module_level_fixed_keys_are_rejected_as_fields(self, settings, log_paths) -> None:
        _, error_file = log_paths
        logrouter.init_logger("release", settings)
        with pytest.raises(logrouter.InvalidFieldError):
            logrouter.error("bad", message="shadow")
        with pytest.raises(logrouter.InvalidFieldError):
            logrouter.error("bad", level="loud")
        logrouter.sync()
        assert read_json_lines(error_file) == []


class TestFatalTerminatesProcess:
    SCRIPT = textwrap.dedent(
        """
        import sys
        import logrouter

        settings = logrouter.LoggingSettings(file_info=sys.argv[1], file_error=sys.argv[2])
        logrouter.init_logger("release", settings)
        logrouter.fatal("x", code=7)
        print("still running")
        """
    )

    def test_fatal_writes_record_then_exits(self, tmp_path: Path, log_paths) -> None:
        info_file, error_file = log_paths
        src_dir = Path(logrouter.__file__).resolve().parents[1]
        env = dict(os.environ, PYTHONPATH=os.pathsep.join(filter(None, [str(src_dir), os.environ.get("PYTHONPATH")])))

        result = subprocess.run(
            [sys.executable, "-c", self.SCRIPT, str(info_file), str(error_file)],
            cwd=tmp_path,
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )

        assert result.returncode == 1
        assert "still running" not in result.stdout
        (record,) = read_json_lines(error_file)
        assert record["level"] == "fatal"
        assert record["message"] == "x"
        assert record["code"] == 7
        assert "stacktrace" in record
