import io
import json
import sys
import typing as t
from pathlib import Path

import pytest

import logrouter
from logrouter import Router, make_logger
from logrouter.rotation import RotationPolicy


def read_json_lines(path: Path) -> list[dict]:
    """Parse a line-delimited JSON log file; a missing file reads as empty."""
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Never leak the process-wide logger between tests."""
    yield
    logrouter.shutdown()


@pytest.fixture
def log_paths(tmp_path: Path) -> tuple[Path, Path]:
    return tmp_path / "logs" / "info.log", tmp_path / "logs" / "error.log"


@pytest.fixture
def streams() -> tuple[io.StringIO, io.StringIO]:
    return io.StringIO(), io.StringIO()


@pytest.fixture
def dev_router(log_paths, streams) -> t.Iterator[Router]:
    info_file, error_file = log_paths
    stdout, stderr = streams
    router = Router.development(
        info_file=info_file,
        error_file=error_file,
        rotation=RotationPolicy(max_size=1, max_backups=3, max_age=7),
        stdout=stdout,
        stderr=stderr,
        console_color=False,
        exit_func=sys.exit,
    )
    yield router
    router.close()


@pytest.fixture
def prod_router(log_paths) -> t.Iterator[Router]:
    _, error_file = log_paths
    router = Router.production(error_file=error_file, rotation=RotationPolicy(), exit_func=sys.exit)
    yield router
    router.close()


@pytest.fixture
def dev_logger(dev_router):
    return make_logger(dev_router)


@pytest.fixture
def prod_logger(prod_router):
    return make_logger(prod_router)
