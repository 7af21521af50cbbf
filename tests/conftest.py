"""
Pytest configuration and shared fixtures.
"""

import pytest
from pathlib import Path

from variantgen.logger import reset_logger


HEADER_ROW = "job\tvariant\textended\n"


@pytest.fixture(autouse=True)
def fresh_logger(monkeypatch):
    """Each test starts with a new global logger and no VARIANTGEN_* overrides."""
    for var in (
        "VARIANTGEN_PACKAGE",
        "VARIANTGEN_IMPORT_PATH",
        "VARIANTGEN_FORMATTER",
        "VARIANTGEN_LOG_LEVEL",
        "VARIANTGEN_LOG_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def write_tsv(tmp_path):
    """Write rows (lists of fields) as a TSV file with the standard header."""
    def _write(rows, name="variants.tsv", header=HEADER_ROW) -> Path:
        path = tmp_path / name
        body = "".join("\t".join(row) + "\n" for row in rows)
        path.write_text(header + body, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_tsv(write_tsv) -> Path:
    """Two jobs, out of order on purpose."""
    return write_tsv([
        ["job-b", "v2", "upgrade-minor"],
        ["job-a", "v1", "parallel,csi"],
    ])


@pytest.fixture
def stub_formatter(tmp_path) -> Path:
    """A shell script standing in for gofmt: appends a marker to the file."""
    script = tmp_path / "fakefmt.sh"
    script.write_text('#!/bin/sh\necho "// formatted" >> "$1"\n')
    script.chmod(0o755)
    return script


@pytest.fixture
def failing_formatter(tmp_path) -> Path:
    script = tmp_path / "badfmt.sh"
    script.write_text('#!/bin/sh\necho "syntax error" >&2\nexit 2\n')
    script.chmod(0o755)
    return script
