"""
Tests for the command-line entry point.
"""

import pytest

from variantgen import __version__
from variantgen.app import main
from variantgen.emitter import render_source
from variantgen.loader import read_tsv_file


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run from tmp_path so no stray .env is picked up."""
    monkeypatch.chdir(tmp_path)


class TestUsage:
    """Test flag handling."""

    def test_version(self, capsys):
        main(["--version"])
        assert capsys.readouterr().out.strip() == __version__

    def test_missing_input(self, tmp_path, capsys):
        """Missing --input prints usage to stderr and exits 1."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--output", str(tmp_path / "out.go")])
        assert excinfo.value.code == 1
        err = capsys.readouterr().err
        assert "Input file is required" in err
        assert "usage:" in err

    def test_missing_output(self, sample_tsv, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv)])
        assert excinfo.value.code == 1
        assert "Output file is required" in capsys.readouterr().err

    def test_empty_formatter_rejected(self, sample_tsv, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv), "--output", str(tmp_path / "out.go"), "--formatter", ""])
        assert excinfo.value.code == 1
        assert not (tmp_path / "out.go").exists()

    def test_unbalanced_formatter_quotes(self, sample_tsv, tmp_path, capsys):
        """A formatter command that cannot be split is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv), "--output", str(tmp_path / "out.go"), "--formatter", 'gofmt "-s'])
        assert excinfo.value.code == 1
        assert "Invalid formatter command" in capsys.readouterr().err
        assert not (tmp_path / "out.go").exists()

    def test_unbalanced_formatter_quotes_from_env(self, sample_tsv, tmp_path, monkeypatch):
        monkeypatch.setenv("VARIANTGEN_FORMATTER", "gofmt '-w")
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv), "--output", str(tmp_path / "out.go")])
        assert excinfo.value.code == 1

    def test_unusable_log_dir(self, sample_tsv, tmp_path, monkeypatch):
        """A log directory that cannot be created exits with a message."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        log_dir = blocker / "logs"
        monkeypatch.setenv("VARIANTGEN_LOG_DIR", str(log_dir))

        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv), "--output", str(tmp_path / "out.go"), "--no-format"])
        assert str(excinfo.value.code).startswith(f"Cannot open log directory {log_dir}:")
        assert not (tmp_path / "out.go").exists()


class TestGenerate:
    """Test end-to-end generation."""

    def test_success(self, sample_tsv, tmp_path, stub_formatter, capsys):
        out = tmp_path / "zz_generated.go"
        main(["--input", str(sample_tsv), "--output", str(out), "--formatter", str(stub_formatter)])

        assert capsys.readouterr().out == f"Go file generated: {out}\n"
        text = out.read_text()
        assert text.startswith(render_source(read_tsv_file(sample_tsv)))
        assert text.endswith("// formatted\n")

    def test_no_format(self, sample_tsv, tmp_path):
        out = tmp_path / "zz_generated.go"
        main(["--input", str(sample_tsv), "--output", str(out), "--no-format"])
        assert out.read_text() == render_source(read_tsv_file(sample_tsv))

    def test_package_flag(self, sample_tsv, tmp_path):
        out = tmp_path / "zz_generated.go"
        main(["--input", str(sample_tsv), "--output", str(out), "--no-format", "--package", "testgrid"])
        assert "package testgrid\n" in out.read_text()

    def test_package_from_env(self, sample_tsv, tmp_path, monkeypatch):
        monkeypatch.setenv("VARIANTGEN_PACKAGE", "fromenv")
        out = tmp_path / "zz_generated.go"
        main(["--input", str(sample_tsv), "--output", str(out), "--no-format"])
        assert "package fromenv\n" in out.read_text()

    def test_missing_input_file(self, tmp_path):
        """Load failures exit 1 and do not create the output."""
        out = tmp_path / "zz_generated.go"
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(tmp_path / "missing.tsv"), "--output", str(out), "--no-format"])
        assert str(excinfo.value.code).startswith(f"Failed to read TSV file {tmp_path / 'missing.tsv'}:")
        assert not out.exists()

    def test_header_only_input(self, write_tsv, tmp_path):
        out = tmp_path / "zz_generated.go"
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(write_tsv([])), "--output", str(out), "--no-format"])
        assert "not enough records" in str(excinfo.value.code)
        assert not out.exists()

    def test_unwritable_output(self, sample_tsv, tmp_path):
        out = tmp_path / "missing-dir" / "zz_generated.go"
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv), "--output", str(out), "--no-format"])
        assert str(excinfo.value.code).startswith(f"Failed to generate .go file {out}:")

    def test_formatter_failure_is_fatal(self, sample_tsv, tmp_path, failing_formatter, capsys):
        out = tmp_path / "zz_generated.go"
        with pytest.raises(SystemExit) as excinfo:
            main(["--input", str(sample_tsv), "--output", str(out), "--formatter", str(failing_formatter)])
        assert str(excinfo.value.code).startswith("error:")
        assert "Go file generated" not in capsys.readouterr().out
