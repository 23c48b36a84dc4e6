# tests/core/test_app.py
import pytest
import pandas as pd

from mdx_compat.app import main


@pytest.fixture
def site(tmp_path, monkeypatch):
    """Een tijdelijke site als werkmap."""
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "intro.md").write_text("Budget < 500\n", encoding="utf-8")
    (docs / "vars.md").write_text("Hello {name} and {place}\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_dry_run_exit_code_and_output(site, capsys):
    """Test of een dry-run exit code 0 geeft en de wijzigingen alleen toont."""
    assert main([]) == 0
    out = capsys.readouterr().out

    assert "DRY-RUN" in out
    assert "[MODIFY] docs/intro.md" in out
    assert "[WARN]   docs/vars.md" in out
    assert "Matches: {name}, {place}" in out
    assert "Run with --apply to make changes" in out
    assert (site / "docs/intro.md").read_text(encoding="utf-8") == "Budget < 500\n"


def test_apply_writes_and_backs_up(site, capsys):
    """Test of --apply de bestanden aanpast en een backup maakt."""
    assert main(["--apply"]) == 0
    out = capsys.readouterr().out
    assert "✓ File updated" in out
    assert (site / "docs/intro.md").read_text(encoding="utf-8") == "Budget &lt; 500\n"
    assert (site / "docs/intro.md.bak").exists()


def test_apply_no_backup(site):
    """Test of -a --no-backup geen backups maakt."""
    assert main(["-a", "--no-backup"]) == 0
    assert not (site / "docs/intro.md.bak").exists()


def test_no_documents_exit_code(site, capsys):
    """Test of het ontbreken van documenten exit code 1 geeft."""
    assert main(["--root", "missing"]) == 1
    assert "No .md files found" in capsys.readouterr().out


def test_export_warnings_to_csv(site):
    """Test of --export de waarschuwingen als CSV wegschrijft."""
    assert main(["--export", "warnings"]) == 0
    frame = pd.read_csv(site / "warnings.csv")
    assert list(frame["File"]) == ["docs/vars.md"]
    assert frame["Matches"][0] == "{name} | {place}"


def test_preview_is_limited(site, capsys):
    """Test of alleen de eerste vijf waarschuwingen worden getoond."""
    for i in range(6):
        (site / "docs" / f"w{i}.md").write_text(f"x {{a{i}}}\n", encoding="utf-8")
    assert main([]) == 0
    assert "... and 2 more" in capsys.readouterr().out


def test_invalid_flag_returns_error(site):
    """Test of een onbekende optie een foutcode geeft."""
    assert main(["--bogus"]) == 2
