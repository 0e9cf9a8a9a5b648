import json
import sys

import pytest

import batch
from batch import audit_directory


@pytest.fixture
def post_dir(tmp_path, clean_post, thin_post):
    (tmp_path / "a-clean.html").write_text(clean_post)
    (tmp_path / "b-thin.html").write_text(thin_post)
    (tmp_path / "c-broken.html").write_text("<p>no frontmatter</p>")
    (tmp_path / "notes.txt").write_text("ignored")
    return tmp_path


def test_audit_directory(post_dir):
    results = audit_directory(post_dir)
    assert [r["status"] for r in results] == ["success", "success", "error"]

    clean, thin, broken = results
    assert clean["grade"] == "A"
    assert clean["issues"] == 0
    assert clean["slug"] == "summer-safety-tips-for-toddlers"
    assert thin["grade"] == "F"
    assert thin["average"] == pytest.approx(58)
    assert thin["audit"]["issues"][0]["id"] == "title-short"
    assert "No YAML frontmatter" in broken["error"]


def test_pattern(post_dir):
    assert audit_directory(post_dir, "*.md") == []


def test_cli_writes_report(post_dir, tmp_path, monkeypatch, capsys):
    report_dir = tmp_path / "reports"
    monkeypatch.setattr(sys, "argv", ["batch.py", str(post_dir), "--report-dir", str(report_dir)])
    batch.main()

    reports = list(report_dir.glob("batch_report_*.json"))
    assert len(reports) == 1
    assert len(json.loads(reports[0].read_text())) == 3
    out = capsys.readouterr().out
    assert "Audited: 2/3" in out
    assert "c-broken.html" in out


def test_cli_rejects_missing_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["batch.py", str(tmp_path / "nope")])
    with pytest.raises(SystemExit):
        batch.main()
