"""Tests for the job-match CLI."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console
from typer.testing import CliRunner

from job_match_cli.main import app
from job_match_infra.fixtures import FixtureData
from tests.mocks.mock_factories import days_ago, make_application, make_job, make_profile

runner = CliRunner()


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a temporary database with no providers; return a fixture file."""
    monkeypatch.setenv("JM_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("JM_PROVIDER_ORDER", "[]")
    monkeypatch.setenv("JM_CACHE_BACKEND", "none")
    monkeypatch.chdir(tmp_path)

    fixture = tmp_path / "board.json"
    data = FixtureData(
        jobs=[
            make_job(id=1, title="Python Developer", view_count=40, published_at=days_ago(1)),
            make_job(id=2, title="Data Engineer", employer="Globex",
                     required_skills=["Python", "Spark"], published_at=days_ago(2)),
            make_job(id=3, title="Java Developer", employer="Initech", category_id=7,
                     required_skills=["Java"], experience_tier="executive",
                     work_arrangement="onsite", published_at=days_ago(3)),
        ],
        candidates=[make_profile()],
        applications=[make_application(job_id=3)],
    )
    fixture.write_text(data.model_dump_json(), encoding="utf-8")
    return fixture


def _invoke(*args: str):  # type: ignore[no-untyped-def]
    with patch("job_match_cli.main.console", Console(width=200)):
        return runner.invoke(app, list(args))


def _load(fixture: Path) -> None:
    result = _invoke("load", str(fixture))
    assert result.exit_code == 0, result.output


@pytest.mark.unit
class TestCli:
    """Test CLI commands end to end against SQLite."""

    def test_version(self) -> None:
        """Version prints the package version."""
        result = _invoke("version")
        assert result.exit_code == 0
        assert "job-match v0.1.0" in result.output

    def test_init_db(self, cli_env: Path) -> None:
        """init-db creates the schema."""
        result = _invoke("init-db")
        assert result.exit_code == 0
        assert "Database ready" in result.output

    def test_load_reports_counts(self, cli_env: Path) -> None:
        """load prints what it stored."""
        result = _invoke("load", str(cli_env))
        assert result.exit_code == 0
        assert "3 jobs" in result.output
        assert "1 candidates" in result.output

    def test_load_rejects_bad_fixture(self, cli_env: Path, tmp_path: Path) -> None:
        """A malformed fixture exits with code 1."""
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        result = _invoke("load", str(bad))
        assert result.exit_code == 1
        assert "Invalid fixture" in result.output

    def test_search(self, cli_env: Path) -> None:
        """search prints matching jobs and facets."""
        _load(cli_env)
        result = _invoke("search", "--query", "developer")
        assert result.exit_code == 0
        assert "Python Developer" in result.output
        assert "Data Engineer" not in result.output
        assert "2 total" in result.output

    def test_search_category_and_employment_type(self, cli_env: Path) -> None:
        """--category and --employment-type narrow the results."""
        _load(cli_env)
        result = _invoke("search", "--category", "7")
        assert result.exit_code == 0
        assert "Java Developer" in result.output
        assert "Python Developer" not in result.output
        assert "1 total" in result.output

        result = _invoke("search", "--employment-type", "contract")
        assert result.exit_code == 0
        assert "0 total" in result.output

    def test_search_sort_order(self, cli_env: Path) -> None:
        """--sort-order asc lists the oldest posting first."""
        _load(cli_env)
        result = _invoke("search", "--sort-order", "asc")
        assert result.exit_code == 0
        assert result.output.index("Java Developer") < result.output.index("Python Developer")

    def test_search_invalid_filter(self, cli_env: Path) -> None:
        """Invalid filters exit with code 1."""
        _load(cli_env)
        result = _invoke("search", "--salary-min", "-5")
        assert result.exit_code == 1
        assert "Invalid search filters" in result.output

    def test_recommend_heuristic(self, cli_env: Path) -> None:
        """recommend --heuristic ranks without providers."""
        _load(cli_env)
        result = _invoke("recommend", "1", "--heuristic")
        assert result.exit_code == 0
        assert "source: heuristic" in result.output
        assert "Python Developer" in result.output
        assert "Java Developer" not in result.output

    def test_recommend_unknown_candidate(self, cli_env: Path) -> None:
        """An unknown candidate exits with code 1."""
        _load(cli_env)
        result = _invoke("recommend", "99")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_trending(self, cli_env: Path) -> None:
        """trending lists the most viewed job."""
        _load(cli_env)
        result = _invoke("trending", "--limit", "1")
        assert result.exit_code == 0
        assert "Python Developer" in result.output

    def test_similar(self, cli_env: Path) -> None:
        """similar lists related jobs."""
        _load(cli_env)
        result = _invoke("similar", "1")
        assert result.exit_code == 0
        assert "Data Engineer" in result.output
        assert "Java Developer" not in result.output

    def test_similar_unknown_job(self, cli_env: Path) -> None:
        """An unknown job exits with code 1."""
        _load(cli_env)
        result = _invoke("similar", "404")
        assert result.exit_code == 1

    def test_skill_gaps(self, cli_env: Path) -> None:
        """skill-gaps prints the heuristic report."""
        _load(cli_env)
        result = _invoke("skill-gaps", "1", "2", "3")
        assert result.exit_code == 0
        assert "source: heuristic" in result.output
        assert "Spark" in result.output
