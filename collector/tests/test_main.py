"""main モジュールのモックテスト."""

from unittest.mock import MagicMock, patch

import pytest

from influencea.fetcher import FetchError
from influencea.models import RankingRecord


@patch("influencea.main.setup_logging")
class TestRun:
    """run のテスト."""

    @patch("influencea.main.create_session")
    @patch("influencea.main.PageFetcher")
    def test_first_fetch_failure_writes_headers_only(
        self, mock_fetcher_cls, mock_session, mock_logging, tmp_path
    ):
        from influencea.main import run

        mock_fetcher_cls.return_value = MagicMock(side_effect=FetchError("unknown region"))

        code = run(["-n", "Testlandia", "-r", "X", "-o", str(tmp_path)])

        assert code == 0
        output = tmp_path / "rankings-X-cid65.csv"
        assert output.read_text(encoding="utf-8") == (
            "Region: X, CensusID: 65\nRank,Name,Value\n"
        )
        mock_session.assert_called_once_with("Testlandia")

    @patch("influencea.main.create_session")
    @patch("influencea.main.PageFetcher")
    @patch("influencea.collector.time.sleep")
    def test_pages_sorted_by_score(
        self, mock_sleep, mock_fetcher_cls, mock_session, mock_logging, tmp_path
    ):
        from influencea.main import run

        page = [
            RankingRecord(nation="A", rank=1, score=5.0),
            RankingRecord(nation="B", rank=2, score=1.0),
        ]
        mock_fetcher_cls.return_value = MagicMock(side_effect=[page, []])

        code = run(["-n", "Testlandia", "-r", "X", "-c", "65", "-o", str(tmp_path)])

        assert code == 0
        lines = (tmp_path / "rankings-X-cid65.csv").read_text(encoding="utf-8").splitlines()
        assert lines == ["Region: X, CensusID: 65", "Rank,Name,Value", "2,B,1.0", "1,A,5.0"]
        mock_sleep.assert_called_once_with(2.0)

    @patch("influencea.main.create_session")
    @patch("influencea.main.PageFetcher")
    def test_output_error_is_fatal(
        self, mock_fetcher_cls, mock_session, mock_logging, tmp_path
    ):
        from influencea.main import run

        mock_fetcher_cls.return_value = MagicMock(return_value=[])

        code = run(["-n", "Testlandia", "-r", "X", "-o", str(tmp_path / "missing")])

        assert code == 1

    def test_blank_nation(self, mock_logging, tmp_path):
        from influencea.main import run

        assert run(["-n", " ", "-r", "X", "-o", str(tmp_path)]) == 2

    def test_census_id_out_of_range(self, mock_logging):
        from influencea.main import run

        with pytest.raises(SystemExit) as exc:
            run(["-n", "Testlandia", "-r", "X", "-c", "300"])
        assert exc.value.code == 2
