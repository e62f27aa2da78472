"""
Tests for src/motif_search/cli.py.
"""

from pathlib import Path

import pytest
from pyspark import SparkContext

from src.motif_search import cli
from src.motif_search.errors import ConfigurationError


class _SharedSession:
    """Stands in for create_spark_session() so main() cannot stop the fixture session."""

    def __init__(self, sc: SparkContext) -> None:
        self.sparkContext = sc
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def shared_session(sc: SparkContext, monkeypatch: pytest.MonkeyPatch) -> _SharedSession:
    session = _SharedSession(sc)
    monkeypatch.setattr(cli, "create_spark_session", lambda *args, **kwargs: session)
    return session


class TestParser:
    """Tests for argument parsing."""

    def test_positional_arguments(self) -> None:
        args = cli.build_parser().parse_args(["in", "work", "out"])

        assert (args.input_path, args.work_path, args.output_path) == ("in", "work", "out")
        assert args.motif_length == "8"
        assert args.num_reducers is None
        assert args.master == "local[*]"

    def test_optional_motif_length(self) -> None:
        args = cli.build_parser().parse_args(["in", "work", "out", "5", "--num-reducers", "2"])

        assert args.motif_length == "5"
        assert args.num_reducers == "2"

    def test_parse_count(self) -> None:
        assert cli.parse_count("Motif length", "5") == 5
        assert cli.parse_count("Reducer count", None) is None

        with pytest.raises(ConfigurationError, match="Motif length must be an integer"):
            cli.parse_count("Motif length", "eight")


class TestMain:
    """Tests for the exit-status contract."""

    def test_success(self, shared_session, write_lines, tmp_path: Path, capsys) -> None:
        input_path = write_lines("seqs.txt", ["ggaccttt", "atacaggc"])

        status = cli.main([input_path, str(tmp_path / "work"), str(tmp_path / "out"), "3"])

        assert status == 0
        assert shared_session.stopped
        out = capsys.readouterr().out
        assert "Consensus motif:" in out
        assert "Alignments (2 sequences)" in out

    def test_bad_configuration(self, shared_session, tmp_path: Path) -> None:
        status = cli.main([str(tmp_path / "missing.txt"), str(tmp_path / "w"), str(tmp_path / "o")])

        assert status == 1
        assert not shared_session.stopped

    def test_non_integer_motif_length_is_a_configuration_error(
        self, shared_session, write_lines, tmp_path: Path
    ) -> None:
        input_path = write_lines("seqs.txt", ["ggaccttt"])

        status = cli.main([input_path, str(tmp_path / "w"), str(tmp_path / "o"), "eight"])

        assert status == 1
        assert not shared_session.stopped

    def test_non_integer_reducer_count_is_a_configuration_error(
        self, shared_session, write_lines, tmp_path: Path
    ) -> None:
        input_path = write_lines("seqs.txt", ["ggaccttt"])

        status = cli.main(
            [input_path, str(tmp_path / "w"), str(tmp_path / "o"), "--num-reducers", "x"]
        )

        assert status == 1
        assert not shared_session.stopped

    def test_stage_failure(self, shared_session, write_lines, tmp_path: Path) -> None:
        input_path = write_lines("seqs.txt", ["ggaccttt"])
        (tmp_path / "out").mkdir()

        status = cli.main([input_path, str(tmp_path / "work"), str(tmp_path / "out"), "2"])

        assert status == 1
        assert shared_session.stopped
