import io
import json

import pytest

import gds_cli

from samples import NO_SEGMENTS, ROUND_TRIP_I


@pytest.fixture
def itinerary_file(tmp_path):
    path = tmp_path / "itinerary.txt"
    path.write_text(ROUND_TRIP_I, encoding="utf-8")
    return path


def test_json_output(itinerary_file, capsys):
    assert gds_cli.main([str(itinerary_file), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["ok"] is True
    assert data["route"] == "MSY-CDG/CDG-MSY"
    assert len(data["legs"]) == 2


def test_summary_output(itinerary_file, capsys):
    assert gds_cli.main([str(itinerary_file)]) == 0
    out = capsys.readouterr().out
    assert "MSY-CDG/CDG-MSY" in out
    assert "Leg 2: CDG → MSY" in out
    assert "DL2542" in out
    assert "Layover at ATL: 1h 42m" in out


def test_failure_exit_code(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text(NO_SEGMENTS, encoding="utf-8")
    assert gds_cli.main([str(path)]) == 1
    assert "PARSING_ERROR" in capsys.readouterr().out


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(ROUND_TRIP_I))
    assert gds_cli.main(["--json"]) == 0
    assert json.loads(capsys.readouterr().out)["total_segments"] == 4
