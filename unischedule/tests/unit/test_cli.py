import pytest

from unischedule.cli import export_main, parse_main
from unischedule.core.service import load_dataset


@pytest.fixture
def export_file(tmp_path, schedule_html):
    path = tmp_path / "export.html"
    path.write_text(schedule_html, encoding="utf-8")
    return path


def test_parse_writes_dataset_and_reports_count(tmp_path, export_file, capsys):
    output = tmp_path / "timetables.json"

    exit_code = parse_main([str(export_file), str(output)])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == f"Wrote 3 timetables to {output}"
    assert len(load_dataset(output).groups) == 3


def test_parse_without_input_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_main([])
    assert excinfo.value.code != 0
    assert "usage:" in capsys.readouterr().err


def test_parse_missing_file_fails_without_output(tmp_path, capsys):
    output = tmp_path / "timetables.json"
    exit_code = parse_main([str(tmp_path / "missing.html"), str(output)])
    assert exit_code == 1
    assert "not found" in capsys.readouterr().err
    assert not output.exists()


def test_parse_rejects_non_positive_slot_minutes(tmp_path, export_file):
    output = tmp_path / "timetables.json"
    assert parse_main([str(export_file), str(output), "--slot-minutes", "0"]) == 1
    assert not output.exists()


def test_export_writes_calendar(tmp_path, export_file):
    dataset_path = tmp_path / "timetables.json"
    parse_main([str(export_file), str(dataset_path)])
    ics_path = tmp_path / "se1.ics"

    exit_code = export_main([
        str(dataset_path), "SE.1", "--start", "2026-01-19", "--end", "2026-05-30", "-o", str(ics_path),
    ])

    assert exit_code == 0
    content = ics_path.read_bytes().decode("utf-8")
    assert content.count("BEGIN:VEVENT") == 5
    assert "\r\nRRULE:FREQ=WEEKLY;UNTIL=20260530T235959\r\n" in content


def test_export_invalid_range(tmp_path, export_file, capsys):
    dataset_path = tmp_path / "timetables.json"
    parse_main([str(export_file), str(dataset_path)])
    ics_path = tmp_path / "se1.ics"

    exit_code = export_main([
        str(dataset_path), "SE.1", "--start", "2026-05-30", "--end", "2026-01-19", "-o", str(ics_path),
    ])

    assert exit_code == 1
    assert "End date must be on or after start date." in capsys.readouterr().err
    assert not ics_path.exists()


def test_export_unknown_group(tmp_path, export_file):
    dataset_path = tmp_path / "timetables.json"
    parse_main([str(export_file), str(dataset_path)])
    assert export_main([str(dataset_path), "nope"]) == 1
