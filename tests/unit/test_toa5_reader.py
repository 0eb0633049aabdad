from __future__ import annotations

import io
import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from toa5 import (
    EmptyRecordNameError,
    EndOfStream,
    Environment,
    MalformedLineError,
    NoOptionsProvidedError,
    NotTOA5Error,
    Reader,
    ReaderOptions,
    Record,
    RowWidthMismatchError,
    TimestampParseError,
    TruncatedHeaderError,
    open_reader,
    open_reader_with_options,
)

"""Unit tests for the TOA5 reader: header accessors and the row/column cursor."""

HEADER = (
    "TOA5,Station,CR1000,S11,CR1000.Std.32.03,CPU:T1.CR1,4242,Table\n"
    "TIMESTAMP,RECORD,Batt_V_Avg,,,,,\n"
    "TS,RN,Volts,,,,,\n"
    ",,Avg,,,,,\n"
)


def _open(text: str) -> Reader:
    return open_reader(io.StringIO(text))


def _ts(s: str) -> datetime:
    return datetime.strptime(s, "%Y-%m-%d %H:%M").replace(tzinfo=UTC)


def _outcomes(reader: Reader, n: int) -> list[Record | None]:
    """Read n times; EmptyRecordNameError is reported as None."""
    out: list[Record | None] = []
    for _ in range(n):
        try:
            out.append(reader.read())
        except EmptyRecordNameError:
            out.append(None)
    return out


# --- header -------------------------------------------------------------------

def test_environment_ok(sample_toa5: str):
    r = _open(sample_toa5)
    assert r.environment() == Environment(
        filetype="TOA5",
        station="Station",
        model="CR1000",
        serial="S11",
        os_version="CR1000.Std.32.03",
        program="CPU:T1.CR1",
        signature="4242",
        table="Table",
    )


def test_metadata_lines(sample_toa5: str):
    r = _open(sample_toa5)
    assert r.fields() == ["TIMESTAMP", "RECORD", "Batt_V_Avg", "", "", "", "", ""]
    assert r.units() == ["TS", "RN", "Volts", "", "", "", "", ""]
    assert r.aggregation() == ["", "", "Avg", "", "", "", "", ""]


@pytest.mark.parametrize(
    "text, exc",
    [
        ("", EndOfStream),
        ("\n\n", EndOfStream),
        ("TOA3,Station,CR1000,S11,CR1000.Std.32.03,CPU:T1.CR1,4242,Table", NotTOA5Error),
        ("TOB1,Station", NotTOA5Error),  # marker is checked regardless of field count
        ("TOA5,Station,CR1000,S11,CR1000.Std.32.03,", TruncatedHeaderError),
        ("TOA5,Station,CR1000,S11,CR1000.Std.32.03,CPU:T1.CR1,4242,Table\n", EndOfStream),
        (HEADER, EndOfStream),  # header only: no first data row to prime the cursor
    ],
)
def test_construction_errors(text: str, exc: type[Exception]):
    with pytest.raises(exc):
        _open(text)


def test_empty_input_is_eof_not_toa5():
    with pytest.raises(EndOfStream) as e:
        _open("")
    assert not isinstance(e.value, NotTOA5Error)
    assert isinstance(e.value, EOFError)


def test_truncated_header_reports_count():
    with pytest.raises(TruncatedHeaderError) as e:
        _open("TOA5,Station,CR1000,S11,CR1000.Std.32.03,")
    assert e.value.got == 6
    assert e.value.expected == 8


def test_environment_extra_fields_ignored():
    text = HEADER.replace("4242,Table", "4242,Table,extra") + "2020-06-07 23:45,0,12.52,,,,,\n"
    # 環境行の 9 番目以降は無視、ただし行幅チェックは fields 行基準
    r = _open(text)
    assert r.environment().table == "Table"


def test_open_reader_with_options_none():
    with pytest.raises(NoOptionsProvidedError):
        open_reader_with_options(io.StringIO(HEADER), None)


# --- cursor -------------------------------------------------------------------

def test_read_reference_sequence(sample_toa5: str):
    r = _open(sample_toa5)
    got = _outcomes(r, 14)
    t1, t2 = _ts("2020-06-07 23:45"), _ts("2020-06-08 00:00")
    expected = [
        Record(t1, 0.0, "RECORD", "RN", ""),
        Record(t1, 12.52, "Batt_V_Avg", "Volts", "Avg"),
        None, None, None, None, None,
        Record(t2, 1.0, "RECORD", "RN", ""),
        Record(t2, 12.56, "Batt_V_Avg", "Volts", "Avg"),
        None, None, None, None, None,
    ]
    assert got == expected
    with pytest.raises(EndOfStream):
        r.read()


def test_read_after_end_of_stream_keeps_signalling_eof(sample_toa5: str):
    r = _open(sample_toa5)
    _outcomes(r, 14)
    for _ in range(3):
        with pytest.raises(EndOfStream):
            r.read()


def test_empty_name_advances_cursor(sample_toa5: str):
    r = _open(sample_toa5)
    _outcomes(r, 2)
    with pytest.raises(EmptyRecordNameError) as e:
        r.read()
    assert e.value.column == 3
    assert r.skipped_cells == 1
    with pytest.raises(EmptyRecordNameError) as e:
        r.read()
    assert e.value.column == 4


def test_width_w_yields_w_minus_one_outcomes():
    text = (
        "TOA5,S,M,1,OS,P,1,T\n"
        "TIMESTAMP,A,B,C\n"
        "TS,u,u,u\n"
        ",Avg,Avg,Smp\n"
        "2021-01-01 00:00:00,1,2,3\n"
        "2021-01-01 00:01:00,4,5,6\n"
    )
    r = _open(text)
    records = list(r)
    assert [rec.name for rec in records] == ["A", "B", "C", "A", "B", "C"]
    assert [rec.value for rec in records] == [1, 2, 3, 4, 5, 6]
    assert r.skipped_cells == 0


def test_records_of_one_row_share_timestamp(quoted_toa5: str):
    r = _open(quoted_toa5)
    records = list(r)
    assert len(records) == 12  # 3 rows x 4 data columns
    for i in range(0, 12, 4):
        assert len({rec.timestamp for rec in records[i:i + 4]}) == 1
    assert records[0].timestamp == datetime(2021, 3, 1, 0, 10, tzinfo=UTC)
    assert records[4].timestamp - records[0].timestamp == timedelta(minutes=10)


def test_non_numeric_cells_become_nan(quoted_toa5: str):
    r = _open(quoted_toa5)
    records = list(r)
    by_key = {(rec.timestamp.minute, rec.name): rec for rec in records}
    assert math.isnan(by_key[(10, "RH")].value)  # "NAN"
    assert by_key[(10, "RH")].is_missing
    assert math.isnan(by_key[(30, "WS_ms_Avg")].value)  # empty cell
    assert by_key[(20, "RH")].value == pytest.approx(88.1)
    assert by_key[(10, "AirT_Avg")].unit == "Deg C"
    assert by_key[(10, "RH")].aggregation == "Smp"


def test_garbage_cell_is_not_an_error():
    r = _open(HEADER + "2020-06-07 23:45,abc,--,,,,,\n")
    rec = r.read()
    assert rec.name == "RECORD"
    assert math.isnan(rec.value)
    assert math.isnan(r.read().value)


def test_iteration_stops_at_end_of_stream(sample_toa5: str):
    r = _open(sample_toa5)
    names = [rec.name for rec in r]
    assert names == ["RECORD", "Batt_V_Avg", "RECORD", "Batt_V_Avg"]
    assert r.skipped_cells == 10
    assert list(r) == []


def test_blank_lines_between_rows_are_skipped(sample_toa5: str):
    text = sample_toa5.replace("12.52,,,,,\n", "12.52,,,,,\n\n\n")
    r = _open(text)
    assert len(list(r)) == 4


def test_timestamp_primary_layout_with_seconds():
    r = _open(HEADER + "2020-06-07 23:45:30,0,12.52,,,,,\n")
    assert r.read().timestamp == datetime(2020, 6, 7, 23, 45, 30, tzinfo=UTC)


def test_bad_timestamp_on_first_row_fails_construction():
    with pytest.raises(TimestampParseError):
        _open(HEADER + "yesterday,0,12.52,,,,,\n")


def test_bad_timestamp_later_is_terminal(sample_toa5: str):
    r = _open(sample_toa5 + "not-a-date,2,12.60,,,,,\n2020-06-08 00:30,3,12.61,,,,,\n")
    _outcomes(r, 14)
    with pytest.raises(TimestampParseError) as e:
        r.read()
    # 失敗は記録され、以降の read でも同じ例外
    with pytest.raises(TimestampParseError) as again:
        r.read()
    assert again.value is e.value


def test_row_narrower_than_header_raises_mismatch(sample_toa5: str):
    r = _open(sample_toa5 + "2020-06-08 00:15,2,12.60\n")
    _outcomes(r, 14)
    with pytest.raises(RowWidthMismatchError) as e:
        r.read()
    assert e.value.expected == 8
    assert e.value.got == 3
    assert e.value.line == 7


def test_row_wider_than_header_raises_mismatch(sample_toa5: str):
    r = _open(sample_toa5 + "2020-06-08 00:15,2,12.60,,,,,,9\n")
    _outcomes(r, 14)
    with pytest.raises(RowWidthMismatchError):
        r.read()
    with pytest.raises(RowWidthMismatchError):
        r.read()


def test_units_line_shorter_than_fields_raises_mismatch():
    text = (
        "TOA5,S,M,1,OS,P,1,T\n"
        "TIMESTAMP,A,B\n"
        "TS,u\n"
        ",Avg,Avg\n"
        "2021-01-01 00:00:00,1,2\n"
    )
    with pytest.raises(RowWidthMismatchError) as e:
        _open(text)
    assert e.value.metadata == "units"
    assert e.value.expected == 2
    assert e.value.got == 3
    assert "units line has 2 fields, data row has 3" in str(e.value)


def test_aggregation_line_shorter_than_fields_names_aggregation():
    text = (
        "TOA5,S,M,1,OS,P,1,T\n"
        "TIMESTAMP,A,B\n"
        "TS,u,u\n"
        ",Avg\n"
        "2021-01-01 00:00:00,1,2\n"
    )
    with pytest.raises(RowWidthMismatchError) as e:
        _open(text)
    assert e.value.metadata == "aggregation"
    assert e.value.line == 5
    assert "aggregation line has 2 fields" in str(e.value)


def test_row_width_error_without_metadata(sample_toa5: str):
    r = _open(sample_toa5 + "2020-06-08 00:15,2\n")
    _outcomes(r, 14)
    with pytest.raises(RowWidthMismatchError) as e:
        r.read()
    assert e.value.metadata is None
    assert str(e.value) == "row width mismatch at line 7: expected 8 fields, got 2"


def test_malformed_line_is_terminal():
    # 閉じ引用符の直後に区切り文字以外 -> csv.Error
    r = _open(HEADER + "2020-06-07 23:45,0,12.52,,,,,\n2020-06-08 00:00,\"1\"x,1,,,,,\n")
    _outcomes(r, 7)
    with pytest.raises(MalformedLineError):
        r.read()


def test_timestamp_only_rows_are_crossed():
    text = (
        "TOA5,S,M,1,OS,P,1,T\n"
        "TIMESTAMP\n"
        "TS\n"
        "\"\"\n"
        "2021-01-01 00:00:00\n"
        "2021-01-01 00:01:00\n"
    )
    r = _open(text)
    with pytest.raises(EndOfStream):
        r.read()


def test_line_number_tracks_current_row(sample_toa5: str):
    r = _open(sample_toa5)
    assert r.line_number == 5
    _outcomes(r, 8)
    assert r.line_number == 6


# --- options ------------------------------------------------------------------

def test_semicolon_delimiter_and_custom_layout():
    text = (
        "TOA5;S;CR6;9;OS;P;1;T\n"
        "TIMESTAMP;Temp\n"
        "TS;C\n"
        ";Avg\n"
        "07/06/2020 23:45:10; 21.5\n"
    )
    opts = ReaderOptions(delimiter=";", time_layout="%d/%m/%Y %H:%M:%S")
    r = open_reader_with_options(io.StringIO(text), opts)
    rec = r.read()
    assert rec.timestamp == datetime(2020, 6, 7, 23, 45, 10, tzinfo=UTC)
    assert rec.value == 21.5  # leading space trimmed


def test_time_location_is_applied_not_local_zone(sample_toa5: str):
    plus_one = timezone(timedelta(hours=1))
    r = open_reader_with_options(io.StringIO(sample_toa5), ReaderOptions(time_location=plus_one))
    rec = r.read()
    assert rec.timestamp.tzinfo is plus_one
    assert rec.timestamp == datetime(2020, 6, 7, 22, 45, tzinfo=UTC)


def test_reader_options_validation():
    with pytest.raises(ValueError):
        ReaderOptions(delimiter=",,")
    with pytest.raises(ValueError):
        ReaderOptions(time_layout="")


# --- cell values ----------------------------------------------------------------

def _single_value(cell: str) -> float:
    text = HEADER.replace("Batt_V_Avg,,,,,", "Batt_V_Avg").replace("Volts,,,,,", "Volts").replace(
        ",,Avg,,,,,", ",,Avg"
    )
    r = _open(text + f'2020-06-07 23:45,0,"{cell}"\n')
    r.read()
    return r.read().value


@pytest.mark.parametrize("cell", ["1_000", "1e400", "-1e400", "12.5 ", "12.5\t", "1p3", "0x1", "--1", "NAN", ""])
def test_cells_outside_numeric_grammar_are_nan(cell: str):
    assert math.isnan(_single_value(cell))


@pytest.mark.parametrize(
    "cell, expected",
    [
        ("12.5", 12.5),
        ("-7", -7.0),
        ("+3.25", 3.25),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("0x1p-2", 0.25),
        ("-0X1.8P1", -3.0),
        ("INF", math.inf),
        ("-Infinity", -math.inf),
    ],
)
def test_numeric_cells(cell: str, expected: float):
    assert _single_value(cell) == expected
