# Shared pytest fixtures
from __future__ import annotations
import logging
import tempfile
from pathlib import Path
import pytest

from toa5.logging.init import reset_logging

SAMPLE_TOA5 = """TOA5,Station,CR1000,S11,CR1000.Std.32.03,CPU:T1.CR1,4242,Table
TIMESTAMP,RECORD,Batt_V_Avg,,,,,
TS,RN,Volts,,,,,
,,Avg,,,,,
2020-06-07 23:45,0,12.52,,,,,
2020-06-08 00:00,1,12.56,,,,,
"""

# LoggerNet が実際に書き出す形式 (全フィールド引用符付き, 秒あり)
QUOTED_TOA5 = '''"TOA5","Lake","CR1000X","7302","CR1000X.Std.04.02","CPU:lake.CR1X","33281","Met"
"TIMESTAMP","RECORD","AirT_Avg","RH","WS_ms_Avg"
"TS","RN","Deg C","%","meters/second"
"","","Avg","Smp","Avg"
"2021-03-01 00:10:00",17,3.41,"NAN",1.2
"2021-03-01 00:20:00",18,3.38,88.1,0.9
"2021-03-01 00:30:00",19,3.30,88.7,
'''


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    # CLI テストごとに stdout ハンドラを作り直す
    reset_logging()
    yield
    reset_logging()
    app_logger = logging.getLogger("toa5")
    for h in app_logger.handlers[:]:
        app_logger.removeHandler(h)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
file_pattern: "*.dat"
delimiter: ","
time_layout: "%Y-%m-%d %H:%M:%S"
timezone: UTC
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "toa5.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_toa5() -> str:
    return SAMPLE_TOA5


@pytest.fixture()
def quoted_toa5() -> str:
    return QUOTED_TOA5


@pytest.fixture()
def toa5_files(temp_workdir: Path) -> list[Path]:
    files = []
    for name, text in [("station_a.dat", SAMPLE_TOA5), ("lake_met.dat", QUOTED_TOA5)]:
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        files.append(f)
    return files
