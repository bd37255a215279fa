import pandas as pd

from fame_ECLReporter.core.model import FattyAcid, MeasurementRow, Mode

MODE = Mode(70.0, 1.0)
C14 = FattyAcid(14, (), "Methyl myristate")
C16 = FattyAcid(16, (), "Methyl palmitate")
C18 = FattyAcid(18, (), "Methyl stearate")
C18_1 = FattyAcid(18, (9,), "Methyl oleate")


def make_rows(times: dict, mode: Mode = MODE) -> list[MeasurementRow]:
    return [MeasurementRow(mode, fa, tuple(t)) for fa, t in times.items()]


def reference_rows(c18_1_time: float = 93.0, mode: Mode = MODE) -> list[MeasurementRow]:
    return make_rows({
        C14: (62.1, 62.3),
        C16: (76.9, 77.1),
        C18: (90.4, 90.6),
        C18_1: (c18_1_time, c18_1_time),
    }, mode)


def make_df(rows: list[MeasurementRow]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "Mode.OnsetTemperature": [r.mode.onset_temperature for r in rows],
            "Mode.TemperatureStep": [r.mode.temperature_step for r in rows],
            "FattyAcid.Carbons": [r.fatty_acid.carbons for r in rows],
            "FattyAcid.Indices": [list(r.fatty_acid.indices) for r in rows],
            "FattyAcid.Label": [r.fatty_acid.label for r in rows],
            "Time": [list(r.times) for r in rows],
        }
    )
