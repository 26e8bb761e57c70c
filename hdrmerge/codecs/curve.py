"""Curve tables to/from CSV."""

import csv
from pathlib import Path
from typing import Union

import numpy as np

from ..core.curves import RGBCurve


class CurveCodec:
    """Read/write RGBCurve tables as CSV, one row per sample.

    Format:
        Red,Green,Blue
        0.0,0.0,0.0
        ...
    """

    HEADER = ["Red", "Green", "Blue"]

    @classmethod
    def write(cls, path: Union[str, Path], curve: RGBCurve) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        table = curve.table.numpy()
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(cls.HEADER)
            for row in table.T:
                writer.writerow([repr(float(x)) for x in row])

    @classmethod
    def read(cls, path: Union[str, Path]) -> RGBCurve:
        with open(path, newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            if header is None or [h.strip() for h in header] != cls.HEADER:
                raise ValueError(f"{path}: expected header {','.join(cls.HEADER)}, got {header}")
            rows = [[float(x) for x in row] for row in reader if row]

        for i, row in enumerate(rows):
            if len(row) != 3:
                raise ValueError(f"{path}: row {i + 1} has {len(row)} values, expected 3")

        table = np.asarray(rows, dtype=np.float32).reshape(-1, 3).T
        return RGBCurve.from_table(table)
