"""CSV formatter for Track Insight."""

import csv
import io
from typing import Any

from .base import BaseFormatter, is_undefined, tabulate


class CsvFormatter(BaseFormatter):
    """Render results as CSV, header row first."""

    def render(self, name: str, result: Any) -> None:
        print(self.format(name, result), end="")

    def format(self, name: str, result: Any) -> str:
        columns, rows = tabulate(name, result)
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(columns)
        for row in rows:
            writer.writerow(["undefined" if is_undefined(v) else v for v in row])
        return output.getvalue()
