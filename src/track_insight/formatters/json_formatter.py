"""JSON formatter for Track Insight."""

import json
from typing import Any

from .base import BaseFormatter, is_undefined, tabulate


def _json_value(value: Any) -> Any:
    return None if is_undefined(value) else value


class JsonFormatter(BaseFormatter):
    """Render results as JSON: a list of column-keyed objects per query."""

    def render(self, name: str, result: Any) -> None:
        print(self.format(name, result))

    def format(self, name: str, result: Any) -> str:
        return json.dumps(self.to_data(name, result), indent=2)

    def to_data(self, name: str, result: Any) -> dict:
        columns, rows = tabulate(name, result)
        return {
            "query": name,
            "rows": [{col: _json_value(v) for col, v in zip(columns, row)} for row in rows],
        }

    def render_many(self, results: dict) -> None:
        print(json.dumps([self.to_data(name, r) for name, r in results.items()], indent=2))
