"""JSON file sink for exporting reports to files."""

import json
from pathlib import Path
from typing import Any

from zaldo.sinks.serialization import to_dict


class JsonFileSink:
    """Output report records to JSON files, one file per report type."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def write_batch(self, report_type: str, records: list[Any]) -> None:
        """Write a batch of records to a JSON file."""
        file_path = self.output_dir / f"{report_type}.json"

        data = [to_dict(record) for record in records]

        with open(file_path, "w", encoding="utf-8") as f:
            if self.pretty:
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                json.dump(data, f, ensure_ascii=False)

        self._counts[report_type] = len(records)

    def close(self) -> None:
        """Print summary."""
        print(f"JSON reports written to: {self.output_dir}")
        for report_type, count in self._counts.items():
            print(f"  {report_type}: {count} records")
