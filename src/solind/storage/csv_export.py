"""CSV export of decoded records.

Layout: one header line (keys of the first row, comma-joined) followed by one
line per row, joined with "\\n". A value is written raw unless it contains a
comma or a double quote; then it is wrapped in double quotes and inner quotes
are doubled.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from solind.core.errors import ExportError


def format_value(value: Any) -> str:
    """Render one cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def quote_field(value: Any) -> str:
    text = format_value(value)
    if "," in text or '"' in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(rows: list[dict[str, Any]]) -> str:
    """Convert uniform rows to CSV text; an empty list gives an empty document."""
    if not rows:
        return ""
    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(quote_field(row[h]) for h in headers))
    return "\n".join(lines)


def file_timestamp(now: datetime) -> str:
    """`19/10/2026, 14:05:09` → `19-10-2026_14-05-09`."""
    stamp = now.strftime("%d/%m/%Y, %H:%M:%S")
    return stamp.replace("/", "-").replace(":", "-").replace(", ", "_")


def timestamped_filename(prefix: str, now: datetime | None = None) -> str:
    return f"{prefix}_{file_timestamp(now or datetime.now())}.csv"


class CsvExporter:
    """Writes rows to `<out_dir>/<filename>`; failures are logged, never raised."""

    def __init__(self, out_dir: Path) -> None:
        self.out_dir = Path(out_dir)
        self.logger = logging.getLogger(self.__class__.__name__)

    def write(self, rows: list[dict[str, Any]], filename: str) -> Path:
        """
        Write the CSV file.

        Raises:
            ExportError: If the directory or file cannot be written.
        """
        full_path = self.out_dir / filename
        tmp = full_path.with_suffix(".tmp")
        try:
            self.out_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(to_csv(rows), encoding="utf-8")
            os.replace(tmp, full_path)
        except OSError as e:
            if tmp.exists():
                tmp.unlink()
            raise ExportError(f"could not write {full_path}: {e}") from e
        return full_path

    def save(self, rows: list[dict[str, Any]], filename: str) -> Path | None:
        try:
            path = self.write(rows, filename)
        except ExportError as e:
            self.logger.error(f"Error saving CSV file: {e}")
            return None
        self.logger.info(f"CSV file saved successfully: {path}")
        self.logger.info(f"Total records: {len(rows)}")
        return path
