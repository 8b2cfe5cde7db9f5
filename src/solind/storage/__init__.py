"""Export of decoded records.

This package provides:
- CsvExporter: timestamped CSV writer that logs (not raises) write failures
- to_csv / quote_field: the CSV rendering rules
"""

from solind.storage.csv_export import CsvExporter, quote_field, timestamped_filename, to_csv

__all__ = [
    "CsvExporter",
    "quote_field",
    "timestamped_filename",
    "to_csv",
]
