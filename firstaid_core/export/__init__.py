from .csv_export import CSV_HEADERS, cases_to_csv, export_filename

__all__ = ["CSV_HEADERS", "cases_to_csv", "export_filename"]
