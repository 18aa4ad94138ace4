"""
Derived exports: JSON backups and the CSV report.
"""

from .backup import export_backup, restore_backup
from .csv_export import export_csv, export_filename, holdings_frame

__all__ = ["export_backup", "export_csv", "export_filename", "holdings_frame", "restore_backup"]
