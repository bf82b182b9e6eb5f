"""Git history scanning for deleted crash tests."""

from .extract import extract_issue_number, extract_pr_number, matches_path_glob
from .models import DeletionEvent
from .scanner import CrashHistoryScanner, list_current_files, scan_deleted_files

__all__ = [
    "CrashHistoryScanner",
    "DeletionEvent",
    "extract_issue_number",
    "extract_pr_number",
    "list_current_files",
    "matches_path_glob",
    "scan_deleted_files",
]
