"""Remote scan submission for the gitguard CLI.

The scanning engine runs server-side; this module only collects local
source files, submits them and models the findings returned.
"""

from gitguard.scan.client import ScanClient
from gitguard.scan.collector import CODE_EXTENSIONS, EXCLUDE_DIRS, collect_files
from gitguard.scan.models import Finding, ScanOptions, ScanResult, Severity

__all__ = [
    "CODE_EXTENSIONS",
    "EXCLUDE_DIRS",
    "Finding",
    "ScanClient",
    "ScanOptions",
    "ScanResult",
    "Severity",
    "collect_files",
]
