from .duplicate_service import DuplicateService
from .file_service import FileService
from .report_service import ReportService, REPORT_FORMATS

__all__ = ["DuplicateService", "FileService", "ReportService", "REPORT_FORMATS"]
