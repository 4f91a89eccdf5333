"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Renders a ScanResult as plain text, JSON or a standalone HTML page.
Duplicates and files that could not be compared are always listed separately.
"""
import html
import json
from typing import Any, Dict, List

from dupehash.core.models import ScanResult
from dupehash.utils.convert_utils import ConvertUtils

REPORT_FORMATS = ("text", "json", "html")


class ReportService:

    @staticmethod
    def to_dict(result: ScanResult) -> Dict[str, Any]:
        """Serializable form of a scan result."""
        return {
            "algorithm": result.algorithm.value,
            "groups": [group.to_dict() for group in result.groups],
            "failures": [
                {"path": r.path, "size": r.size, "error": r.error.reason}
                for r in result.failures
            ],
            "summary": {
                "scanned": result.scanned_count,
                "eligible": result.eligible_count,
                "groups": len(result.groups),
                "duplicate_files": result.duplicate_file_count,
                "unique_files": result.unique_count,
                "failed_files": len(result.failures),
                "wasted_bytes": result.wasted_bytes,
            },
        }

    @staticmethod
    def to_json(result: ScanResult, indent: int = 2) -> str:
        return json.dumps(ReportService.to_dict(result), indent=indent)

    @staticmethod
    def to_text(result: ScanResult) -> str:
        """Human-readable listing, one block per group."""
        lines: List[str] = []

        if not result.groups:
            lines.append("No duplicate groups found.")
        else:
            lines.append(
                f"Found {len(result.groups)} duplicate groups ({result.duplicate_file_count} files, "
                f"{ConvertUtils.bytes_to_human(result.wasted_bytes)} reclaimable)"
            )
            for idx, group in enumerate(result.groups, 1):
                lines.append("")
                lines.append(
                    f"Group {idx} | Size: {ConvertUtils.bytes_to_human(group.size)} | "
                    f"Files: {len(group.files)} | {result.algorithm.display_name} "
                    f"{ConvertUtils.short_digest(group.digest)}"
                )
                for file in group.files:
                    lines.append(f"   {file.path} [{ConvertUtils.bytes_to_human(file.size)}]")

        if result.failures:
            lines.append("")
            lines.append(f"Could not compare {len(result.failures)} file(s):")
            for record in result.failures:
                lines.append(f"   {record.path}: {record.error.reason}")

        return "\n".join(lines)

    @staticmethod
    def to_html(result: ScanResult) -> str:
        """Standalone HTML page; every path and message is escaped."""
        esc = html.escape
        parts = [
            "<!DOCTYPE html>",
            "<html><head><meta charset=\"utf-8\"><title>Duplicate report</title></head><body>",
            "<h1>Duplicate report</h1>",
            f"<p>Algorithm: {esc(result.algorithm.display_name)} | "
            f"Scanned: {result.scanned_count} | Eligible: {result.eligible_count} | "
            f"Groups: {len(result.groups)} | "
            f"Reclaimable: {esc(ConvertUtils.bytes_to_human(result.wasted_bytes))}</p>",
        ]

        if not result.groups:
            parts.append("<p>No duplicate groups found.</p>")
        for idx, group in enumerate(result.groups, 1):
            parts.append(
                f"<h2>Group {idx}</h2><p>Digest: <code>{group.digest.hex()}</code> | "
                f"Size: {esc(ConvertUtils.bytes_to_human(group.size))}</p>"
            )
            parts.append("<ul>")
            for file in group.files:
                parts.append(f"<li>{esc(file.path)} ({file.size} bytes)</li>")
            parts.append("</ul>")

        if result.failures:
            parts.append("<h2>Files that could not be compared</h2><ul>")
            for record in result.failures:
                parts.append(f"<li>{esc(record.path)}: {esc(record.error.reason)}</li>")
            parts.append("</ul>")

        parts.append("</body></html>")
        return "\n".join(parts)

    @classmethod
    def render(cls, result: ScanResult, fmt: str = "text") -> str:
        if fmt == "text":
            return cls.to_text(result)
        if fmt == "json":
            return cls.to_json(result)
        if fmt == "html":
            return cls.to_html(result)
        raise ValueError(f"Unknown report format: '{fmt}'. Valid options: {', '.join(REPORT_FORMATS)}")
