"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size parsing/formatting helpers shared by the CLI, params DTO and reports.
"""
import re
from typing import Optional

UNLIMITED_SIZE_WORDS = ("", "inf", "none", "unlimited")

# Binary multiples; 'K' and 'KB' both mean 1024
_MULTIPLIERS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}
_SIZE_RE = re.compile(r"^(-?\d+(?:\.\d+)?)\s*([KMGTP]?)B?$")
_HUMAN_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """Byte count as a two-decimal string in the largest fitting unit (1.50KB, 3.20MB)."""
        if size_bytes < 0:
            return "0B"

        value = float(size_bytes)
        for unit in _HUMAN_UNITS:
            if value < 1024 or unit == _HUMAN_UNITS[-1]:
                return f"{value:.2f}{unit}"
            value /= 1024

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parses '1.5GB', '2048KB', '1000', '1K', '10 MB' and similar into bytes.
        Suffixes are case-insensitive.
        Raises ValueError for negative sizes or anything else it cannot read.
        """
        text = size_str.strip().upper()
        match = _SIZE_RE.match(text)
        if not match:
            raise ValueError(
                f"Invalid size format: '{size_str.strip()}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )

        value = float(match.group(1))
        if value < 0:
            raise ValueError(f"Negative size not allowed: '{size_str.strip()}'")
        return int(value * _MULTIPLIERS[match.group(2)])

    @staticmethod
    def is_valid_size_format(size_str: str) -> bool:
        try:
            ConvertUtils.human_to_bytes(size_str)
        except ValueError:
            return False
        return True

    @staticmethod
    def size_limit_to_bytes(size_str: Optional[str]) -> Optional[int]:
        """
        Like human_to_bytes, but '', 'inf', 'none' and 'unlimited' mean no limit (None).
        """
        if size_str is None or size_str.strip().lower() in UNLIMITED_SIZE_WORDS:
            return None
        return ConvertUtils.human_to_bytes(size_str)

    @staticmethod
    def short_digest(digest: bytes, length: int = 12) -> str:
        """Hex prefix of a digest for compact listings."""
        return digest.hex()[:length]
