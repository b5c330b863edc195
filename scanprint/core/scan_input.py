# scanprint/core/scan_input.py
from typing import Optional


def normalize_input(raw: Optional[str]) -> str:
    return (raw or "").strip()


def is_blank(raw: Optional[str]) -> bool:
    return not normalize_input(raw)


def extract_code(raw: Optional[str]) -> str:
    """
    Product code = last "/" segment of the scanned text.
    Not validated as a URL; text without "/" is returned as is.
    """
    return normalize_input(raw).split("/")[-1]
