"""
Utils 패키지
"""

from .normalization import clean_text, escape_like, sanitize_xml_text

__all__ = [
    "clean_text",
    "escape_like",
    "sanitize_xml_text",
]
