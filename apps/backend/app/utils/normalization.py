"""
텍스트 정규화 유틸리티

사용자 입력을 DB 검색 패턴이나 엑셀 셀에 넣기 전에 안전한 형태로 바꿉니다.
"""

from typing import Any

_LIKE_SPECIALS = ("\\", "%", "_")


def escape_like(value: str) -> str:
    """
    LIKE 패턴 이스케이프

    ``%``, ``_`` 와 이스케이프 문자 자체를 ``\\`` 로 감싸 사용자가
    와일드카드를 주입하지 못하게 합니다.

    Example:
        >>> escape_like("100%_off")
        '100\\\\%\\\\_off'
    """
    for ch in _LIKE_SPECIALS:
        value = value.replace(ch, "\\" + ch)
    return value


def _is_xml_char(cp: int) -> bool:
    return (
        cp in (0x09, 0x0A, 0x0D)
        or 0x20 <= cp <= 0xD7FF
        or 0xE000 <= cp <= 0xFFFD
        or 0x10000 <= cp <= 0x10FFFF
    )


def sanitize_xml_text(value: Any) -> str:
    """
    엑셀(XML 1.0)에서 허용되지 않는 문자 제거

    - ``None`` 은 빈 문자열
    - 제어문자(탭/개행 제외), 서로게이트, U+FFFE/U+FFFF 제거

    Example:
        >>> sanitize_xml_text("점심\\x00식대")
        '점심식대'
    """
    if value is None:
        return ""
    return "".join(ch for ch in str(value) if _is_xml_char(ord(ch)))


def clean_text(value: Any) -> str | None:
    """앞뒤 공백 제거, 비어 있으면 ``None``"""
    if value is None:
        return None
    text = str(value).strip()
    return text or None
