"""
Services 패키지

DB 세션을 받아 동작하는 비즈니스 로직 서비스 클래스들을 제공합니다.
"""

from .carry_service import CarryService
from .entry_service import EntryService
from .ledger_service import LedgerReport, LedgerService

__all__ = [
    "CarryService",
    "EntryService",
    "LedgerReport",
    "LedgerService",
]
