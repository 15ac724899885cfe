from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Fund Ledger"
    ENV: str = "dev"

    # 기본 SQLite 파일 DB
    # apps/backend/ledger.sqlite3를 절대경로로 지정하여 CWD에 따른 경로 문제 방지
    _default_db_path = Path(__file__).resolve().parents[2] / "ledger.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"

    CORS_ORIGINS: list[str] = ["*"]
    TIMEZONE: str = "Asia/Seoul"
    LOG_LEVEL: str = "INFO"

    # 엑셀 내보내기
    EXPORT_TITLE_PREFIX: str = "입출금내역"
    SHEET_NAME: str = "공금수불부"
    WORKBOOK_CREATOR: str = "fund-ledger"
    CURRENCY_SYMBOL: str = "₩"
    CURRENCY_LOCALE: str = "ko-KR"
    FONT_NAME: str = "맑은 고딕"

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="LEDGER_", case_sensitive=False)


settings = Settings()
