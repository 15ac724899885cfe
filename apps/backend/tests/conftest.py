from __future__ import annotations

import os
import tempfile
from typing import Generator, Any

# app.core.config 로드 전에 테스트 DB를 지정해 사용자 DB 파일을 건드리지 않는다
_fd, _TEST_DB_PATH = tempfile.mkstemp(prefix="ledger_test_", suffix=".sqlite3")
os.close(_fd)
os.environ["LEDGER_DATABASE_URL"] = f"sqlite:///{_TEST_DB_PATH}"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, get_db
from app.main import app
from app import models  # noqa: F401


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    yield os.environ["LEDGER_DATABASE_URL"]
    try:
        os.remove(_TEST_DB_PATH)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(test_db_url: str):
    eng = create_engine(test_db_url, connect_args={"check_same_thread": False})
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Any, Any, Any]:
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # 테이블 데이터 정리 (SQLAlchemy 2.x 스타일)
        with engine.begin() as conn:
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    # FastAPI DI override
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def add_entry(db_session):
    """Insert an entry directly (bypassing the API), e.g. a legacy native-date row."""

    def _add(**fields) -> models.Entry:
        fields.setdefault("description", "항목")
        row = models.Entry(**fields)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _add
