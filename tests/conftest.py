import os

# Keep the module-level engine in main.py off the filesystem
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


class FixedRng:
    """Stands in for random.Random: always picks the same band offset."""

    def __init__(self, offset: int = 0):
        self.offset = offset
        self.calls = []

    def randrange(self, stop: int) -> int:
        self.calls.append(stop)
        return min(self.offset, stop - 1)


def words(prefix: str, count: int) -> str:
    return " ".join(f"{prefix}{i}" for i in range(count))


@pytest.fixture
def fixed_rng():
    return FixedRng(0)


@pytest.fixture
def db_session_factory():
    from database import Base

    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def client(db_session_factory, monkeypatch):
    from fastapi.testclient import TestClient

    import main
    from core.analysis import AnalysisEngine
    from core.schemas import AnalysisSettings
    from database import get_db

    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr(main, "_analysis_engine", AnalysisEngine(
        settings=AnalysisSettings(embed_similarity_matrix=False), rng=FixedRng(0),
    ))
    main.app.dependency_overrides[get_db] = override_get_db
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()
