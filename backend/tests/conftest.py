from __future__ import annotations

import sys
from collections.abc import AsyncGenerator, Iterator
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from backend.tourmap.db import init as db_init  # noqa: E402
from backend.tourmap.db.engine import DatabaseConnectionManager  # noqa: E402
from backend.tourmap.db.models import new_id  # noqa: E402
from backend.tourmap.db.redis import RedisConnectionManager  # noqa: E402
from backend.tourmap.dependencies import get_db  # noqa: E402
from backend.tourmap.main import app  # noqa: E402


class FakeRedis:
    """세션/OAuth state 테스트용 인메모리 Redis (TTL 은 기록만 한다)."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}

    async def set(self, key: str, value: Any, ex: int | None = None) -> bool:
        self.values[key] = str(value)
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def get(self, key: str) -> str | None:
        value = self.values.get(key)
        return value if isinstance(value, str) else None

    async def getdel(self, key: str) -> str | None:
        value = await self.get(key)
        self.values.pop(key, None)
        return value

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.values.pop(key, None) is not None)

    async def exists(self, *keys: str) -> int:
        return sum(1 for key in keys if key in self.values)

    async def expire(self, key: str, seconds: int) -> bool:
        self.ttls[key] = seconds
        return key in self.values

    async def hset(self, key: str, mapping: dict[str, Any]) -> int:
        bucket = self.values.setdefault(key, {})
        bucket.update({field: str(value) for field, value in mapping.items()})
        return len(mapping)

    async def hgetall(self, key: str) -> dict[str, str]:
        return dict(self.values.get(key) or {})

    async def sadd(self, key: str, *members: str) -> int:
        bucket = self.values.setdefault(key, set())
        before = len(bucket)
        bucket.update(members)
        return len(bucket) - before

    async def smembers(self, key: str) -> set[str]:
        return set(self.values.get(key) or set())

    async def srem(self, key: str, *members: str) -> int:
        bucket = self.values.get(key) or set()
        removed = len(bucket & set(members))
        bucket.difference_update(members)
        return removed

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        return None


class DummyResult:
    def __init__(self, rows: list[Any] | None = None) -> None:
        self.rows = rows or []

    def mappings(self) -> list[dict[str, Any]]:
        return self.rows

    def all(self) -> list[Any]:
        return self.rows

    def first(self) -> Any:
        return self.rows[0] if self.rows else None


class ScalarResult:
    def __init__(self, values: list[Any] | None = None) -> None:
        self.values = values or []

    def all(self) -> list[Any]:
        return self.values

    def one(self) -> Any:
        assert len(self.values) == 1
        return self.values[0]


class RecordingSession:
    """
    실행된 문장과 파라미터를 기록하는 AsyncSession 대용

    execute/scalar/scalars 는 미리 넣어 둔 결과를 순서대로 돌려주고,
    get 은 store() 로 등록한 객체를 (모델, id) 로 찾는다.
    flush 는 add 된 객체 중 id 가 없는 것에 id 를 채운다.
    """

    def __init__(self, results: list[DummyResult] | None = None) -> None:
        self.executed: list[tuple[Any, Any]] = []
        self.results = list(results or [])
        self.scalar_results: list[Any] = []
        self.scalars_results: list[ScalarResult] = []
        self.objects: dict[tuple[type, Any], Any] = {}
        self.added: list[Any] = []
        self.flushes = 0
        self.commits = 0

    def queue(self, rows: list[Any]) -> None:
        self.results.append(DummyResult(rows))

    def queue_scalar(self, value: Any) -> None:
        self.scalar_results.append(value)

    def queue_scalars(self, values: list[Any]) -> None:
        self.scalars_results.append(ScalarResult(values))

    def store(self, *objects: Any) -> None:
        for obj in objects:
            self.objects[(type(obj), obj.id)] = obj

    async def execute(self, statement: Any, params: Any = None) -> DummyResult:
        self.executed.append((statement, params))
        return self.results.pop(0) if self.results else DummyResult()

    async def scalar(self, statement: Any) -> Any:
        self.executed.append((statement, None))
        return self.scalar_results.pop(0) if self.scalar_results else None

    async def scalars(self, statement: Any) -> ScalarResult:
        self.executed.append((statement, None))
        return self.scalars_results.pop(0) if self.scalars_results else ScalarResult()

    async def get(self, model: Any, ident: Any) -> Any:
        return self.objects.get((model, ident))

    def add(self, obj: Any) -> None:
        self.added.append(obj)

    async def flush(self) -> None:
        self.flushes += 1
        for obj in self.added:
            if getattr(obj, "id", None) is None:
                obj.id = new_id()
            self.store(obj)

    async def commit(self) -> None:
        self.commits += 1

    async def close(self) -> None:
        return None


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def recording_session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture(autouse=True)
def stub_infrastructure(monkeypatch: pytest.MonkeyPatch, fake_redis: FakeRedis) -> Iterator[None]:
    """
    DB/Redis 연결을 stub 으로 대체하는 fixture

    스키마 생성은 건너뛰고, 요청마다 주입되는 DB 세션은 RecordingSession 으로 바꾼다.
    Redis 는 테스트마다 새 FakeRedis 를 쓴다.
    """

    async def _noop_ensure_schema(_engine: Any) -> None:
        return None

    async def _noop_close(cls: type) -> None:
        return None

    async def _dummy_db() -> AsyncGenerator[RecordingSession, None]:
        yield RecordingSession()

    monkeypatch.setattr(DatabaseConnectionManager, "get_engine", classmethod(lambda cls: object()))
    monkeypatch.setattr(DatabaseConnectionManager, "close", classmethod(lambda cls: _noop_close(cls)))
    monkeypatch.setattr(RedisConnectionManager, "get_client", classmethod(lambda cls: fake_redis))
    monkeypatch.setattr(RedisConnectionManager, "close", classmethod(lambda cls: _noop_close(cls)))
    monkeypatch.setattr(db_init, "ensure_schema", _noop_ensure_schema)

    app.dependency_overrides[get_db] = _dummy_db
    yield
    app.dependency_overrides.clear()
