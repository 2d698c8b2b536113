"""
Tests for storage backend selection.
"""
import threading
from types import SimpleNamespace

from outreach.config import get_settings
from outreach.dependencies import get_contact_repository
from outreach.repositories import InMemoryContactRepository, SqlContactRepository


def _request():
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))


class TestGetContactRepository:

    def test_sql_backend(self, monkeypatch, db_session):
        monkeypatch.setattr(get_settings(), "storage_backend", "sql")
        repository = get_contact_repository(_request(), db_session)
        assert isinstance(repository, SqlContactRepository)

    def test_memory_backend_is_shared_per_app(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "storage_backend", "memory")
        request = _request()
        first = get_contact_repository(request, None)
        assert isinstance(first, InMemoryContactRepository)
        assert get_contact_repository(request, None) is first

    def test_concurrent_first_use_creates_one_repository(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "storage_backend", "memory")
        request = _request()
        start = threading.Barrier(8)
        seen = []

        def worker():
            start.wait()
            seen.append(get_contact_repository(request, None))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(seen) == 8
        assert all(r is request.app.state.contact_repository for r in seen)
