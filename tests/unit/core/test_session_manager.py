"""
Tests for ThreadSafeSessionManager.
"""

import threading

import requests

from twitter_http.core.session_manager import ThreadSafeSessionManager


class TestThreadSafeSessionManager:
    """Test thread-local session handling."""

    def test_same_session_within_thread(self):
        manager = ThreadSafeSessionManager(requests.Session)
        assert manager.get_session() is manager.get_session()
        manager.close_all()

    def test_sessions_isolated_between_threads(self):
        manager = ThreadSafeSessionManager(requests.Session)
        main_session = manager.get_session()
        seen = []

        def worker():
            seen.append(manager.get_session())

        threads = [threading.Thread(target=worker) for _ in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(session is not main_session for session in seen)
        assert len({id(session) for session in seen}) == 3
        manager.close_all()

    def test_close_all_closes_every_session(self):
        closed = []

        class TrackingSession(requests.Session):
            def close(self):
                closed.append(self)
                super().close()

        manager = ThreadSafeSessionManager(TrackingSession)
        sessions = [manager.get_session()]

        def worker():
            sessions.append(manager.get_session())

        t = threading.Thread(target=worker)
        t.start()
        t.join()

        manager.close_all()

        assert all(session in closed for session in sessions)
        assert manager.active_sessions_count() == 0

    def test_new_session_after_close(self):
        manager = ThreadSafeSessionManager(requests.Session)
        first = manager.get_session()
        manager.close_current_session()
        assert manager.get_session() is not first
        manager.close_all()

    def test_close_all_idempotent(self):
        with ThreadSafeSessionManager(requests.Session) as manager:
            manager.get_session()
            manager.close_all()
        manager.close_all()
