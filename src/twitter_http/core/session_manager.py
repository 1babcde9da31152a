# src/twitter_http/core/session_manager.py
"""
Потокобезопасное управление requests.Session.

Каждый поток получает собственную сессию (requests.Session не
потокобезопасна), при этом все сессии используют один и тот же
TLS-контекст, заданный фабрикой.
"""
import threading
import weakref
from typing import Callable, Set

import requests


class ThreadSafeSessionManager:
    """
    Thread-local хранилище сессий.

    Сессия создаётся лениво при первом обращении из потока.
    Все созданные сессии отслеживаются через weakref, чтобы close_all()
    мог закрыть сессии других потоков.

    Example:
        >>> manager = ThreadSafeSessionManager(requests.Session)
        >>> session = manager.get_session()
        >>> manager.close_all()
    """

    def __init__(self, session_factory: Callable[[], requests.Session]):
        self._session_factory = session_factory
        self._local = threading.local()
        self._sessions: Set[weakref.ref] = set()
        self._lock = threading.Lock()

    def get_session(self) -> requests.Session:
        """Сессия текущего потока (создаётся при необходимости)."""
        session = getattr(self._local, 'session', None)
        if session is None:
            session = self._session_factory()
            self._local.session = session
            with self._lock:
                self._sessions.add(weakref.ref(session, self._forget))
        return session

    def _forget(self, ref: weakref.ref) -> None:
        with self._lock:
            self._sessions.discard(ref)

    def close_current_session(self) -> None:
        """Закрыть сессию текущего потока."""
        session = getattr(self._local, 'session', None)
        self._local.session = None
        if session is not None:
            session.close()

    def close_all(self) -> None:
        """Закрыть сессии всех потоков. Повторный вызов безопасен."""
        self.close_current_session()

        with self._lock:
            refs = list(self._sessions)
            self._sessions.clear()

        for ref in refs:
            session = ref()
            if session is not None:
                session.close()

    def active_sessions_count(self) -> int:
        with self._lock:
            return sum(1 for ref in self._sessions if ref() is not None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_all()
        return False
