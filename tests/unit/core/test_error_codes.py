"""
Tests for the API error code table.
"""

import pytest

from twitter_http.core import error_codes
from twitter_http.core.error_codes import (
    ERROR_CODES,
    ErrorCode,
    build_table,
    resolve,
    try_resolve,
)
from twitter_http.core.exceptions import ConfigurationError


class TestErrorCodeTable:
    """Test table contents."""

    def test_every_literal_resolves_to_declared_pair(self):
        """try_resolve returns exactly the declared (code, status) pair."""
        for name, code, associated_status in error_codes._ERROR_CODE_LITERALS:
            entry = try_resolve(code)
            assert entry == ErrorCode(name, code, associated_status)

    def test_table_size(self):
        assert len(ERROR_CODES) == 50

    def test_known_entries(self):
        assert try_resolve(88) == ErrorCode("FORBIDDEN_RATE_LIMIT", 88, None)
        assert try_resolve(34).associated_status_code == 404
        assert try_resolve(130).associated_status_code == 503
        assert try_resolve(407).name == "INVALID_URL"

    @pytest.mark.parametrize("code", [-1, 0, 1, 999, 10_000])
    def test_unknown_code_is_none(self, code):
        """Unknown codes return None and never raise."""
        assert try_resolve(code) is None

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ERROR_CODES[1] = ErrorCode("NEW", 1)


class TestResolve:
    """Test strict lookup."""

    def test_known_code_matches_try_resolve(self):
        for code in ERROR_CODES:
            assert resolve(code) is try_resolve(code)

    def test_unknown_code_raises(self):
        with pytest.raises(ValueError, match="999 is not a valid API error code"):
            resolve(999)


class TestBuildTable:
    """Test uniqueness checks performed at load time."""

    def test_duplicate_code_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate error code 88"):
            build_table([("A", 88, None), ("B", 88, 403)])

    def test_duplicate_name_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate error code name A"):
            build_table([("A", 1, None), ("A", 2, None)])

    def test_builds_mapping(self):
        table = build_table([("A", 1, 400), ("B", 2, None)])
        assert table[1] == ErrorCode("A", 1, 400)
        assert table[2].associated_status_code is None
