"""
Unit Tests for the Domain Layer

Tests for:
- QueueEntry and AllowlistEntry validation
- Domain exceptions
- Shared validators
"""

import pytest
from pydantic import ValidationError

from timmybot.domain.access.entities import AllowlistEntry
from timmybot.domain.queue.entities import QueueEntry, now_millis
from timmybot.domain.shared.exceptions import (
    ConcurrencyError,
    DomainError,
    InvalidParametersError,
    StoreUnavailableError,
)
from timmybot.domain.shared.validators import (
    validate_discord_snowflake,
    validate_sql_identifier,
)

# =============================================================================
# QueueEntry Tests
# =============================================================================


class TestQueueEntry:
    """Unit tests for QueueEntry."""

    def test_create(self):
        before = now_millis()
        entry = QueueEntry(guild_id=111, position=1, track_ref="songA")

        assert entry.key == (111, 1)
        assert entry.added_at_epoch_millis >= before

    @pytest.mark.parametrize("position", [0, -1])
    def test_position_starts_at_one(self, position):
        with pytest.raises(ValidationError):
            QueueEntry(guild_id=111, position=position, track_ref="songA")

    def test_empty_track_ref(self):
        with pytest.raises(ValidationError):
            QueueEntry(guild_id=111, position=1, track_ref="")

    def test_strict_types(self):
        with pytest.raises(ValidationError):
            QueueEntry(guild_id="111", position=1, track_ref="songA")

    def test_immutable(self):
        entry = QueueEntry(guild_id=111, position=1, track_ref="songA")

        with pytest.raises(ValidationError):
            entry.track_ref = "songB"


class TestAllowlistEntry:
    """Unit tests for AllowlistEntry."""

    def test_approved_by_default(self):
        assert AllowlistEntry(guild_id=111).approved is True

    def test_invalid_guild(self):
        with pytest.raises(ValidationError):
            AllowlistEntry(guild_id=0)


# =============================================================================
# Exception Tests
# =============================================================================


class TestExceptions:
    """Unit tests for the domain exception hierarchy."""

    def test_domain_error_code_defaults_to_class_name(self):
        error = DomainError("bad")

        assert error.message == "bad"
        assert error.code == "DomainError"
        assert str(error) == "bad"

    def test_invalid_parameters(self):
        error = InvalidParametersError("Missing song", parameter="song")

        assert isinstance(error, DomainError)
        assert error.code == "INVALID_PARAMETERS"
        assert error.parameter == "song"

    def test_store_unavailable_default_message(self):
        error = StoreUnavailableError("put")

        assert error.operation == "put"
        assert "put" in error.message
        assert error.code == "STORE_UNAVAILABLE"

    def test_concurrency_error(self):
        error = ConcurrencyError("QueueEntry")

        assert error.entity_type == "QueueEntry"
        assert "QueueEntry" in error.message


# =============================================================================
# Validator Tests
# =============================================================================


class TestValidators:
    """Unit tests for shared validators."""

    @pytest.mark.parametrize("value", [1, 123456789012345678, 2**64 - 1])
    def test_valid_snowflakes(self, value):
        assert validate_discord_snowflake(value) == value

    @pytest.mark.parametrize("value", [0, -5, 2**64])
    def test_invalid_snowflakes(self, value):
        with pytest.raises(ValueError):
            validate_discord_snowflake(value)

    @pytest.mark.parametrize("name", ["guild_queues", "_private", "T1"])
    def test_valid_sql_identifiers(self, name):
        assert validate_sql_identifier(name) == name

    @pytest.mark.parametrize("name", ["1table", "a-b", "a b", "x;DROP", ""])
    def test_invalid_sql_identifiers(self, name):
        with pytest.raises(ValueError):
            validate_sql_identifier(name)
