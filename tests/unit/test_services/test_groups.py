"""Unit tests for the group registry."""
import pytest
from datetime import datetime, timezone

from groupshare.core.errors import CodeGenerationExhausted, NotFoundError
from groupshare.db.models import Group
from groupshare.services import GroupRegistry


@pytest.mark.unit
class TestGroupCreation:
    """Test join code generation and collision handling."""

    def test_create_group_success(self, store, db_session):
        """Should create a group with a 6-digit numeric code."""
        group = GroupRegistry(store).create_group()

        assert len(group.code) == 6
        assert group.code.isdigit()
        assert group.created_at is not None
        assert group.expires_at is None

        stored = db_session.query(Group).filter(Group.code == group.code).first()
        assert stored is not None

    def test_create_group_code_uniqueness(self, store):
        """Ten groups never share a code."""
        registry = GroupRegistry(store)
        codes = [registry.create_group().code for _ in range(10)]

        assert len(set(codes)) == 10

    def test_collision_is_retried(self, store, monkeypatch):
        """A colliding code is retried with a fresh one."""
        store.insert_group(Group(code="123456"))
        codes = iter(["123456", "123456", "654321"])
        monkeypatch.setattr("groupshare.services.groups.generate_group_code", lambda: next(codes))

        group = GroupRegistry(store).create_group()

        assert group.code == "654321"

    def test_collision_retries_exhausted(self, store, monkeypatch):
        """Every attempt colliding raises CodeGenerationExhausted."""
        store.insert_group(Group(code="123456"))
        calls = []

        def always_taken():
            calls.append(1)
            return "123456"

        monkeypatch.setattr("groupshare.services.groups.generate_group_code", always_taken)

        with pytest.raises(CodeGenerationExhausted):
            GroupRegistry(store, max_attempts=4).create_group()

        assert len(calls) == 4

    def test_season_end_sets_expiry(self, store, monkeypatch):
        """Configured season end becomes the group's expires_at."""
        season_end = datetime(2026, 4, 5, tzinfo=timezone.utc)
        monkeypatch.setattr("groupshare.services.groups.settings.GROUP_SEASON_END", season_end)

        group = GroupRegistry(store).create_group()

        assert group.expires_at.replace(tzinfo=timezone.utc) == season_end


@pytest.mark.unit
class TestGroupLookup:

    def test_group_exists(self, store, group):
        registry = GroupRegistry(store)
        assert registry.group_exists(group.code) is True
        assert registry.group_exists("000000") is False

    def test_require_group_not_found(self, store):
        with pytest.raises(NotFoundError, match="not found"):
            GroupRegistry(store).require_group("999999")
