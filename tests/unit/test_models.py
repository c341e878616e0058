"""
Tests for EntityModel, DateTimeMixin and the ModelAbstraction contract (models/base.py)
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from data_gateway import EntityModel, LifecycleState, ModelAbstraction
from tests.helpers import AuditEntry, Profile, UserAccount, assert_utc_timezone


class TestEntityModel:
    """Test field handling on the pydantic base model."""

    def test_defaults(self, sample_user_data):
        user = UserAccount(**sample_user_data)

        assert user.id is None
        assert user.created is None
        assert user.updated is None
        assert user.deleted is None
        assert user.extra_data == {}

    def test_extract_excludes_extra_data(self, sample_user_data):
        user = UserAccount(**sample_user_data, extra_data={"note": "vip"})

        extracted = user.extract()

        assert extracted == {
            "id": None,
            "created": None,
            "updated": None,
            "deleted": None,
            "name": "Ada Lovelace",
            "email": "ada@example.com",
            "is_active": True,
        }

    def test_unknown_keys_collected_into_extra_data(self):
        user = UserAccount(id=1, name="Ada", profile_bio="Analyst", score=7)

        assert user.extra_data == {"profile_bio": "Analyst", "score": 7}
        assert "profile_bio" not in user.extract()

    def test_unknown_keys_merge_with_explicit_extra_data(self):
        user = UserAccount(name="Ada", extra_data={"a": 1}, b=2)
        assert user.extra_data == {"a": 1, "b": 2}

    def test_domain_fields_remain_assignable(self):
        user = UserAccount(name="Ada")
        user.name = "Ada King"
        assert user.name == "Ada King"

    @pytest.mark.parametrize("field", ["id", "created", "updated", "deleted"])
    def test_lifecycle_fields_are_frozen(self, field):
        user = UserAccount(name="Ada")
        value = 5 if field == "id" else datetime(2024, 1, 1, tzinfo=timezone.utc)

        with pytest.raises(PydanticValidationError):
            setattr(user, field, value)

    def test_setters_bypass_freeze(self):
        user = UserAccount(name="Ada")
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)

        user.set_id(9)
        user.set_updated(stamp)

        assert user.get_id() == 9
        assert user.get_updated() == stamp
        assert "updated" in user.model_fields_set

    def test_lifecycle_state(self):
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert UserAccount(name="Ada").lifecycle_state is LifecycleState.NEW
        assert UserAccount(id=1, name="Ada").lifecycle_state is LifecycleState.PERSISTED
        assert UserAccount(id=1, name="Ada", deleted=stamp).lifecycle_state is LifecycleState.SOFT_DELETED


class TestDateTimeMixin:
    """Test datetime validation for lifecycle and domain datetime fields."""

    def test_iso_string_with_z_suffix(self):
        user = UserAccount(id=1, name="Ada", created="2024-01-01T10:00:00Z")

        assert user.created == datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)

    def test_sqlite_style_string_is_read_as_utc(self):
        user = UserAccount(id=1, name="Ada", updated="2024-01-01 10:00:00.000000")

        assert_utc_timezone(user.updated)
        assert user.updated.hour == 10

    def test_naive_datetime_is_read_as_utc(self):
        user = UserAccount(id=1, name="Ada", created=datetime(2024, 1, 1, 10, 0, 0))
        assert_utc_timezone(user.created)

    def test_aware_datetime_kept(self):
        from zoneinfo import ZoneInfo
        ny = datetime(2024, 1, 1, 10, 0, 0, tzinfo=ZoneInfo("America/New_York"))

        user = UserAccount(id=1, name="Ada", created=ny)

        assert user.created == ny
        assert user.created.tzinfo == ZoneInfo("America/New_York")

    def test_invalid_datetime_string(self):
        with pytest.raises(PydanticValidationError, match="Invalid datetime format"):
            UserAccount(id=1, name="Ada", created="yesterday")

    def test_non_datetime_fields_untouched(self):
        profile = Profile(user_id=1, bio="2024-01-01T10:00:00Z")
        assert profile.bio == "2024-01-01T10:00:00Z"


class TestModelAbstraction:
    """Test the runtime-checkable contract."""

    def test_entity_model_implements_contract(self):
        assert isinstance(UserAccount(name="Ada"), ModelAbstraction)
        assert issubclass(EntityModel, ModelAbstraction)

    def test_plain_class_implements_contract(self):
        assert isinstance(AuditEntry(message="hi"), ModelAbstraction)

    def test_unrelated_object_does_not(self):
        assert not isinstance({"id": 1}, ModelAbstraction)
        assert not isinstance(object(), ModelAbstraction)
