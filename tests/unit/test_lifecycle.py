"""
Tests for the persistence lifecycle state machine (models/lifecycle.py)
"""

from datetime import datetime, timezone

import pytest

from data_gateway import LifecycleError, LifecycleState
from data_gateway.models import check_transition, stamp, state_of
from tests.helpers import AuditEntry, UserAccount

NOW = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
EARLIER = datetime(2023, 12, 31, 10, 0, 0, tzinfo=timezone.utc)


class TestStateOf:

    def test_new(self):
        assert state_of(UserAccount(name="Ada")) is LifecycleState.NEW

    def test_persisted(self):
        assert state_of(UserAccount(id=1, name="Ada")) is LifecycleState.PERSISTED

    def test_soft_deleted(self):
        assert state_of(UserAccount(id=1, name="Ada", deleted=NOW)) is LifecycleState.SOFT_DELETED

    def test_works_on_plain_models(self):
        assert state_of(AuditEntry(id=4, deleted=NOW)) is LifecycleState.SOFT_DELETED


class TestStamp:

    def test_created_on_new_model(self):
        user = UserAccount(name="Ada")
        stamp(user, 'created', NOW)

        assert user.created == NOW
        assert user.updated is None
        assert user.deleted is None

    def test_created_twice_refused(self):
        user = UserAccount(name="Ada", created=EARLIER)

        with pytest.raises(LifecycleError, match="twice"):
            stamp(user, 'created', NOW)
        assert user.created == EARLIER

    def test_created_on_persisted_model_refused(self):
        with pytest.raises(LifecycleError) as exc_info:
            stamp(UserAccount(id=1, name="Ada"), 'created', NOW)

        assert exc_info.value.state == "persisted"
        assert exc_info.value.model_name == "UserAccount"

    def test_updated_on_persisted_model(self):
        user = UserAccount(id=1, name="Ada", created=EARLIER)
        stamp(user, 'updated', NOW)
        assert user.updated == NOW

    def test_updated_on_new_model_refused(self):
        with pytest.raises(LifecycleError, match="new model"):
            stamp(UserAccount(name="Ada"), 'updated', NOW)

    def test_updated_on_soft_deleted_model_refused(self):
        user = UserAccount(id=1, name="Ada", deleted=EARLIER)

        with pytest.raises(LifecycleError, match="soft_deleted"):
            stamp(user, 'updated', NOW)
        assert user.updated is None

    def test_deleted_on_persisted_model(self):
        user = UserAccount(id=1, name="Ada", updated=EARLIER)
        stamp(user, 'deleted', NOW)

        assert user.deleted == NOW
        assert user.updated == EARLIER
        assert user.lifecycle_state is LifecycleState.SOFT_DELETED

    def test_deleted_on_new_model_refused(self):
        with pytest.raises(LifecycleError):
            stamp(UserAccount(name="Ada"), 'deleted', NOW)

    def test_deleted_twice_refused(self):
        with pytest.raises(LifecycleError):
            stamp(UserAccount(id=1, name="Ada", deleted=EARLIER), 'deleted', NOW)

    def test_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown lifecycle field"):
            check_transition(UserAccount(name="Ada"), 'archived')

    def test_check_transition_does_not_mutate(self):
        user = UserAccount(name="Ada")
        check_transition(user, 'created')
        assert user.created is None
