"""Tests for the registered-user store."""

import json
import pytest
import tempfile
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from src.auth.user_store import UserStore, User, AcademicStats, Activity
from src.storage import LocalStorage, MemoryStorage


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def user_store(storage):
    """Create an initialized UserStore over memory storage."""
    store = UserStore(storage)
    store.initialize()
    return store


class TestInitialize:
    """Test loading users from storage."""

    def test_empty_storage(self, user_store):
        """Test that missing data gives an empty store."""
        assert len(user_store) == 0
        assert user_store.users == []

    def test_loads_existing_users(self, storage):
        """Test loading a stored user list."""
        storage.set_item("users", json.dumps([User("a@test.com", "pw1").to_dict()]))

        store = UserStore(storage)
        store.initialize()

        assert len(store) == 1
        assert store.find_user("a@test.com").password == "pw1"

    def test_unparseable_data_falls_back_to_empty(self, storage):
        """Test that garbage under the key is ignored."""
        storage.set_item("users", "not json at all")

        store = UserStore(storage)
        store.initialize()

        assert len(store) == 0

    def test_wrong_shape_falls_back_to_empty(self, storage):
        """Test that a non-list or incomplete record is ignored."""
        storage.set_item("users", json.dumps({"email": "a@test.com"}))
        store = UserStore(storage)
        store.initialize()
        assert len(store) == 0

        storage.set_item("users", json.dumps([{"name": "no email"}]))
        store.initialize()
        assert len(store) == 0

    def test_custom_key(self, storage):
        """Test reading from a different storage key."""
        storage.set_item("accounts", json.dumps([User("a@test.com", "pw1").to_dict()]))

        store = UserStore(storage, key="accounts")
        store.initialize()

        assert store.find_user("a@test.com") is not None


class TestAddUser:
    """Test user registration in the store."""

    def test_add_user_defaults(self, user_store):
        """Test that new users get the fixed profile."""
        user = user_store.add_user("a@test.com", "pw1")

        assert user.email == "a@test.com"
        assert user.password == "pw1"
        assert user.name == "Raizhi Jane Sarino"
        assert user.course == "Bachelor of Science in Information Technology"
        assert user.quote == '"Growth begins at the end of your comfort zone"'
        assert user.academic_stats == AcademicStats(
            gpa="2.0",
            completed_credits=5,
            current_semester="2nd Semester 2024-2025",
            organization_involvement="City Scholar",
        )
        assert [a.id for a in user.recent_activities] == [1, 2, 3]
        assert user.recent_activities[1] == Activity(2, "IT Club Meeting", "Yesterday")

    def test_add_user_persists_full_list(self, user_store, storage):
        """Test that each add rewrites the whole collection."""
        user_store.add_user("a@test.com", "pw1")
        user_store.add_user("b@test.com", "pw2")

        records = json.loads(storage.get_item("users"))

        assert [r["email"] for r in records] == ["a@test.com", "b@test.com"]
        assert records[0]["academicStats"]["completedCredits"] == 5
        assert records[0]["recentActivities"][0]["action"] == "Completed Web Development Project"

    def test_add_user_does_not_check_uniqueness(self, user_store):
        """Test that the store leaves duplicate checks to its caller."""
        user_store.add_user("a@test.com", "pw1")
        user_store.add_user("a@test.com", "pw2")

        assert len(user_store) == 2
        assert user_store.find_user("a@test.com").password == "pw1"

    def test_storage_write_failure_propagates(self):
        """Test that a failed write is not swallowed."""
        class FailingStorage(MemoryStorage):
            def set_item(self, key, value):
                raise OSError("quota exceeded")

        store = UserStore(FailingStorage())
        store.initialize()

        with pytest.raises(OSError, match="quota exceeded"):
            store.add_user("a@test.com", "pw1")


class TestFindUser:
    """Test lookups by email."""

    def test_find_user(self, user_store):
        """Test exact match lookup."""
        user_store.add_user("a@test.com", "pw1")

        assert user_store.find_user("a@test.com").email == "a@test.com"

    def test_find_user_not_found(self, user_store):
        """Test lookup of an unknown email."""
        assert user_store.find_user("nobody@test.com") is None

    def test_find_user_is_case_sensitive(self, user_store):
        """Test that emails are compared without normalization."""
        user_store.add_user("A@Test.com", "pw1")

        assert user_store.find_user("a@test.com") is None
        assert user_store.find_user("A@Test.com") is not None

    def test_find_user_returns_copy(self, user_store):
        """Test that callers cannot mutate stored users."""
        user_store.add_user("a@test.com", "pw1")

        found = user_store.find_user("a@test.com")
        found.name = "Someone Else"

        assert user_store.find_user("a@test.com").name == "Raizhi Jane Sarino"


class TestPersistenceRoundTrip:
    """Test reloading the store from disk."""

    def test_reinitialize_reproduces_users(self):
        """Test that a reload gives an identical collection."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "local_storage.json"
            store = UserStore(LocalStorage(path))
            store.initialize()
            store.add_user("a@test.com", "pw1")
            store.add_user("b@test.org", "pw2")

            reloaded = UserStore(LocalStorage(path))
            reloaded.initialize()

            assert reloaded.users == store.users


class TestUserModel:
    """Test User model functionality."""

    def test_user_to_public_dict(self):
        """Test User.to_public_dict() excludes the password."""
        user = User(email="a@test.com", password="secret")

        user_dict = user.to_public_dict()

        assert "password" not in user_dict
        assert user_dict["email"] == "a@test.com"
        assert user_dict["academicStats"]["gpa"] == "2.0"

    def test_from_dict_fills_missing_profile(self):
        """Test that bare credentials get the default profile."""
        user = User.from_dict({"email": "a@test.com", "password": "pw1"})

        assert user.name == "Raizhi Jane Sarino"
        assert len(user.recent_activities) == 3
