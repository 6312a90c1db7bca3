"""Registered-user collection for the student portal.

Users live as one JSON list under a single storage key. The list is loaded
once at startup and written back in full every time a user is added. Passwords
are stored as typed: this is a mock portal with no credential security.
"""

import copy
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Raizhi Jane Sarino"
DEFAULT_COURSE = "Bachelor of Science in Information Technology"
DEFAULT_QUOTE = '"Growth begins at the end of your comfort zone"'


@dataclass
class AcademicStats:
    """Academic summary shown on the dashboard."""
    gpa: str = "2.0"
    completed_credits: int = 5
    current_semester: str = "2nd Semester 2024-2025"
    organization_involvement: str = "City Scholar"

    def to_dict(self) -> dict:
        return {
            "gpa": self.gpa,
            "completedCredits": self.completed_credits,
            "currentSemester": self.current_semester,
            "organizationInvolvement": self.organization_involvement,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AcademicStats":
        return cls(
            gpa=data["gpa"],
            completed_credits=data["completedCredits"],
            current_semester=data["currentSemester"],
            organization_involvement=data["organizationInvolvement"],
        )


@dataclass
class Activity:
    """One entry of the recent activity list."""
    id: int
    action: str
    time: str

    def to_dict(self) -> dict:
        return {"id": self.id, "action": self.action, "time": self.time}

    @classmethod
    def from_dict(cls, data: dict) -> "Activity":
        return cls(id=data["id"], action=data["action"], time=data["time"])


def default_activities() -> List[Activity]:
    return [
        Activity(id=1, action="Completed Web Development Project", time="2 hours ago"),
        Activity(id=2, action="IT Club Meeting", time="Yesterday"),
        Activity(id=3, action="Submitted Midterm Requirements", time="3 days ago"),
    ]


@dataclass
class User:
    """User model."""
    email: str
    password: str
    name: str = DEFAULT_NAME
    course: str = DEFAULT_COURSE
    quote: str = DEFAULT_QUOTE
    academic_stats: AcademicStats = field(default_factory=AcademicStats)
    recent_activities: List[Activity] = field(default_factory=default_activities)

    def to_dict(self) -> dict:
        """Convert to the stored record format."""
        return {
            "email": self.email,
            "password": self.password,
            "name": self.name,
            "course": self.course,
            "quote": self.quote,
            "academicStats": self.academic_stats.to_dict(),
            "recentActivities": [a.to_dict() for a in self.recent_activities],
        }

    def to_public_dict(self) -> dict:
        """Convert to dictionary, excluding the password."""
        data = self.to_dict()
        del data["password"]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Build a user from a stored record.

        Raises:
            KeyError: If a required field is missing
            TypeError: If a nested record has the wrong shape
        """
        return cls(
            email=data["email"],
            password=data["password"],
            name=data.get("name", DEFAULT_NAME),
            course=data.get("course", DEFAULT_COURSE),
            quote=data.get("quote", DEFAULT_QUOTE),
            academic_stats=(
                AcademicStats.from_dict(data["academicStats"])
                if "academicStats" in data else AcademicStats()
            ),
            recent_activities=(
                [Activity.from_dict(a) for a in data["recentActivities"]]
                if "recentActivities" in data else default_activities()
            ),
        )


class UserStore:
    """Holds the registered users and persists them to key-value storage.

    Args:
        storage: Object with ``get_item``/``set_item`` (see ``src.storage``)
        key: Storage key holding the serialized user list
    """

    def __init__(self, storage, key: str = "users"):
        self.storage = storage
        self.key = key
        self._users: List[User] = []

    def initialize(self) -> None:
        """Load users from storage, starting empty if the data is unusable."""
        self._users = []
        raw = self.storage.get_item(self.key)
        if raw is None:
            return

        try:
            records = json.loads(raw)
            if not isinstance(records, list):
                raise TypeError(f"expected a list, got {type(records).__name__}")
            self._users = [User.from_dict(record) for record in records]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable user list under '{self.key}': {e}")
            self._users = []

        logger.info(f"Loaded {len(self._users)} registered users")

    def _persist(self) -> None:
        self.storage.set_item(self.key, json.dumps([u.to_dict() for u in self._users]))

    def add_user(self, email: str, password: str) -> User:
        """Register a user with the default profile.

        Callers must check that the email is not taken first.

        Args:
            email: User's email address, stored as given
            password: Plain text password

        Returns:
            Created User object
        """
        user = User(email=email, password=password)
        self._users.append(user)
        self._persist()
        return copy.deepcopy(user)

    def find_user(self, email: str) -> Optional[User]:
        """Get a user by exact email.

        Returns:
            Copy of the first matching user, or None
        """
        for user in self._users:
            if user.email == email:
                return copy.deepcopy(user)
        return None

    @property
    def users(self) -> List[User]:
        return copy.deepcopy(self._users)

    def __len__(self) -> int:
        return len(self._users)
