"""Administrator and student accounts."""

from collections.abc import Iterable
import dataclasses
import enum
import uuid
from typing import Any, Optional


DEFAULT_PASSWORD = "password123"


class Role(enum.StrEnum):
    """Account types."""

    ADMIN = "admin"
    STUDENT = "student"


@dataclasses.dataclass(frozen=True)
class User:
    """An administrator or a student.

    parent_contact is the phone number used for WhatsApp notifications. It is
    '-' for accounts without a parent contact.
    """

    user_id: str
    username: str
    password: str
    role: Role
    name: str
    class_name: str
    parent_contact: str

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT

    @staticmethod
    def generate_user_id() -> str:
        """Generate a unique user ID."""
        return f"user-{uuid.uuid4().hex[:12]}"

    @classmethod
    def new_student(
        cls,
        username: str,
        name: str,
        class_name: str,
        parent_contact: str,
        password: Optional[str] = None,
    ) -> "User":
        """Create a student account with a fresh ID.

        A blank password is replaced with the default password.
        """
        return cls(
            user_id=cls.generate_user_id(),
            username=username.strip(),
            password=password if password else DEFAULT_PASSWORD,
            role=Role.STUDENT,
            name=name.strip(),
            class_name=class_name.strip(),
            parent_contact=parent_contact.strip(),
        )

    def edited(
        self,
        username: str,
        name: str,
        class_name: str,
        parent_contact: str,
        password: Optional[str] = None,
    ) -> "User":
        """Copy of this user with new details. A blank password is unchanged."""
        return dataclasses.replace(
            self,
            username=username.strip(),
            password=password if password else self.password,
            name=name.strip(),
            class_name=class_name.strip(),
            parent_contact=parent_contact.strip(),
        )

    def to_dict(self) -> dict[str, str]:
        """Convert the User dataclass to a dictionary."""
        return {
            "user_id": self.user_id,
            "username": self.username,
            "password": self.password,
            "role": self.role.value,
            "name": self.name,
            "class_name": self.class_name,
            "parent_contact": self.parent_contact,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "User":
        return User(
            user_id=data["user_id"],
            username=data["username"],
            password=data.get("password") or DEFAULT_PASSWORD,
            role=Role(data["role"]),
            name=data["name"],
            class_name=data.get("class_name", ""),
            parent_contact=data.get("parent_contact", "-"),
        )


SORT_KEYS = ("name", "username", "class_name", "parent_contact")


def filter_and_sort(
    students: Iterable[User],
    search: str = "",
    sort_key: str = "name",
    descending: bool = False,
) -> list[User]:
    """Search students by name, class, or username and sort the result.

    The search and the sort are both case-insensitive.
    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Cannot sort students by '{sort_key}'.")
    result = list(students)
    term = search.strip().lower()
    if term:
        result = [
            student
            for student in result
            if term in student.name.lower()
            or term in student.class_name.lower()
            or term in student.username.lower()
        ]
    return sorted(
        result,
        key=lambda student: str(getattr(student, sort_key)).lower(),
        reverse=descending,
    )


DEFAULT_USERS: tuple[User, ...] = (
    User(
        user_id="admin-1",
        username="admin",
        password=DEFAULT_PASSWORD,
        role=Role.ADMIN,
        name="Administrator",
        class_name="N/A",
        parent_contact="-",
    ),
    User(
        user_id="student-1",
        username="budi",
        password=DEFAULT_PASSWORD,
        role=Role.STUDENT,
        name="Budi Santoso",
        class_name="12 IPA 1",
        parent_contact="6281234567890",
    ),
    User(
        user_id="student-2",
        username="siti",
        password=DEFAULT_PASSWORD,
        role=Role.STUDENT,
        name="Siti Aminah",
        class_name="12 IPS 2",
        parent_contact="6289876543210",
    ),
)
