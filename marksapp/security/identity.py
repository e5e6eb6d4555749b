import enum
from dataclasses import dataclass
from typing import Optional


class Role(str, enum.Enum):
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unknown role: {value!r}") from None


@dataclass(frozen=True)
class Identity:
    """Who the caller is, as carried by a verified token."""
    user_id: Optional[int]
    name: Optional[str]
    email: Optional[str]
    role: Optional[Role]

    @classmethod
    def from_user(cls, user):
        return cls(user_id=user.id, name=user.name, email=user.email,
                   role=Role.parse(user.role))

    @property
    def is_complete(self):
        return self.user_id is not None and self.role is not None

    def to_dict(self):
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value if self.role else None,
        }

