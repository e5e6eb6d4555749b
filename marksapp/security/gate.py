"""Role and ownership checks for the API.

``authorize`` depends only on (identity, action, resource): it looks at the
identity's role and the resource's owner field (a mark built from ids reads
it from its subject row), so asking the same question twice gives the same
answer while the owner is unchanged.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import Forbidden
from ..extensions import db
from ..models import Mark, Subject
from .identity import Role

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls):
        return cls(True)

    @classmethod
    def deny(cls, reason):
        return cls(False, reason)

    def __bool__(self):
        return self.allowed


def is_owned(resource):
    return isinstance(resource, (Subject, Mark))


def owner_of(resource):
    if isinstance(resource, Subject):
        return resource.teacher_id
    if isinstance(resource, Mark):
        subject = resource.subject
        if subject is None and resource.subject_id is not None:
            subject = db.session.get(Subject, resource.subject_id)
        return subject.teacher_id if subject is not None else None
    return None


def authorize(identity, action, resource):
    action = Action(action)
    role = Role.parse(identity.role)

    if action is Action.READ:
        return Verdict.allow()

    if isinstance(resource, Subject) and action is Action.CREATE:
        # creating a subject needs a role, not ownership
        if role in (Role.TEACHER, Role.ADMIN):
            return Verdict.allow()
        raise ValueError(f"unhandled role {role!r}")

    if is_owned(resource):
        if role is Role.ADMIN:
            return Verdict.allow()
        elif role is Role.TEACHER:
            if owner_of(resource) == identity.user_id:
                return Verdict.allow()
            return Verdict.deny("not owner")
        raise ValueError(f"unhandled role {role!r}")

    # resources without an owner field (students)
    if action is Action.CREATE:
        return Verdict.allow()
    if role is Role.ADMIN:
        return Verdict.allow()
    elif role is Role.TEACHER:
        return Verdict.deny("admin only")
    raise ValueError(f"unhandled role {role!r}")


def enforce(identity, action, resource):
    verdict = authorize(identity, action, resource)
    if not verdict:
        logger.info("denied %s on %s for user %s: %s", Action(action).value,
                    type(resource).__name__, identity.user_id, verdict.reason)
        raise Forbidden(verdict.reason)
    return verdict
