from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict

from ..core.enums import Role
from ..core.exceptions import ForbiddenError, NotFoundError
from .model import Schedule

if TYPE_CHECKING:
    from .resolver import ScanContext, ScheduleResolver


class ResolutionStrategy(ABC):
    """Strategy Pattern: how one role's scan is tied to a schedule."""

    @abstractmethod
    def resolve(self, resolver: "ScheduleResolver", ctx: "ScanContext") -> Schedule:
        raise NotImplementedError


def _no_class(ctx: "ScanContext") -> NotFoundError:
    return NotFoundError(f"No scheduled class in room {ctx.room.room_number} at {ctx.at.strftime('%H:%M')}")


class StudentResolution(ResolutionStrategy):
    def resolve(self, resolver, ctx):
        if ctx.subject_id is not None:
            return resolver.for_subject(ctx)

        schedule = resolver.from_active_session(ctx) or resolver.enrolled_in(ctx)
        if schedule is None:
            raise _no_class(ctx)
        return schedule


class InstructorResolution(ResolutionStrategy):
    """Instructors and admins: the session in progress, else a class they teach."""

    def resolve(self, resolver, ctx):
        if ctx.subject_id is not None:
            return resolver.for_subject(ctx)

        schedule = resolver.from_active_session(ctx)
        if schedule is None:
            schedule = resolver.taught_by(ctx, lead_minutes=ctx.settings.early_arrival_minutes)
        if schedule is None:
            raise _no_class(ctx)
        return schedule


class CustodianResolution(ResolutionStrategy):
    def resolve(self, resolver, ctx):
        return resolver.administrative(ctx.room.room_id, ctx.settings.term, ctx.day_of_week)


class DeanResolution(ResolutionStrategy):
    """A dean teaching right now is treated like an instructor; otherwise door access only."""

    def resolve(self, resolver, ctx):
        if ctx.subject_id is not None:
            return resolver.for_subject(ctx)

        personal = resolver.taught_by(ctx, lead_minutes=0)
        if personal is not None:
            return personal
        return resolver.administrative(ctx.room.room_id, ctx.settings.term, ctx.day_of_week)


_BY_ROLE: Dict[Role, ResolutionStrategy] = {
    Role.STUDENT: StudentResolution(),
    Role.INSTRUCTOR: InstructorResolution(),
    Role.ADMIN: InstructorResolution(),
    Role.CUSTODIAN: CustodianResolution(),
    Role.DEAN: DeanResolution(),
}


def resolution_for(role: Role) -> ResolutionStrategy:
    try:
        return _BY_ROLE[role]
    except KeyError:
        raise ForbiddenError(f"Role {role!r} cannot record attendance")
