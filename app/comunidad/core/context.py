from dataclasses import dataclass

from app.comunidad.core.security import Session, check_admin_role


@dataclass(frozen=True)
class RequestContext:
    session: Session | None
    trace_id: str

    @property
    def user_id(self) -> str | None:
        return self.session.user_id if self.session else None

    @property
    def is_admin(self) -> bool:
        return check_admin_role(self.session)


def build_request_context(*, session: Session | None, trace_id: str) -> RequestContext:
    return RequestContext(session=session, trace_id=trace_id)
