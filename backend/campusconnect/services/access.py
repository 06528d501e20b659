from ..exceptions import AuthorizationError
from ..models import Role, User


def is_admin(user: User) -> bool:
    return user.role == Role.ADMIN


def ensure_owner_or_admin(owner_id: str, user: User, message: str = "Not authorized") -> None:
    if owner_id != user.id and not is_admin(user):
        raise AuthorizationError(message)


def require_role(user: User, role: Role, message: str) -> None:
    if user.role != role:
        raise AuthorizationError(message)
