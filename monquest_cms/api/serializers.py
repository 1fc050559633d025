"""ORM -> wire dict helpers shared by routers."""

from typing import Optional

from monquest_cms.models.role import Role
from monquest_cms.models.user import User
from monquest_cms.schemas.schemas import RoleOut, UserOut


def dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")


def user_out(user: User) -> dict:
    return dump(UserOut.model_validate(user))


def role_out(role: Role, user_count: Optional[int] = None) -> dict:
    out = RoleOut.model_validate(role)
    if user_count is not None:
        out.user_count = user_count
    return dump(out)
