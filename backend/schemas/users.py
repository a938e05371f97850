from uuid import UUID

from fastapi_users import schemas

# fastapi-users provides the base read/create/update shapes


class UserRead(schemas.BaseUser[UUID]):
    pass


class UserCreate(schemas.BaseUserCreate):
    pass


class UserUpdate(schemas.BaseUserUpdate):
    pass
