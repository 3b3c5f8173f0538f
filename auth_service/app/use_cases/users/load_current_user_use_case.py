"""
Load Current User Use Case

Loads the authenticated user from access token claims.
"""

from uuid import UUID

from auth_service.libs.result import Error, Result, Return
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.app.use_cases.auth.dtos import CurrentUserResponse, UserInfo


class LoadCurrentUserUseCase:
    """
    Use case for loading the current user.

    Business Rules:
    - Access token payload provides user_id
    - User must still exist
    - Returns the public user projection
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[CurrentUserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            return Return.ok(CurrentUserResponse(user=UserInfo.from_user(user)))
