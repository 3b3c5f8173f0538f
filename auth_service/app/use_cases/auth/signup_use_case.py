from datetime import timedelta

from auth_service.libs.result import Error, Result, Return

from config import ApplicationConfig
from auth_service.api.utils.jwt import generate_access_token
from auth_service.app.repositories.user_repository import DuplicateUserError
from auth_service.app.services.credential_tokens import RefreshTokenStore
from auth_service.app.services.passwords import hash_password
from auth_service.app.services.unit_of_work import UnitOfWork
from auth_service.domain.entities import User
from .dtos import AuthResponse, UserInfo
from .signup_dto import SignupCommand


def is_allowed_email(email: str, domain: str = None) -> bool:
    domain = domain or ApplicationConfig.ALLOWED_EMAIL_DOMAIN
    return email.lower().endswith(f"@{domain.lower()}")


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (validated business intent)
    - Output: Result[AuthResponse] (structured response)

    Business Logic:
    1. Re-check the institution email domain (also enforced by request validation)
    2. Check if email already exists
    3. Hash password with bcrypt
    4. Create User
    5. Issue and persist a refresh token (7 days)
    6. Commit transaction atomically
    7. Return public user projection with access and refresh tokens
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: SignupCommand) -> Result[AuthResponse]:
        """
        Execute signup use case

        Args:
            command: SignupCommand with validated user data

        Returns:
            Result[AuthResponse] with user and tokens,
            Error(EMAIL_DOMAIN_NOT_ALLOWED) or Error(EMAIL_ALREADY_EXISTS)
        """
        email = command.email.strip().lower()
        if not is_allowed_email(email):
            return Return.err(
                Error(
                    "EMAIL_DOMAIN_NOT_ALLOWED",
                    f"Email must be a valid college email (@{ApplicationConfig.ALLOWED_EMAIL_DOMAIN})",
                )
            )

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))

            user = User(
                name=command.name,
                email=email,
                password_hash=hash_password(command.password),
                role=command.role,
                branch=command.branch,
                semester=command.semester,
                section=command.section,
            )
            try:
                user = await self.uow.users.create(user)
            except DuplicateUserError:
                # Lost a race with a concurrent signup for the same email
                return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))

            refresh_tokens = RefreshTokenStore(
                self.uow.refresh_tokens,
                ttl=timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS),
            )
            refresh_token = await refresh_tokens.issue(user.id)

            await self.uow.commit()

            user_info = UserInfo.from_user(user)
            access_token = generate_access_token(user.id, user.email, user_info.role)

            return Return.ok(
                AuthResponse(
                    message="User registered successfully",
                    user=user_info,
                    access_token=access_token,
                    refresh_token=refresh_token,
                )
            )
