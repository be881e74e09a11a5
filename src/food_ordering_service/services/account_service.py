"""Account service for registration, login and profiles."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

from food_ordering_service.auth.password_hasher import PasswordHasher
from food_ordering_service.auth.token_service import TokenService
from food_ordering_service.models.user_models import (
    LoginRequest,
    ProfileView,
    RegisterRequest,
    User,
)
from food_ordering_service.observability import traced
from food_ordering_service.observability.metrics import record_login_failure, record_registration
from food_ordering_service.repositories.ordering_repositories import (
    CounterRepository,
    UserRepository,
)
from food_ordering_service.services.errors import (
    ConflictError,
    InvalidRequestError,
    NotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

USER_SEQUENCE = "users"
EMAIL_TAKEN_MESSAGE = "Email address is already in use."


class AccountService:
    """Service for user accounts and credentials.

    Login failures are deliberately uniform: an unknown email, a wrong
    password and an inactive account all raise the same UnauthorizedError.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        counter_repository: CounterRepository,
        password_hasher: PasswordHasher,
        token_service: TokenService,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the AccountService.

        Args:
            user_repository: Repository for user records
            counter_repository: Allocates user ids
            password_hasher: Derives and verifies password digests
            token_service: Issues bearer tokens on login
            clock: Returns the current UTC time (defaults to the system clock)
        """
        self.user_repository = user_repository
        self.counter_repository = counter_repository
        self.password_hasher = password_hasher
        self.token_service = token_service
        self._clock = clock or (lambda: datetime.now(UTC))

    @traced("register")
    async def register(self, request: RegisterRequest | None) -> User:
        """Register a new user.

        Args:
            request: Registration payload

        Returns:
            The created user

        Raises:
            InvalidRequestError: If the request is missing or the password
                cannot be encoded
            ConflictError: If the email address is already registered
        """
        if request is None:
            raise InvalidRequestError("Registration data is missing")

        if self.user_repository.email_exists(request.email):
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        salt = self.password_hasher.generate_salt()
        try:
            password_hash = self.password_hasher.hash_password(request.password, salt)
        except UnicodeEncodeError as e:
            raise InvalidRequestError("Password must be valid Unicode text") from e

        user = User(
            id=self.counter_repository.next_id(USER_SEQUENCE),
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            password_hash=password_hash,
            salt=salt,
            is_active=True,
            created_at=self._clock(),
        )

        # The uniqueness check above can race; the conditional insert decides
        if not self.user_repository.create_user(user):
            raise ConflictError(EMAIL_TAKEN_MESSAGE)

        logger.info(f"Registered user {user.id}")
        record_registration()
        return user

    @traced("login")
    async def login(self, request: LoginRequest | None) -> str:
        """Authenticate with email and password.

        Args:
            request: Login payload

        Returns:
            str: Signed bearer token

        Raises:
            UnauthorizedError: If the credentials are not valid
        """
        if request is None:
            raise UnauthorizedError("Invalid credentials")

        user = self.user_repository.get_user_by_email(request.email)

        if (
            user is None
            or not user.is_active
            or not self.password_hasher.verify_password(
                request.password, user.password_hash, user.salt
            )
        ):
            record_login_failure()
            raise UnauthorizedError("Invalid credentials")

        logger.info(f"User {user.id} logged in")
        return self.token_service.issue_token(user)

    @traced("get_profile")
    async def get_profile(self, user_id: int) -> ProfileView:
        """Get the non-sensitive profile of a user.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = self.user_repository.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return ProfileView.from_user(user)
