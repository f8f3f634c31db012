"""Account service: registration, login and user lookups."""

from uuid import UUID

from blog.auth.models import User
from blog.auth.permissions import UserRole
from blog.auth.schemas import RegisterRequest
from blog.auth.security import create_access_token, hash_password, verify_password
from blog.core.exceptions import BlogError
from blog.core.logging import get_logger
from blog.core.service import CassandraService
from blog.utils.text import search_pattern


logger = get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class InvalidCredentialsError(BlogError):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, "invalid_credentials")


class UserExistsError(BlogError):
    """Username or email already registered."""

    def __init__(self, message: str, field: str):
        super().__init__(message, "user_exists")
        self.field = field


# ==============================================================================
# Auth Service
# ==============================================================================


class AuthService(CassandraService):
    """Account management and token issuing."""

    def _prepare_statements(self) -> None:
        self._get_user_by_id = self._prepare(
            "SELECT * FROM {keyspace}.users WHERE id = ?"
        )
        self._get_user_by_email = self._prepare(
            "SELECT * FROM {keyspace}.users WHERE email = ?"
        )
        self._get_user_by_username = self._prepare(
            "SELECT * FROM {keyspace}.users WHERE username = ?"
        )
        self._get_all_users = self._prepare("SELECT * FROM {keyspace}.users")
        self._insert_user = self._prepare("""
            INSERT INTO {keyspace}.users
            (id, username, email, password_hash, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """)
        self._update_password_hash = self._prepare("""
            UPDATE {keyspace}.users SET password_hash = ? WHERE id = ?
        """)

    # ==========================================================================
    # Lookups
    # ==========================================================================

    async def get_user_by_id(self, user_id: UUID) -> User | None:
        row = await self._fetch_one(self._get_user_by_id, [user_id])
        return User.from_row(row) if row else None

    async def get_user_by_email(self, email: str) -> User | None:
        row = await self._fetch_one(self._get_user_by_email, [email.lower().strip()])
        return User.from_row(row) if row else None

    async def get_user_by_username(self, username: str) -> User | None:
        row = await self._fetch_one(self._get_user_by_username, [username])
        return User.from_row(row) if row else None

    async def search_users(self, query: str, limit: int | None = None) -> list[User]:
        """Case-insensitive substring match on username.

        Cassandra has no LIKE on regular columns, so matching happens in memory
        over a full scan. Results are ordered by username.
        """
        pattern = search_pattern(query)
        rows = await self._execute(self._get_all_users)
        users = sorted(
            (User.from_row(row) for row in rows if pattern.search(row.username or "")),
            key=lambda u: u.username.lower(),
        )
        return users[:limit] if limit is not None else users

    # ==========================================================================
    # Registration & Login
    # ==========================================================================

    async def register_user(self, data: RegisterRequest) -> User:
        """Register a new account with the ``user`` role.

        Raises:
            UserExistsError: If the username or email is taken
        """
        if await self.get_user_by_username(data.username):
            raise UserExistsError("Username already taken", field="username")
        if await self.get_user_by_email(data.email):
            raise UserExistsError("Email already registered", field="email")

        user = User(
            username=data.username,
            email=data.email,
            password_hash=hash_password(data.password),
            role=UserRole.USER.value,
        )
        await self._execute(
            self._insert_user,
            [
                user.id,
                user.username,
                user.email,
                user.password_hash,
                user.role,
                user.created_at,
                user.updated_at,
            ],
        )
        logger.info("user_registered", user_id=str(user.id), username=user.username)
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """Check credentials, upgrading the stored hash when needed.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        user = await self.get_user_by_email(email)
        if user is None:
            raise InvalidCredentialsError()

        is_valid, new_hash = verify_password(password, user.password_hash)
        if not is_valid:
            logger.warning("login_failed", user_id=str(user.id))
            raise InvalidCredentialsError()

        if new_hash:
            await self._execute(self._update_password_hash, [new_hash, user.id])
            user.password_hash = new_hash

        logger.info("user_logged_in", user_id=str(user.id))
        return user

    def create_token(self, user: User) -> str:
        return create_access_token(user.token_claims())
