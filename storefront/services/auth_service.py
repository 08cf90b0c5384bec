# storefront/services/auth_service.py
import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthenticationFailed, EmailTaken
from storefront.domain.schemas import SignupIn, LoginIn, UserRead
from storefront.repos.user_repo import UserRepo
from storefront.services.token_service import TokenService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

#bcrypt only looks at the first 72 bytes (and newer releases refuse longer input)
def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:72]


#checked against when the email is unknown so both failures cost one bcrypt round
_DUMMY_HASH = bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt())


class AuthService:
    """
    signup / login
    both return (user, token), the token is the only auth mechanism
    """

    def __init__(self, db: Session, tokens: TokenService):
        self.repo = UserRepo(db)
        self.tokens = tokens

    def signup(self, payload: SignupIn) -> tuple[UserRead, str]:
        email = payload.email.strip().lower()

        if self.repo.get_by_email(email):
            logger.info(f"Signup rejected, email already registered: {email}")
            raise EmailTaken("Email already registered")

        hashed = bcrypt.hashpw(_secret(payload.password), bcrypt.gensalt())
        user = UserModel(name=payload.name.strip(), email=email, password=hashed.decode("utf-8"))

        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            #concurrent signup with the same email won the unique index
            self.repo.rollback()
            raise EmailTaken("Email already registered")

        logger.info(f"Created user {created.id}")
        return self._issue(created)

    def login(self, payload: LoginIn) -> tuple[UserRead, str]:
        email = payload.email.strip().lower()
        user = self.repo.get_by_email(email)

        stored = user.password.encode("utf-8") if user else _DUMMY_HASH
        matches = bcrypt.checkpw(_secret(payload.password), stored)

        if not user or not matches:
            logger.info("Login failed")
            raise AuthenticationFailed(INVALID_CREDENTIALS)

        logger.info(f"User {user.id} logged in")
        return self._issue(user)

    def _issue(self, user: UserModel) -> tuple[UserRead, str]:
        token = self.tokens.issue(user.id, user.email, user.name)
        return UserRead.model_validate(user), token
