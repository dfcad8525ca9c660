import logging
import re
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError
from ..errors import AlreadyExists, InvalidCredentialsFormat, StoreUnavailable, WrongCredentials
from ..models.user import User

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"[a-z0-9_]+")

def validate_credentials(username: str, password: str) -> None:
    if not username or not password or not USERNAME_RE.fullmatch(username):
        raise InvalidCredentialsFormat()


class CredentialStore:
    """
    Users live in their own collection, keyed by username (`_id`).
    Passwords are stored and compared in plaintext (existing schema).
    """

    def __init__(self, users: AsyncIOMotorCollection):
        self.users = users

    async def verify(self, username: str, password: str) -> None:
        try:
            doc = await self.users.find_one({"username": username})
        except PyMongoError as e:
            logger.exception("user lookup failed")
            raise StoreUnavailable() from e
        # même erreur pour user absent et mauvais mot de passe
        if not doc or doc.get("username") != username or doc.get("password") != password:
            raise WrongCredentials()
        logger.info("login as %s", username)

    async def create(self, user: User) -> None:
        try:
            exists = await self.users.find_one({"username": user.username})
        except PyMongoError as e:
            logger.exception("user lookup failed")
            raise StoreUnavailable("Failed to save to user store") from e
        if exists:
            raise AlreadyExists()

        doc = {"_id": user.username, **user.model_dump()}
        try:
            # _id unique : un signup concurrent qui passe le check ne peut pas écraser
            await self.users.insert_one(doc)
        except DuplicateKeyError:
            raise AlreadyExists()
        except PyMongoError as e:
            logger.exception("user insert failed")
            raise StoreUnavailable("Failed to save to user store") from e
        logger.info("user is added: %s", user.username)
