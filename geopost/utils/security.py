import jwt
from datetime import datetime, timedelta, timezone
from ..errors import InvalidToken, TokenExpired

ALGORITHM = "HS256"

def now_utc() -> datetime:
    return datetime.now(timezone.utc)

def _safe_hours(val, default=24) -> int:
    try:
        v = int(val)
    except (TypeError, ValueError):
        v = default
    if v <= 0:
        v = default
    return v


class TokenService:
    """
    Issue / verify HS256 tokens carrying a `username` claim.
    The secret is passed in, so each test can use its own key.
    """

    def __init__(self, secret: str, ttl_hours: int = 24):
        if not secret:
            raise ValueError("missing_jwt_secret")
        self._secret = secret
        self.ttl = timedelta(hours=_safe_hours(ttl_hours))

    def issue(self, username: str, now: datetime | None = None) -> str:
        iat = now or now_utc()
        exp = iat + self.ttl
        payload = {
            "username": username,
            "iat": int(iat.timestamp()),
            "exp": int(exp.timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        # pas de leeway : exp doit être strictement dans le futur
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "username"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired()
        except jwt.PyJWTError:
            raise InvalidToken()
        username = payload.get("username")
        if not isinstance(username, str) or not username:
            raise InvalidToken()
        return payload
