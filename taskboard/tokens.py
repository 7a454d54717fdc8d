"""Stateless session tokens (HS256 JWTs carrying the user id)."""
from datetime import datetime, timedelta, timezone

import jwt

from .errors import InvalidTokenError

ALGORITHM = "HS256"


class TokenService:

    def __init__(self, secret, ttl=timedelta(hours=24)):
        self.secret = secret
        self.ttl = ttl

    def issue(self, user_id):
        now = datetime.now(timezone.utc)
        payload = {"userId": user_id, "iat": now, "exp": now + self.ttl}
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token):
        # every failure looks the same to the caller
        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM],
                                 options={"require": ["exp"]})
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e
        user_id = payload.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError()
        return user_id
