from passlib.context import CryptContext
from datetime import datetime, timedelta
import jwt

from .errors import InvalidToken, TokenExpired

# Use pbkdf2_sha256 to avoid external bcrypt backend issues in some environments
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognized or corrupt hash
        return False


def encode_token(payload: dict, secret: str, issuer: str, expires_in: timedelta, algorithm: str = "HS256") -> str:
    """
    Sign ``payload`` with issuer, issued-at and expiration claims.

    Args:
        payload: Claims to carry, e.g. ``{"id": account_id}``
        secret: Signing secret
        issuer: Value of the ``iss`` claim
        expires_in: Lifetime counted from now
        algorithm: JWS algorithm

    Returns:
        Compact signed token
    """
    now = datetime.utcnow()
    claims = dict(payload)
    claims.update({"iss": issuer, "iat": now, "exp": now + expires_in})
    return jwt.encode(claims, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, issuer: str, algorithm: str = "HS256") -> dict:
    """
    Verify signature, expiration and issuer of ``token``.

    Raises:
        TokenExpired: signature is valid but ``exp`` has passed
        InvalidToken: any other verification failure
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            issuer=issuer,
            options={"require": ["exp", "iat", "iss"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.PyJWTError as exc:
        raise InvalidToken() from exc
