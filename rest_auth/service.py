"""
Account service: registration, lookup, role management and token issuance.
"""
from datetime import timedelta
from typing import List, Optional
import logging

from pydantic import validate_email
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .auth import decode_token, encode_token, hash_password, verify_password
from .config import Settings
from .errors import CreationError, InvalidToken, NotFoundError, PasswordMismatch
from .models import Account, Role
from .schemas import AccountCreate, AccountOut, TokenPair

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """
    Normalize the way ``EmailStr`` does on registration (domain lowercased).

    Values that are not email-shaped are returned unchanged.
    """
    try:
        return validate_email(email)[1]
    except ValueError:
        return email


class AccountService:
    """Operations on accounts backed by a SQLAlchemy session."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    # ---------------- Accounts ----------------

    def register(self, data: AccountCreate) -> AccountOut:
        """Create an account after checking the password confirmation field."""
        if data.password != data.password_old:
            raise PasswordMismatch()
        return self.create_account(data.name, data.email, data.password)

    def create_account(self, name: str, email: str, password: str) -> AccountOut:
        """
        Persist a new USER account with a freshly salted password hash.

        Raises:
            CreationError: email already taken or the insert failed
        """
        email = normalize_email(email)
        if self.find_by_email(email) is not None:
            logger.info("Account creation rejected, email already registered: %s", email)
            raise CreationError()

        account = Account(
            name=name,
            email=email,
            password_hash=hash_password(password),
            role=Role.USER,
        )
        try:
            self.db.add(account)
            self.db.commit()
        except IntegrityError as exc:
            # Concurrent registration won the unique index
            self.db.rollback()
            logger.info("Account creation hit unique constraint for %s", email)
            raise CreationError() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Account creation failed for %s: %s", email, exc)
            raise CreationError() from exc

        self.db.refresh(account)
        logger.info("Account created: account_id=%s", account.id)
        return AccountOut.model_validate(account)

    def find_by_email(self, email: str) -> Optional[Account]:
        """Full account row, hash included. For credential checks only."""
        return self.db.query(Account).filter(Account.email == normalize_email(email)).first()

    def _get(self, account_id: str) -> Optional[Account]:
        return self.db.query(Account).filter(Account.id == account_id).first()

    def find_by_id(self, account_id: str) -> Optional[AccountOut]:
        account = self._get(account_id)
        if account is None:
            return None
        return AccountOut.model_validate(account)

    def delete_by_id(self, account_id: str) -> AccountOut:
        account = self._get(account_id)
        if account is None:
            raise NotFoundError()
        deleted = AccountOut.model_validate(account)
        self.db.delete(account)
        self.db.commit()
        logger.info("Account deleted: account_id=%s", account_id)
        return deleted

    def set_role(self, account_id: str, role: Role) -> AccountOut:
        account = self._get(account_id)
        if account is None:
            raise NotFoundError()
        account.role = role
        self.db.add(account)
        self.db.commit()
        self.db.refresh(account)
        logger.info("Account role changed: account_id=%s role=%s", account_id, role.value)
        return AccountOut.model_validate(account)

    def is_role(self, account_id: str, role: Role) -> bool:
        """True if the account exists and has ``role``; lookup failures count as False."""
        try:
            account = self._get(account_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Role lookup failed for account_id=%s: %s", account_id, exc)
            return False
        return account is not None and account.role == role

    def list_page(self, skip: int, take: int) -> List[AccountOut]:
        accounts = (
            self.db.query(Account)
            .order_by(Account.created_at.asc(), Account.id.asc())
            .offset(skip)
            .limit(take)
            .all()
        )
        return [AccountOut.model_validate(a) for a in accounts]

    # ---------------- Tokens ----------------

    def authenticate(self, login_email: str, password: str) -> Optional[Account]:
        """
        Account matching the credentials, or None.

        Unknown email and wrong password both return None so callers cannot
        tell the two apart.
        """
        account = self.find_by_email(login_email)
        if account is None or not verify_password(password, account.password_hash):
            return None
        return account

    def login(self, login_email: str, password: str) -> Optional[TokenPair]:
        """Check credentials and issue a token pair; None on any mismatch."""
        account = self.authenticate(login_email, password)
        if account is None:
            return None
        return self.issue_token_pair({"id": account.id})

    def issue_token_pair(self, payload: dict) -> TokenPair:
        """Sign an access and a refresh token for the same ``{id}`` payload."""
        claims = {"id": payload["id"]}
        s = self.settings
        token = encode_token(
            claims,
            s.JWT_SECRET,
            issuer=s.HOST,
            expires_in=timedelta(minutes=s.ACCESS_TOKEN_EXPIRE_MINUTES),
            algorithm=s.JWT_ALGORITHM,
        )
        refresh_token = encode_token(
            claims,
            s.REFRESH_JWT_SECRET,
            issuer=s.HOST,
            expires_in=timedelta(days=s.REFRESH_TOKEN_EXPIRE_DAYS),
            algorithm=s.JWT_ALGORITHM,
        )
        return TokenPair(token=token, refresh_token=refresh_token)

    def verify_token(self, token: str, secret: str) -> dict:
        """
        Decode ``token`` signed with ``secret``.

        Raises:
            TokenExpired: valid signature, past expiration
            InvalidToken: any other failure, including a missing ``id`` claim
        """
        payload = decode_token(token, secret, issuer=self.settings.HOST, algorithm=self.settings.JWT_ALGORITHM)
        if not payload.get("id"):
            raise InvalidToken()
        return payload

    def refresh(self, refresh_token: str) -> TokenPair:
        payload = self.verify_token(refresh_token, self.settings.REFRESH_JWT_SECRET)
        return self.issue_token_pair(payload)
