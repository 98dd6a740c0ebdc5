"""
Session tokens with a single active session per customer.

Tokens are HS256 JWTs carrying the login and the customer id. A token is only
accepted while the row recording it is still marked valid, so logging in
again revokes every earlier token of the same customer server-side even
though those tokens have not expired.
"""

import uuid
from datetime import timedelta
from typing import Optional, Tuple

import jwt
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import CLAIM_LOGIN, CLAIM_USER_ID, DEFAULT_TOKEN_TTL_SECONDS
from ..db.db_base import utc_now
from ..db.db_customer_models import Customer, SessionToken
from ..exceptions import (
    InfrastructureError,
    RepositoryError,
    UnauthenticatedError,
    not_found,
)
from ..schemas.customer_schemas import Principal
from ..utils.crud_helpers import create_record, update_records
from .base_service import SessionManagedService
from .customer_service import CustomerService


class SessionService(SessionManagedService):
    """
    Issues, persists, revokes and verifies session tokens.
    """

    def __init__(
        self,
        sign_key: bytes,
        session: Optional[Session] = None,
        token_ttl_seconds: int = DEFAULT_TOKEN_TTL_SECONDS,
        algorithm: str = "HS256",
        customer_service: Optional[CustomerService] = None,
    ):
        super().__init__(session=session)
        self._sign_key = sign_key
        self.token_ttl = timedelta(seconds=token_ttl_seconds)
        self.algorithm = algorithm
        self.customer_service = customer_service or CustomerService(session=self.session)

    def issue(self, principal: Principal) -> str:
        """
        Sign a token for the principal. Nothing is stored.

        The jti claim keeps two tokens issued within the same second distinct.
        """
        now = utc_now()
        claims = {
            CLAIM_LOGIN: principal.login,
            CLAIM_USER_ID: principal.id,
            "iat": now,
            "exp": now + self.token_ttl,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self._sign_key, algorithm=self.algorithm)

    def invalidate(self, principal_id: int, commit: bool = True) -> int:
        """
        Mark every stored token of the principal invalid.

        Returns:
            Number of rows touched
        """
        count = update_records(
            self.session, SessionToken, {}, {"is_valid": False}, owner_id=principal_id, commit=commit
        )
        self.logger.debug(
            "Session tokens invalidated", extra={"customer_id": principal_id, "rowcount": count}
        )
        return count

    def persist(self, principal_id: int, token: str) -> None:
        """
        Record a token as the only valid one for the principal.

        The customer row is locked first so concurrent logins of the same
        customer serialize; invalidation and insert commit together or not
        at all.

        Raises:
            RecordNotFoundError: If the customer does not exist
            RepositoryError: On storage failure
        """
        try:
            with self.transaction():
                locked = (
                    self.session.query(Customer.id)
                    .filter(Customer.id == principal_id)
                    .with_for_update()
                    .first()
                )
                if locked is None:
                    raise not_found("Customer", customer_id=principal_id)

                self.invalidate(principal_id, commit=False)
                issued_at = utc_now()
                create_record(
                    self.session,
                    SessionToken,
                    {
                        "token": token,
                        "is_valid": True,
                        "issued_at": issued_at,
                        "expires_at": issued_at + self.token_ttl,
                    },
                    owner_id=principal_id,
                    commit=False,
                )
        except SQLAlchemyError as e:
            raise RepositoryError(
                "Failed to persist session token", cause=e, customer_id=principal_id
            )

    def login(self, login: str, password: str) -> Tuple[Principal, str]:
        """
        Check credentials, then issue and persist a fresh token.

        Raises:
            UnauthenticatedError: On bad credentials
        """
        principal = self.customer_service.verify_credentials(login, password)
        if principal is None:
            raise UnauthenticatedError("Invalid login or password")

        token = self.issue(principal)
        self.persist(principal.id, token)
        self.logger.info("Customer logged in", extra={"customer_id": principal.id})
        return principal, token

    def decode_claims(self, token: str) -> Optional[Principal]:
        """
        Check signature, expiry and claim shape only.

        Returns:
            The principal the token names, or None if the token is not acceptable
        """
        try:
            claims = jwt.decode(
                token,
                self._sign_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.PyJWTError as e:
            self.logger.debug("Rejected session token", extra={"reason": str(e)})
            return None

        login = claims.get(CLAIM_LOGIN)
        user_id = claims.get(CLAIM_USER_ID)
        if not isinstance(login, str) or not login:
            return None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            return None
        return Principal(id=user_id, login=login)

    def verify(self, token: str) -> Principal:
        """
        Accept a token only if its claims check out and it is still the
        principal's valid session.

        Raises:
            UnauthenticatedError: Malformed, expired, mis-signed, superseded or unknown token
            InfrastructureError: If the token store cannot be read
        """
        principal = self.decode_claims(token)
        if principal is None:
            raise UnauthenticatedError("Invalid session token")

        try:
            row = (
                self.session.query(SessionToken.id)
                .filter(
                    SessionToken.token == token,
                    SessionToken.customer_id == principal.id,
                    SessionToken.is_valid.is_(True),
                )
                .first()
            )
        except SQLAlchemyError as e:
            raise InfrastructureError(
                "Failed to read session tokens", cause=e, customer_id=principal.id
            )

        if row is None:
            raise UnauthenticatedError("Session token is no longer valid")
        return principal

    def cleanup_expired_tokens(self) -> int:
        """
        Delete token rows past their expiry.

        Returns:
            Number of tokens cleaned up
        """
        try:
            with self.transaction():
                result = self.session.execute(
                    delete(SessionToken).where(SessionToken.expires_at < utc_now())
                )
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to clean up session tokens", cause=e)

        self.logger.info(f"Cleaned up {result.rowcount} expired tokens")
        return result.rowcount
