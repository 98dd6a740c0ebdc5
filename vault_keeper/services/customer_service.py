"""
Customer registration and credential checks.
"""

from typing import Optional

from sqlalchemy import exists
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..db.db_customer_models import Customer
from ..exceptions import RepositoryError, duplicate
from ..schemas.customer_schemas import CustomerRead, CustomerRegister, Principal
from ..utils.hash_utils import hash_password, verify_password
from .base_service import SessionManagedService


class CustomerService(SessionManagedService):
    """Registers customers and checks their master passwords."""

    def register(self, data: CustomerRegister) -> Principal:
        """
        Create a customer with a hashed master password.

        Args:
            data: Validated registration data

        Returns:
            Principal of the new customer

        Raises:
            ConflictError: If the login is already taken
            RepositoryError: On storage failure
        """
        try:
            if self.session.query(exists().where(Customer.login == data.login)).scalar():
                raise duplicate("Customer", login=data.login)

            customer = Customer(
                name=data.name,
                login=data.login,
                master_password=hash_password(data.master_password),
            )
            self.session.add(customer)
            self.session.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same login
            self.session.rollback()
            raise duplicate("Customer", cause=e, login=data.login)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RepositoryError("Failed to register customer", cause=e, login=data.login)

        self.logger.info("Customer registered", extra={"customer_id": customer.id})
        return CustomerRead.model_validate(customer).to_principal()

    def get_by_login(self, login: str) -> Optional[CustomerRead]:
        try:
            customer = self.session.query(Customer).filter(Customer.login == login).first()
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to read customer", cause=e, login=login)
        return CustomerRead.model_validate(customer) if customer else None

    def verify_credentials(self, login: str, password: str) -> Optional[Principal]:
        """
        Check a login/password pair.

        Returns:
            The principal on success, None for empty input, an unknown login
            or a wrong password
        """
        if not login or not password:
            return None

        try:
            customer = self.session.query(Customer).filter(Customer.login == login).first()
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to read customer", cause=e, login=login)

        if customer is None or not verify_password(password, customer.master_password):
            self.logger.info("Rejected credentials", extra={"login": login})
            return None

        return Principal(id=customer.id, login=customer.login)
