"""Tests for CustomerService."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from vault_keeper.db import Customer
from vault_keeper.exceptions import ConflictError
from vault_keeper.schemas.customer_schemas import CustomerRegister


class TestRegister:
    """Test customer registration."""

    def test_register(self, customer_service, db_session):
        principal = customer_service.register(
            CustomerRegister(name="Carol", login="carol@example.com", masterpassword="pw")
        )

        customer = db_session.get(Customer, principal.id)
        assert principal.login == "carol@example.com"
        assert customer.name == "Carol"

    def test_password_is_hashed(self, customer_service, db_session, alice):
        customer = db_session.get(Customer, alice.id)

        assert customer.master_password.startswith("pbkdf2_sha256$")
        assert "alice-secret" not in customer.master_password

    def test_duplicate_login(self, customer_service, alice):
        with pytest.raises(ConflictError):
            customer_service.register(
                CustomerRegister(login="alice@example.com", masterpassword="other")
            )

    @pytest.mark.parametrize("login", ["", "alice", "alice@", "@example.com", "a b@example.com"])
    def test_login_must_be_email(self, login):
        with pytest.raises(PydanticValidationError):
            CustomerRegister(login=login, masterpassword="pw")

    def test_master_password_required(self):
        with pytest.raises(PydanticValidationError):
            CustomerRegister(login="dave@example.com", masterpassword="")


class TestVerifyCredentials:
    """Test credential checks."""

    def test_correct(self, customer_service, alice):
        assert customer_service.verify_credentials("alice@example.com", "alice-secret") == alice

    @pytest.mark.parametrize(
        "login,password",
        [
            ("alice@example.com", "wrong"),
            ("nobody@example.com", "alice-secret"),
            ("", "alice-secret"),
            ("alice@example.com", ""),
        ],
    )
    def test_rejected(self, customer_service, alice, login, password):
        assert customer_service.verify_credentials(login, password) is None

    def test_get_by_login(self, customer_service, alice):
        customer = customer_service.get_by_login("alice@example.com")

        assert customer.id == alice.id
        assert customer.name == "Alice"
        assert customer_service.get_by_login("nobody@example.com") is None
