"""Unit tests for AuthService and DeliveryService."""

from datetime import date
from unittest.mock import AsyncMock

import bcrypt
import pytest
from pydantic import SecretStr

from srecha.core.entities import Client, Delivery, DeliveryItem, Product, User
from srecha.core.exceptions import AuthError, EntityNotFoundError, ValidationError
from srecha.core.services import AuthService, DeliveryService


@pytest.fixture
def user_store():
    store = AsyncMock()
    store.get_by_username.return_value = None
    store.count_users.return_value = 0
    store.create_user.side_effect = lambda user: user.model_copy(update={"id": 1})
    return store


@pytest.fixture
def auth(user_store) -> AuthService:
    return AuthService(user_store, bcrypt_rounds=4)


class TestAuthService:
    def test_hash_is_bcrypt(self, auth):
        hashed = auth.hash_password("s3cret")
        assert hashed.startswith("$2")
        assert bcrypt.checkpw(b"s3cret", hashed.encode())

    def test_password_over_72_bytes_rejected(self, auth):
        with pytest.raises(ValidationError):
            auth.hash_password("x" * 73)

    def test_empty_password_rejected(self, auth):
        with pytest.raises(ValidationError):
            auth.hash_password("")

    async def test_login_success(self, auth, user_store):
        user_store.get_by_username.return_value = User(
            id=3, username="admin", password_hash=auth.hash_password("s3cret")
        )

        principal = await auth.login("admin", "s3cret")

        assert principal.id == 3
        assert principal.username == "admin"
        assert principal.role == "admin"

    async def test_wrong_password(self, auth, user_store):
        user_store.get_by_username.return_value = User(
            id=3, username="admin", password_hash=auth.hash_password("s3cret")
        )
        with pytest.raises(AuthError):
            await auth.login("admin", "wrong")

    async def test_unknown_user_fails_the_same_way(self, auth):
        with pytest.raises(AuthError) as exc_info:
            await auth.login("ghost", "whatever")
        assert exc_info.value.message == AuthError("admin").message

    async def test_overlong_password_fails_login(self, auth, user_store):
        user_store.get_by_username.return_value = User(
            id=3, username="admin", password_hash=auth.hash_password("s3cret")
        )
        with pytest.raises(AuthError):
            await auth.login("admin", "s3cret" + "x" * 80)

    async def test_bootstrap_admin_on_empty_store(self, auth, user_store):
        created = await auth.ensure_bootstrap_admin("admin", SecretStr("s3cret"))

        assert created.username == "admin"
        stored = user_store.create_user.await_args.args[0]
        assert stored.password_hash != "s3cret"

    async def test_bootstrap_skipped_when_users_exist(self, auth, user_store):
        user_store.count_users.return_value = 1
        assert await auth.ensure_bootstrap_admin("admin", SecretStr("s3cret")) is None
        user_store.create_user.assert_not_awaited()

    async def test_bootstrap_skipped_without_credentials(self, auth, user_store):
        assert await auth.ensure_bootstrap_admin(None, None) is None
        user_store.count_users.assert_not_awaited()

    def test_password_not_in_repr(self):
        user = User(username="admin", password_hash="$2b$secret-hash")
        assert "secret-hash" not in repr(user)


class TestDeliveryService:
    @pytest.fixture
    def stores(self):
        deliveries = AsyncMock()
        deliveries.create_delivery.side_effect = lambda d: d.model_copy(update={"id": 1})
        clients = AsyncMock()
        clients.get.return_value = Client(id=1, name="C1")
        products = AsyncMock()
        products.get.side_effect = lambda pid: Product(id=pid, code="SKU", name="Tea")
        return deliveries, clients, products

    async def test_snapshots_names(self, stores):
        service = DeliveryService(*stores)

        created = await service.create_delivery(
            Delivery(
                delivery_number="D-1",
                client_id=1,
                delivery_date=date(2024, 1, 1),
                items=[DeliveryItem(product_id=4, quantity=2)],
            )
        )

        assert created.client_name == "C1"
        assert created.items[0].product_name == "Tea"

    async def test_requires_items(self, stores):
        with pytest.raises(ValidationError):
            await DeliveryService(*stores).create_delivery(Delivery(delivery_number="D-1"))

    async def test_unknown_product(self, stores):
        stores[2].get.side_effect = EntityNotFoundError("product", 4)
        with pytest.raises(ValidationError):
            await DeliveryService(*stores).create_delivery(
                Delivery(delivery_number="D-1", items=[DeliveryItem(product_id=4, quantity=1)])
            )
        stores[0].create_delivery.assert_not_awaited()
