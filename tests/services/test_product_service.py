"""
Tests for the ProductService.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError as SchemaValidationError

from shop_wallet.errors import ProductNotFoundError
from shop_wallet.schemas.product import ProductCreate, ProductUpdate
from shop_wallet.services.product_service import ProductService

from conftest import create_product


class TestCreateProduct:

    def test_create_product(self, db_session):
        product = create_product(db_session, price="49.99", name="Kettle")
        assert product.id is not None
        assert product.price == Decimal("49.99")
        assert product.offer_price is None
        assert product.is_active is True

    def test_price_must_be_positive(self):
        with pytest.raises(SchemaValidationError):
            ProductCreate(name="Free", category="misc", price=Decimal("0"))

    def test_offer_price_cannot_be_negative(self):
        with pytest.raises(SchemaValidationError):
            ProductCreate(
                name="Odd", category="misc",
                price=Decimal("10.00"), offer_price=Decimal("-1.00"),
            )


class TestEffectivePrice:

    def test_no_offer_uses_price(self, db_session):
        product = create_product(db_session, price="20.00")
        assert product.effective_price == Decimal("20.00")

    def test_lower_offer_applies(self, db_session):
        product = create_product(db_session, price="20.00", offer_price="15.00")
        assert product.effective_price == Decimal("15.00")

    def test_higher_offer_is_ignored(self, db_session):
        product = create_product(db_session, price="20.00", offer_price="25.00")
        assert product.effective_price == Decimal("20.00")


class TestQueries:

    def test_get_missing_product(self, db_session):
        with pytest.raises(ProductNotFoundError, match="999"):
            ProductService(db_session).get_product(999)

    def test_list_filters_by_category(self, db_session):
        create_product(db_session, name="Mug", category="kitchen")
        create_product(db_session, name="Lamp", category="home")
        create_product(db_session, name="Pan", category="kitchen")

        products, total = ProductService(db_session).list_products(category="kitchen")
        assert total == 2
        assert [p.name for p in products] == ["Mug", "Pan"]

    def test_list_paginates(self, db_session):
        for i in range(5):
            create_product(db_session, name=f"P{i}")
        products, total = ProductService(db_session).list_products(page=2, limit=2)
        assert total == 5
        assert [p.name for p in products] == ["P2", "P3"]


class TestUpdateAndDeactivate:

    def test_partial_update(self, db_session):
        product = create_product(db_session, price="20.00")
        service = ProductService(db_session)
        service.update_product(product.id, ProductUpdate(offer_price=Decimal("12.50")))
        db_session.commit()

        assert product.offer_price == Decimal("12.50")
        assert product.price == Decimal("20.00")

    def test_null_for_required_field_keeps_value(self, db_session):
        product = ProductService(db_session).create_product(ProductCreate(
            name="Kettle", category="kitchen", description="Steel", price=Decimal("30.00"),
        ))
        db_session.commit()

        ProductService(db_session).update_product(
            product.id, ProductUpdate(description=None, name=None, offer_price=None),
        )
        db_session.commit()

        assert product.description == "Steel"
        assert product.name == "Kettle"
        assert product.offer_price is None

    def test_deactivated_product_hidden_from_listing(self, db_session):
        product = create_product(db_session)
        service = ProductService(db_session)
        service.deactivate_product(product.id)
        db_session.commit()

        _, total = service.list_products()
        assert total == 0
        # Still loadable for order history
        assert service.get_product(product.id).is_active is False

    def test_deactivated_product_missing_for_checkout(self, db_session):
        product = create_product(db_session)
        service = ProductService(db_session)
        service.deactivate_product(product.id)
        db_session.commit()

        with pytest.raises(ProductNotFoundError):
            service.get_product(product.id, active_only=True)
