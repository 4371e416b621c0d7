"""
Pytest fixtures for Stockledger tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from stockledger import stock
from stockledger.adapters import reset_invoice_extractor
from stockledger.models import Product, ProductCategory


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='storekeeper',
        password='testpass123'
    )


@pytest.fixture
def product(db):
    """Empty product: no stock, default thresholds (min 5)."""
    return Product.objects.create(
        name='Dome Camera 4MP',
        sku='CAM-D4',
        category=ProductCategory.OTHER,
        selling_price=Decimal('2500.00'),
    )


@pytest.fixture
def other_product(db):
    return Product.objects.create(
        name='NVR 8 Channel',
        sku='NVR-8',
        category=ProductCategory.OTHER,
        selling_price=Decimal('9000.00'),
    )


@pytest.fixture
def stocked_product(product):
    """Product with 50 on hand, received through a purchase."""
    stock.receive_purchase(product, 50, unit_cost=Decimal('100'))
    product.refresh_from_db()
    return product


@pytest.fixture(autouse=True)
def _reset_extractor():
    reset_invoice_extractor()
    yield
    reset_invoice_extractor()
