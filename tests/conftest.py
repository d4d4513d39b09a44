import os
from pathlib import Path
from types import SimpleNamespace

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context.
    The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from shared.domain import hekayaty, init_domain

    init_domain()
    hekayaty.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from shared.domain import hekayaty

    hekayaty.setup_database()

    yield

    hekayaty.drop_database()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    from notifications.channel import reset_channels

    reset_channels()

    yield

    from protean import current_domain

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_channels()


@pytest.fixture
def push():
    from notifications.channel import get_channel

    return get_channel()


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
@pytest.fixture
def buyer():
    from shared.actor import Actor, Role

    return Actor(user_id="buyer-001", role=Role.READER)


@pytest.fixture
def admin():
    from shared.actor import Actor, Role

    return Actor(user_id="admin-001", role=Role.ADMIN)


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------
@pytest.fixture
def catalog():
    """Three sellers with physical and digital products, a collection and a rate.

    s1 ships to Cairo for 30 and sells merchandise; s2 sells digital goods
    with a 15% rate; s3 sells digital goods at the default rate.
    """
    from catalogue.collection.collection import Collection
    from catalogue.product.product import Product, ProductVariant
    from catalogue.seller.seller import Seller
    from protean import current_domain
    from shared.actor import Actor, Role
    from shipping.rate.rate import ShippingRate

    def add(aggregate):
        current_domain.repository_for(type(aggregate)).add(aggregate)
        return aggregate

    s1 = add(Seller(id="seller-001", display_name="Nour Crafts"))
    s2 = add(Seller(id="seller-002", display_name="Karim Stories", commission_rate=15))
    s3 = add(Seller(id="seller-003", display_name="Default Rate Art"))

    mug = add(
        Product(
            id="prod-mug",
            seller_id=s1.id,
            title="Story Mug",
            type="merchandise",
            requires_shipping=True,
            price=200,
            stock_quantity=5,
        )
    )
    poster = add(
        Product(
            id="prod-poster",
            seller_id=s1.id,
            title="Poster",
            type="physical",
            price=90,
            stock_quantity=1,
        )
    )
    ebook = add(Product(id="prod-ebook", seller_id=s2.id, title="Night Tales", type="ebook", price=100))
    brushes = add(Product(id="prod-brushes", seller_id=s3.id, title="Brush Pack", type="asset", price=55))

    large_mug = add(ProductVariant(id="var-large", product_id=mug.id, name="Large", price=240))
    signed_ebook = add(ProductVariant(id="var-signed", product_id=ebook.id, name="Signed", price=160))
    bundle = add(Collection(id="coll-bundle", seller_id=s2.id, title="Complete Saga", price="150"))
    cairo = add(
        ShippingRate(
            id="rate-cairo",
            seller_id=s1.id,
            region_name="Cairo",
            amount=30,
            delivery_time_min=2,
            delivery_time_max=4,
        )
    )

    return SimpleNamespace(
        s1=s1,
        s2=s2,
        s3=s3,
        mug=mug,
        poster=poster,
        ebook=ebook,
        brushes=brushes,
        large_mug=large_mug,
        signed_ebook=signed_ebook,
        bundle=bundle,
        cairo=cairo,
        s1_actor=Actor(user_id=s1.id, role=Role.CREATOR),
        s2_actor=Actor(user_id=s2.id, role=Role.CREATOR),
        s3_actor=Actor(user_id=s3.id, role=Role.CREATOR),
    )


@pytest.fixture
def cairo_address():
    return {
        "full_name": "Mona Adel",
        "phone_number": "01000000000",
        "city": "Cairo",
        "address_line": "12 Tahrir St",
    }


@pytest.fixture
def place_order(buyer, cairo_address):
    """Check out the given cart lines and return the loaded orders."""
    from ordering.checkout.checkout import PlaceOrder
    from ordering.order.order import Order
    from protean import current_domain

    def _place(*cart_lines, payment_method="instapay", actor=None, address=cairo_address, **fields):
        actor = actor or buyer
        order_ids = current_domain.process(
            PlaceOrder(
                cart_lines=list(cart_lines),
                payment_method=payment_method,
                shipping_address=address or {},
                **fields,
                **actor.as_fields(),
            ),
            asynchronous=False,
        )
        repo = current_domain.repository_for(Order)
        return [repo.get(order_id) for order_id in order_ids]

    return _place


@pytest.fixture
def lines_of():
    """The lines of an order, in cart order."""
    from ordering.order.payment import order_lines

    def _lines(order):
        return order_lines(str(order.id))

    return _lines


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture
def client():
    from app import app
    from fastapi.testclient import TestClient

    return TestClient(app)


def headers_for(actor) -> dict:
    return {"X-User-Id": actor.user_id, "X-User-Role": actor.role.value}


@pytest.fixture
def auth():
    return headers_for


@pytest.fixture
def mutate():
    """Load an aggregate, change some of its fields and save it."""
    from protean import current_domain

    def _mutate(aggregate_cls, identifier, **changes):
        repo = current_domain.repository_for(aggregate_cls)
        aggregate = repo.get(identifier)
        for name, value in changes.items():
            setattr(aggregate, name, value)
        repo.add(aggregate)
        return aggregate

    return _mutate


def count_of(aggregate_cls, **filters) -> int:
    from protean import current_domain

    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)
    return len(query.limit(None).all().items)


@pytest.fixture
def count():
    return count_of
