"""Application tests for the payment verification gate and manual payment rejection."""

import threading

import pytest
from catalogue.product.product import Product
from catalogue.seller.management import SetCommissionRate
from earnings.earning.earning import Earning
from notifications.notification.notification import NotificationType, OrderNotification
from ordering.order.order import Order, SettlementStatus
from ordering.order.payment import RejectPayment, VerifyPayment
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from shared.actor import Actor, Role
from shared.domain import hekayaty
from shared.errors import AuthorizationError, IllegalTransitionError


def _verify(actor, order_id):
    return current_domain.process(VerifyPayment(order_id=str(order_id), **actor.as_fields()), asynchronous=False)


def _reject(actor, order_id, note=None):
    return current_domain.process(
        RejectPayment(order_id=str(order_id), note=note, **actor.as_fields()), asynchronous=False
    )


def _earnings_for(order_id):
    return current_domain.repository_for(Earning).for_order(str(order_id))


def _order(order_id):
    return current_domain.repository_for(Order).get(str(order_id))


def _notifications(order_id, notification_type):
    repo = current_domain.repository_for(OrderNotification)
    return repo._dao.query.filter(order_id=str(order_id), type=notification_type.value).limit(None).all().items


@pytest.fixture
def cairo_orders(catalog, place_order):
    return place_order({"product_id": catalog.mug.id}, {"collection_id": catalog.bundle.id}, shipping_cost=30)


class TestVerifyPayment:
    def test_marks_order_paid(self, admin, cairo_orders):
        physical, _ = cairo_orders

        result = _verify(admin, physical.id)

        assert result["status"] == SettlementStatus.PAID.value
        order = _order(physical.id)
        assert order.status == SettlementStatus.PAID.value
        assert order.is_verified is True
        assert order.verified_by == "admin-001"
        assert order.paid_at is not None

    def test_physical_earning_includes_shipping(self, admin, cairo_orders):
        physical, _ = cairo_orders

        _verify(admin, physical.id)

        (earning,) = _earnings_for(physical.id)
        assert earning.seller_id == "seller-001"
        assert earning.amount == 206
        assert earning.gross_amount == 200
        assert earning.platform_fee == 24
        assert earning.shipping_amount == 30

    def test_digital_earning_uses_seller_rate(self, admin, cairo_orders):
        _, digital = cairo_orders

        _verify(admin, digital.id)

        (earning,) = _earnings_for(digital.id)
        assert (earning.seller_id, earning.amount, earning.platform_fee) == ("seller-002", 127, 23)

    def test_rate_change_before_verification_applies(self, admin, cairo_orders):
        _, digital = cairo_orders
        current_domain.process(
            SetCommissionRate(seller_id="seller-002", commission_rate=10, **admin.as_fields()), asynchronous=False
        )

        _verify(admin, digital.id)

        (earning,) = _earnings_for(digital.id)
        assert earning.platform_fee == 15
        assert earning.amount == 135

    def test_physical_rate_ignores_seller_rate(self, admin, cairo_orders):
        physical, _ = cairo_orders
        current_domain.process(
            SetCommissionRate(seller_id="seller-001", commission_rate=50, **admin.as_fields()), asynchronous=False
        )

        _verify(admin, physical.id)

        (earning,) = _earnings_for(physical.id)
        assert earning.platform_fee == 24

    def test_one_earning_per_seller(self, catalog, admin, place_order):
        (order,) = place_order(
            {"product_id": catalog.ebook.id, "quantity": 2},
            {"collection_id": catalog.bundle.id},
            {"product_id": catalog.brushes.id},
            payment_method="bank_transfer",
        )

        _verify(admin, order.id)

        earnings = _earnings_for(order.id)
        assert [(e.seller_id, e.gross_amount, e.units) for e in earnings] == [
            ("seller-002", 350, 3),
            ("seller-003", 55, 1),
        ]
        # s3 has no rate, so the default digital rate of 20% applies
        assert earnings[1].platform_fee == 11

    def test_sales_counter_advances_by_line(self, catalog, admin, place_order):
        (order,) = place_order({"product_id": catalog.ebook.id, "quantity": 3})
        assert current_domain.repository_for(Product).get("prod-ebook").sales_count == 0

        _verify(admin, order.id)

        assert current_domain.repository_for(Product).get("prod-ebook").sales_count == 1

    def test_buyer_is_notified(self, admin, cairo_orders, push):
        physical, _ = cairo_orders

        _verify(admin, physical.id)

        (notification,) = _notifications(physical.id, NotificationType.PAYMENT_VERIFIED)
        assert notification.user_id == "buyer-001"
        assert notification.title == "Payment Confirmed"
        assert notification.message == "Your payment of 230 EGP has been verified."

        (sent,) = push.delivered_to("buyer-001")
        assert sent.heading == "Payment Confirmed"
        assert sent.payload["order_id"] == str(physical.id)
        assert sent.payload["type"] == NotificationType.PAYMENT_VERIFIED.value


class TestVerificationIsIdempotent:
    def test_second_verification_is_refused(self, admin, cairo_orders):
        physical, _ = cairo_orders
        _verify(admin, physical.id)

        with pytest.raises(IllegalTransitionError) as exc:
            _verify(admin, physical.id)

        assert exc.value.messages == {"status": ["Cannot transition from paid to paid"]}
        assert len(_earnings_for(physical.id)) == 1
        assert len(_notifications(physical.id, NotificationType.PAYMENT_VERIFIED)) == 1

    def test_auto_paid_order_cannot_be_verified(self, catalog, admin, place_order):
        (order,) = place_order({"product_id": catalog.ebook.id}, payment_method="card")

        with pytest.raises(IllegalTransitionError):
            _verify(admin, order.id)
        assert len(_earnings_for(order.id)) == 1

    def test_losing_a_verification_race_is_an_illegal_transition(self, monkeypatch, admin, cairo_orders):
        """A rival verification commits between our read and our write."""
        physical, _ = cairo_orders
        original = Order.mark_paid
        raced = []

        def rival():
            with hekayaty.domain_context():
                _verify(Actor(user_id="admin-002", role=Role.ADMIN), physical.id)

        def mark_paid_after_rival(order, verified_by=None):
            if not raced:
                raced.append(True)
                thread = threading.Thread(target=rival)
                thread.start()
                thread.join()
            return original(order, verified_by=verified_by)

        monkeypatch.setattr(Order, "mark_paid", mark_paid_after_rival)

        with pytest.raises(IllegalTransitionError):
            _verify(admin, physical.id)

        order = _order(physical.id)
        assert order.verified_by == "admin-002"
        assert len(_earnings_for(physical.id)) == 1


class TestVerificationAccess:
    def test_only_admins_verify(self, catalog, buyer, cairo_orders):
        physical, _ = cairo_orders

        with pytest.raises(AuthorizationError) as exc:
            _verify(catalog.s1_actor, physical.id)
        assert exc.value.messages == {"actor": ["Only admins can verify payments"]}
        with pytest.raises(AuthorizationError):
            _verify(buyer, physical.id)

        assert _order(physical.id).status == SettlementStatus.PENDING.value
        assert _earnings_for(physical.id) == []

    def test_unknown_order(self, catalog, admin):
        with pytest.raises(ObjectNotFoundError):
            _verify(admin, "order-missing")


class TestRejectPayment:
    def test_rejects_pending_order(self, admin, cairo_orders, push):
        physical, _ = cairo_orders

        _reject(admin, physical.id, note="  Receipt is unreadable  ")

        order = _order(physical.id)
        assert order.status == SettlementStatus.REJECTED.value
        assert order.rejection_note == "Receipt is unreadable"
        assert order.rejected_at is not None
        assert _earnings_for(physical.id) == []

        (notification,) = _notifications(physical.id, NotificationType.PAYMENT_REJECTED)
        assert notification.title == "Payment Rejected"
        assert notification.message == "We could not verify your payment. Receipt is unreadable"
        (sent,) = push.delivered_to("buyer-001")
        assert sent.heading == "Payment Rejected"

    def test_blank_note_is_dropped(self, admin, cairo_orders):
        physical, _ = cairo_orders

        _reject(admin, physical.id, note="   ")

        assert _order(physical.id).rejection_note is None
        (notification,) = _notifications(physical.id, NotificationType.PAYMENT_REJECTED)
        assert notification.message == "We could not verify your payment."

    def test_rejected_order_cannot_be_verified(self, admin, cairo_orders):
        physical, _ = cairo_orders
        _reject(admin, physical.id)

        with pytest.raises(IllegalTransitionError):
            _verify(admin, physical.id)

    def test_paid_order_cannot_be_rejected(self, admin, cairo_orders):
        physical, _ = cairo_orders
        _verify(admin, physical.id)

        with pytest.raises(IllegalTransitionError):
            _reject(admin, physical.id)

    def test_sellers_cannot_reject(self, catalog, cairo_orders):
        physical, _ = cairo_orders

        with pytest.raises(AuthorizationError):
            _reject(Actor(user_id="seller-001", role=Role.CREATOR), physical.id)
