"""Test the Canon, Ricoh and unsupported-site policies."""

from decimal import Decimal

import pytest

from product_scout.services.tracking.extractors.price_candidates import PriceCandidateExtractor
from product_scout.services.tracking.models import (
    PRICE_SENTINEL,
    AvailabilitySignals,
    PageContext,
    PageSnapshot,
    PriceCandidate,
    Retailer,
)
from product_scout.services.tracking.policies import POLICIES, policy_for
from product_scout.services.tracking.policies.canon import CanonPolicy
from product_scout.services.tracking.policies.generic import UnsupportedPolicy
from product_scout.services.tracking.policies.ricoh import RicohPolicy
from product_scout.services.tracking.scripts import scripts_for

PRICE = [PriceCandidate(raw_text="$1,099.00", numeric_value=Decimal("1099.00"), visible=True)]


@pytest.mark.parametrize("policy_cls", [CanonPolicy, RicohPolicy])
class TestCameraStorePolicies:
    def test_enabled_buy_control_is_in_stock(self, policy_cls) -> None:
        signals = AvailabilitySignals(has_enabled_primary_action=True, action_label="Add to Bag")

        decision = policy_cls().decide(PRICE, signals, PageContext(url="https://example"))

        assert decision.is_available is True
        assert decision.status_label == "In Stock"
        assert decision.price_display == "$1,099.00"

    def test_notify_me_text_is_out_of_stock(self, policy_cls) -> None:
        signals = AvailabilitySignals(
            has_enabled_primary_action=True,
            action_label="Add to Bag",
            raw_status_texts=("Button: Notify Me",),
        )

        decision = policy_cls().decide(PRICE, signals, PageContext())

        assert decision.is_available is False
        assert decision.status_label == "Out of Stock"

    def test_sold_out_button_is_out_of_stock(self, policy_cls) -> None:
        signals = AvailabilitySignals(has_explicit_unavailable_text=True, action_label="Sold Out")

        decision = policy_cls().decide(PRICE, signals, PageContext())

        assert decision.status_label == "Out of Stock"

    def test_loaded_page_without_buy_control_is_unavailable(self, policy_cls) -> None:
        decision = policy_cls().decide([], AvailabilitySignals(), PageContext(title="GR IIIx"))

        assert decision.is_available is False
        assert decision.status_label == "Unavailable"

    def test_empty_page_is_indeterminate(self, policy_cls) -> None:
        decision = policy_cls().decide([], AvailabilitySignals(), PageContext())

        assert decision.status_label == "Check Website"
        assert decision.price_display == PRICE_SENTINEL


@pytest.mark.parametrize("retailer", [Retailer.CANON, Retailer.RICOH])
def test_banner_amount_does_not_beat_product_price(retailer):
    last_rank = len(scripts_for(retailer).price_selectors) - 1
    snapshot = PageSnapshot(
        price_elements=[
            {"text": "$2,499.00", "fontSize": "28px", "top": 420, "height": 34, "rank": 0},
            {"text": "Free shipping on orders over $50", "top": 8, "height": 16, "rank": last_rank},
        ]
    )
    policy = policy_for(retailer)
    signals = AvailabilitySignals(has_enabled_primary_action=True, action_label="Add to Cart")

    candidates = PriceCandidateExtractor().extract(snapshot, policy.price_band)
    decision = policy.decide(candidates, signals, PageContext(title="EOS R6 Mark II"))

    assert decision.price == Decimal("2499.00")
    assert decision.status_label == "In Stock"


def test_canon_markup_price_fallback():
    context = PageContext(markup='"finalPrice":"2499.00"', title="EOS R6 Mark II")

    decision = CanonPolicy().decide([], AvailabilitySignals(), context)

    assert decision.price == Decimal("2499.00")


def test_unsupported_policy_never_reports_availability():
    signals = AvailabilitySignals(has_enabled_primary_action=True, action_label="Add to Cart")

    decision = UnsupportedPolicy().decide(PRICE, signals, PageContext(title="Anything"))

    assert decision.is_available is False
    assert decision.status_label == "Not Supported"
    assert decision.price is None
    assert decision.price_display == PRICE_SENTINEL


def test_every_retailer_has_a_policy():
    assert set(POLICIES) == set(Retailer)
    for retailer in Retailer:
        assert policy_for(retailer).retailer is retailer
