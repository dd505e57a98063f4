"""
Shared pytest fixtures: card factories and a small in-memory catalog.
"""

import pytest

from engine.catalog import CardRepository
from engine.models import CardRecord


def _card(**overrides) -> CardRecord:
    values = dict(
        id="card",
        name="Test Card",
        bank="HDFC Bank",
        category="Cashback",
        network_type="Visa",
        annual_fee=500,
        joining_fee=500,
        cashback_rate="1% on all spends",
        reward_type="Cashback",
        reward_rate="1% cashback",
        online_shopping_cashback="1%",
        dining_cashback="1%",
        lounge_access=False,
        fuel_cashback=False,
        contactless=True,
        benefits=("Contactless payments",),
        best_for=("Shopping",),
        eligibility="Salaried with monthly income above ₹25,000",
        image="",
    )
    values.update(overrides)
    return CardRecord(**values)


@pytest.fixture
def make_card():
    """Factory for CardRecord objects with sensible defaults."""
    return _card


@pytest.fixture
def sample_cards():
    """
    Four cards with annual fees [0, 500, 1500, 12000] in dataset order.
    """
    return [
        _card(
            id="free-rupay",
            name="Axis MY Zone",
            bank="Axis Bank",
            category="Entry-level",
            network_type="RuPay",
            annual_fee=0,
            joining_fee=0,
            cashback_rate="0.8% value back",
            reward_type="EDGE Reward Points",
            lounge_access=True,
            fuel_cashback=True,
            benefits=("Lifetime free card", "Buy one get one on movie tickets"),
            best_for=("Entertainment", "Dining"),
        ),
        _card(
            id="ace",
            name="Axis ACE",
            bank="Axis Bank",
            category="Cashback",
            network_type="Visa",
            annual_fee=500,
            cashback_rate="1.5% flat",
            lounge_access=True,
            fuel_cashback=True,
            benefits=("5% cashback on bill payments", "Accepted wherever Visa cards are"),
            best_for=("Bill Payments", "Dining"),
        ),
        _card(
            id="octane",
            name="BPCL SBI Card OCTANE",
            bank="State Bank of India",
            category="Mid-tier",
            network_type="Visa",
            annual_fee=1500,
            cashback_rate="7.25% on BPCL fuel",
            reward_type="Value Back",
            lounge_access=True,
            fuel_cashback=True,
            benefits=("7.25% value back on fuel",),
            best_for=("Fuel", "Travel"),
        ),
        _card(
            id="infinia",
            name="HDFC Infinia Metal Edition",
            bank="HDFC Bank",
            category="Premium",
            network_type="Mastercard",
            annual_fee=12000,
            cashback_rate="5% on dining",
            reward_type="Reward Points",
            lounge_access=True,
            fuel_cashback=False,
            benefits=("Unlimited airport lounge access", "Complimentary golf games"),
            best_for=("Travel", "Luxury"),
            eligibility="By invitation only",
        ),
    ]


@pytest.fixture
def sample_repository(sample_cards):
    return CardRepository(sample_cards)
