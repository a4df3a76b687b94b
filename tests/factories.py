"""
Test factories for campaigns, tiers and point entries using factory_boy.

Objects are built transient; tests that need them persisted add them to the
session themselves.
"""
from datetime import date
from decimal import Decimal

import factory

from app.models.campaign import Campaign
from app.models.campaign_tier import CampaignTier
from app.models.point_entry import PointEntry


class CampaignTierFactory(factory.Factory):
    """Factory for a campaign tier."""

    class Meta:
        model = CampaignTier

    id = factory.Sequence(lambda n: n + 1)
    min_points = 0
    max_points = None
    companion_allowed = False
    description = factory.Sequence(lambda n: f"Tier {n}")
    prize_value = Decimal("1500.00")


class CampaignFactory(factory.Factory):
    """Factory for an active campaign covering 2026."""

    class Meta:
        model = Campaign

    id = factory.Sequence(lambda n: n + 1)
    title = factory.Sequence(lambda n: f"Campaign {n}")
    start_date = date(2026, 1, 1)
    end_date = date(2026, 12, 31)
    status = "ACTIVE"
    tiers = factory.LazyFunction(list)


class PointEntryFactory(factory.Factory):
    """Factory for an active point entry."""

    class Meta:
        model = PointEntry

    professional_id = 1
    store_id = 10
    registrant_id = 100
    client_id = 500
    value = Decimal("100.00")
    reference_date = date(2026, 3, 1)
    status = "ACTIVE"


def campaign_with_tiers(ranges, **kwargs):
    """Build a campaign whose tiers are given as (min_points, max_points) pairs."""
    tiers = [CampaignTierFactory(min_points=lo, max_points=hi) for lo, hi in ranges]
    return CampaignFactory(tiers=tiers, **kwargs)


def auth_headers(user_id, role, store_id=None):
    """Identity headers as forwarded by the auth provider."""
    headers = {"X-User-Id": str(user_id), "X-User-Role": role}
    if store_id is not None:
        headers["X-Store-Id"] = str(store_id)
    return headers
