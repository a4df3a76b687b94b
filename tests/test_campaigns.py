from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.models.campaign_tier import CampaignTier
from app.services import campaign_service
from app.services.campaign_catalog import active_campaigns_with_tiers, is_active_on
from app.services.tier_resolver import resolve

from factories import CampaignFactory, PointEntryFactory, campaign_with_tiers


AS_OF = date(2026, 6, 15)


def _persist(db, *objs):
    db.add_all(objs)
    db.commit()
    return objs


class TestCatalog:
    def test_active_filter(self, db):
        running = campaign_with_tiers([(0, None)])
        open_ended = campaign_with_tiers([(0, None)], end_date=None)
        draft = campaign_with_tiers([(0, None)], status="DRAFT")
        inactive = campaign_with_tiers([(0, None)], status="INACTIVE")
        future = campaign_with_tiers([(0, None)], start_date=date(2026, 7, 1))
        ended = campaign_with_tiers([(0, None)], end_date=date(2026, 6, 14))
        ends_today = campaign_with_tiers([(0, None)], end_date=AS_OF)
        _persist(db, running, open_ended, draft, inactive, future, ended, ends_today)

        ids = {c.id for c in active_campaigns_with_tiers(db, AS_OF)}

        assert ids == {running.id, open_ended.id, ends_today.id}

    def test_campaigns_without_tiers_are_left_out(self, db):
        flat = CampaignFactory(target_points=5000)
        tiered = campaign_with_tiers([(0, 100)])
        _persist(db, flat, tiered)

        assert [c.id for c in active_campaigns_with_tiers(db, AS_OF)] == [tiered.id]

    def test_ordering(self, db):
        later = campaign_with_tiers([(0, None)], end_date=date(2026, 12, 31))
        open_ended = campaign_with_tiers([(0, None)], end_date=None)
        sooner = campaign_with_tiers([(0, None)], end_date=date(2026, 8, 31))
        sooner_late_start = campaign_with_tiers([(0, None)], end_date=date(2026, 8, 31), start_date=date(2026, 3, 1))
        _persist(db, later, open_ended, sooner_late_start, sooner)

        ids = [c.id for c in active_campaigns_with_tiers(db, AS_OF)]

        assert ids == [sooner.id, sooner_late_start.id, later.id, open_ended.id]

    def test_tiers_loaded_in_ascending_order(self, db):
        campaign = campaign_with_tiers([(2000, None), (0, 999), (1000, 1999)])
        _persist(db, campaign)
        db.expire_all()

        (loaded,) = active_campaigns_with_tiers(db, AS_OF)

        assert [t.min_points for t in loaded.tiers] == [0, 1000, 2000]

    def test_is_active_on(self):
        campaign = CampaignFactory(start_date=date(2026, 1, 1), end_date=date(2026, 1, 31))

        assert is_active_on(campaign, date(2026, 1, 1))
        assert is_active_on(campaign, date(2026, 1, 31))
        assert not is_active_on(campaign, date(2026, 2, 1))
        assert not is_active_on(CampaignFactory(status="DRAFT"), AS_OF)
        assert is_active_on(CampaignFactory(end_date=None), date(2030, 1, 1))


class TestResolveFromDatabase:
    def test_resolve_reads_points_and_campaigns(self, db):
        campaign = campaign_with_tiers([(0, 999), (1000, None)], end_date=date(2026, 6, 25))
        _persist(
            db,
            campaign,
            PointEntryFactory(professional_id=9, value=Decimal("400.00"), reference_date=date(2026, 2, 1)),
            PointEntryFactory(professional_id=9, value=Decimal("700.00"), reference_date=date(2026, 5, 1)),
            PointEntryFactory(professional_id=9, value=Decimal("900.00"), reference_date=date(2025, 5, 1)),
        )

        view = resolve(db, 9, as_of=AS_OF)

        assert view.total_points == pytest.approx(1100.0)
        assert view.campaign.id == campaign.id
        assert view.current_tier.min_points == 1000
        assert view.next_tier is None
        assert view.days_remaining == 10

    def test_resolve_without_data(self, db):
        view = resolve(db, 9, as_of=AS_OF)

        assert view.total_points == 0.0
        assert view.campaign is None
        assert view.next_tier is None
        assert view.days_remaining == 0


class TestTierValidation:
    @pytest.mark.parametrize(
        "tiers",
        [
            [{"min_points": 0, "max_points": None}, {"min_points": 100, "max_points": None}],
            [{"min_points": 0, "max_points": None}, {"min_points": 100, "max_points": 200}],
            [{"min_points": 0, "max_points": 100}, {"min_points": 100, "max_points": 200}],
            [{"min_points": 50, "max_points": 10}],
            [{"min_points": -1, "max_points": 10}],
            [{"min_points": 0, "max_points": 10, "prize_value": Decimal("-1")}],
        ],
    )
    def test_invalid_tiers(self, tiers):
        with pytest.raises(HTTPException) as exc:
            campaign_service.validate_tiers(tiers)
        assert exc.value.status_code == 400

    def test_valid_tiers(self):
        campaign_service.validate_tiers(
            [
                {"min_points": 1000, "max_points": None},
                {"min_points": 0, "max_points": 999},
            ]
        )

    def test_invalid_period(self):
        with pytest.raises(HTTPException):
            campaign_service.validate_period(date(2026, 2, 1), date(2026, 1, 31))

    def test_invalid_status(self):
        with pytest.raises(HTTPException):
            campaign_service.validate_status("ARCHIVED")
        assert campaign_service.validate_status("draft") == "DRAFT"


class TestCampaignService:
    def _create(self, db):
        campaign = campaign_service.create_campaign(
            db,
            {
                "title": "Viagem 2026",
                "start_date": date(2026, 1, 1),
                "end_date": date(2026, 12, 31),
                "tiers": [
                    {"min_points": 0, "max_points": 999, "prize_value": Decimal("1000.00")},
                    {"min_points": 1000, "max_points": None, "companion_allowed": True},
                ],
            },
        )
        db.commit()
        db.refresh(campaign)
        return campaign

    def test_create(self, db):
        campaign = self._create(db)

        assert campaign.status == "ACTIVE"
        assert [(t.min_points, t.max_points) for t in campaign.tiers] == [(0, 999), (1000, None)]
        assert campaign.tiers[1].companion_allowed is True

    def test_update_syncs_tiers(self, db):
        campaign = self._create(db)
        low, high = campaign.tiers

        campaign_service.update_campaign(
            db,
            campaign.id,
            {
                "title": "Viagem 2026 (revista)",
                "tiers": [
                    {"id": low.id, "min_points": 0, "max_points": 1499},
                    {"min_points": 1500, "max_points": None},
                ],
            },
        )
        db.commit()
        db.expire_all()

        campaign = campaign_service.get_campaign(db, campaign.id)
        assert campaign.title == "Viagem 2026 (revista)"
        assert [(t.min_points, t.max_points) for t in campaign.tiers] == [(0, 1499), (1500, None)]
        assert campaign.tiers[0].id == low.id
        assert db.query(CampaignTier).filter(CampaignTier.id == high.id).first() is None

    def test_update_without_tiers_keeps_them(self, db):
        campaign = self._create(db)

        campaign_service.update_campaign(db, campaign.id, {"end_date": date(2026, 11, 30)})
        db.commit()
        db.expire_all()

        campaign = campaign_service.get_campaign(db, campaign.id)
        assert campaign.end_date == date(2026, 11, 30)
        assert len(campaign.tiers) == 2

    @pytest.mark.parametrize("field", ["title", "start_date"])
    def test_update_rejects_null_required_field(self, db, field):
        campaign = self._create(db)

        with pytest.raises(HTTPException) as exc:
            campaign_service.update_campaign(db, campaign.id, {field: None})
        assert exc.value.status_code == 400
        assert campaign.title == "Viagem 2026"
        assert campaign.start_date == date(2026, 1, 1)

    def test_status_and_prize(self, db):
        campaign = self._create(db)

        campaign_service.set_status(db, campaign.id, "inactive")
        tier = campaign_service.update_tier_prize(db, campaign.tiers[0].id, Decimal("2500.00"))
        db.commit()

        assert campaign.status == "INACTIVE"
        assert tier.prize_value == Decimal("2500.00")
        assert active_campaigns_with_tiers(db, AS_OF) == []

    def test_missing_campaign(self, db):
        with pytest.raises(HTTPException) as exc:
            campaign_service.get_campaign(db, 12345)
        assert exc.value.status_code == 404

    def test_list_filters(self, db):
        self._create(db)
        _persist(db, CampaignFactory(id=None, title="Outra campanha", status="DRAFT"))

        assert [c.title for c in campaign_service.list_campaigns(db, title="viagem")] == ["Viagem 2026"]
        assert [c.title for c in campaign_service.list_campaigns(db, status="draft")] == ["Outra campanha"]
        assert [c.title for c in campaign_service.list_campaigns(db, active_on=AS_OF)] == ["Viagem 2026"]
