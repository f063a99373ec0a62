"""
Tests for repository classes.
Covers listing filter composition, favorites persistence and admin lookups.
"""

import pytest
from decimal import Decimal

from realty.models.admin import AdminRole
from realty.models.property import PropertyType, PropertyStatus
from realty.repositories.favorite import FavoriteRepository
from realty.repositories.property import PropertyFilters, build_property_predicates
from tests.conftest import PropertyFactory, AdminFactory


def _titles(properties):
    return [p.title for p in properties]


class TestBuildPropertyPredicates:
    """Filter -> predicate translation, without touching the database."""

    def test_no_filters_no_predicates(self):
        assert build_property_predicates(PropertyFilters()) == []

    def test_one_predicate_per_filter(self):
        filters = PropertyFilters(
            property_type=PropertyType.HOUSE,
            location="cairo",
            min_price=Decimal("1"),
            max_price=Decimal("2"),
            status=PropertyStatus.SOLD
        )
        assert len(build_property_predicates(filters)) == 5

    def test_empty_location_ignored(self):
        assert build_property_predicates(PropertyFilters(location="")) == []

    def test_location_wildcards_escaped(self):
        predicate = build_property_predicates(PropertyFilters(location="50%_off"))[0]
        assert predicate.right.value == "%50\\%\\_off%"
        assert predicate.modifiers["escape"] == "\\"


class TestPropertyRepository:
    """Listing queries against a real database."""

    @pytest.mark.asyncio
    async def test_no_filters_lists_everything_newest_first(self, property_repository, catalogue):
        result = await property_repository.list_properties(PropertyFilters())
        assert _titles(result) == ["Sold farm", "Family house", "Sea-view apartment"]

    @pytest.mark.asyncio
    async def test_max_price_inclusive(self, property_repository, catalogue):
        result = await property_repository.list_properties(
            PropertyFilters(max_price=Decimal("1000000"), status=PropertyStatus.AVAILABLE)
        )
        assert _titles(result) == ["Sea-view apartment"]

        result = await property_repository.list_properties(PropertyFilters(max_price=Decimal("500000")))
        assert "Sea-view apartment" in _titles(result)

    @pytest.mark.asyncio
    async def test_min_price_inclusive(self, property_repository, catalogue):
        result = await property_repository.list_properties(PropertyFilters(min_price=Decimal("2000000")))
        assert _titles(result) == ["Family house"]

    @pytest.mark.asyncio
    async def test_location_case_insensitive_substring(self, property_repository, catalogue):
        result = await property_repository.list_properties(PropertyFilters(location="NORTH"))
        assert sorted(_titles(result)) == ["Sea-view apartment", "Sold farm"]

    @pytest.mark.asyncio
    async def test_location_percent_is_literal(self, property_repository, catalogue):
        await PropertyFactory.create_property(property_repository, title="Promo", location="100% sea view")

        result = await property_repository.list_properties(PropertyFilters(location="0% s"))
        assert _titles(result) == ["Promo"]

        result = await property_repository.list_properties(PropertyFilters(location="%"))
        assert _titles(result) == ["Promo"]

    @pytest.mark.asyncio
    async def test_filters_combine_with_and(self, property_repository, catalogue):
        result = await property_repository.list_properties(
            PropertyFilters(property_type=PropertyType.FARM, location="north", status=PropertyStatus.AVAILABLE)
        )
        assert result == []

        result = await property_repository.list_properties(
            PropertyFilters(property_type=PropertyType.FARM, location="north", status=PropertyStatus.SOLD)
        )
        assert _titles(result) == ["Sold farm"]

    @pytest.mark.asyncio
    async def test_create_property_validates_first(self, property_repository, db_session):
        with pytest.raises(ValueError):
            await PropertyFactory.create_property(property_repository, price=Decimal("-10"))

        result = await property_repository.list_properties(PropertyFilters())
        assert result == []

    @pytest.mark.asyncio
    async def test_update_property_validates_merged_state(self, property_repository):
        prop = await PropertyFactory.create_property(property_repository, bedrooms=3)

        with pytest.raises(ValueError):
            await property_repository.update_property(prop, {"bedrooms": -1})

        updated = await property_repository.update_property(prop, {"title": "Renamed", "bedrooms": None})
        assert updated.title == "Renamed"
        assert updated.bedrooms == 3

    @pytest.mark.asyncio
    async def test_delete_reports_missing(self, property_repository):
        prop = await PropertyFactory.create_property(property_repository)
        property_id = prop.id

        assert await property_repository.delete(property_id) is True
        assert await property_repository.delete(property_id) is False
        assert await property_repository.get_by_id(property_id) is None


class TestFavoriteRepository:
    """Session-scoped favorites persistence."""

    @pytest.mark.asyncio
    async def test_add_pair_is_idempotent(self, db_session, property_repository):
        repo = FavoriteRepository(db_session)
        prop = await PropertyFactory.create_property(property_repository)

        first, created = await repo.add_pair("session-a", prop)
        second, created_again = await repo.add_pair("session-a", prop)

        assert created is True
        assert created_again is False
        assert first.id == second.id
        assert await repo.exists_pair("session-a", prop.id)

    @pytest.mark.asyncio
    async def test_list_for_session_newest_first(self, db_session, property_repository):
        repo = FavoriteRepository(db_session)
        older = await PropertyFactory.create_property(property_repository, title="Older")
        newer = await PropertyFactory.create_property(property_repository, title="Newer")

        await repo.add_pair("session-a", older)
        await repo.add_pair("session-a", newer)
        await repo.add_pair("session-b", older)

        favorites = await repo.list_for_session("session-a")

        assert [f.property.title for f in favorites] == ["Newer", "Older"]
        assert await repo.list_for_session("unknown") == []

    @pytest.mark.asyncio
    async def test_delete_pair(self, db_session, property_repository):
        repo = FavoriteRepository(db_session)
        prop = await PropertyFactory.create_property(property_repository)
        await repo.add_pair("session-a", prop)

        assert await repo.delete_pair("session-a", prop.id) is True
        assert await repo.delete_pair("session-a", prop.id) is False
        assert not await repo.exists_pair("session-a", prop.id)


class TestAdminRepository:
    """Admin account lookups."""

    @pytest.mark.asyncio
    async def test_get_by_email_case_insensitive(self, admin_repository):
        admin = await AdminFactory.create_admin(admin_repository, email="jane@example.com")

        found = await admin_repository.get_by_email("  JANE@example.com ")
        assert found.id == admin.id
        assert await admin_repository.get_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_email_taken_excludes_self(self, admin_repository):
        admin = await AdminFactory.create_admin(admin_repository, email="jane@example.com")

        assert await admin_repository.email_taken("jane@example.com")
        assert not await admin_repository.email_taken("jane@example.com", exclude_id=admin.id)

    @pytest.mark.asyncio
    async def test_list_admins_newest_first(self, admin_repository):
        await AdminFactory.create_admin(admin_repository, email="first@example.com", role=AdminRole.SUPER_ADMIN)
        await AdminFactory.create_admin(admin_repository, email="second@example.com", role=AdminRole.VIEWER)

        admins = await admin_repository.list_admins()
        assert [a.email for a in admins] == ["second@example.com", "first@example.com"]
