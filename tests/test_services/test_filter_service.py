"""Tests for filter service — predicates, price buckets, sorting, share grouping."""
import pytest
from pydantic import ValidationError
from fastapi.datastructures import QueryParams

from app.schemas.filter_schema import FilterCriteria
from app.services.filter_service import (
    INDEPENDENT,
    PRICE_BUCKETS,
    apply_filters,
    criteria_from_query,
    group_share_listings,
    parse_price_range,
    sort_listings,
)
from tests.factories import make_listing


def titles(listings):
    return [l.title for l in listings]


class TestParsePriceRange:
    def test_known_bucket(self):
        assert parse_price_range("50L-1Cr") == (5_000_000, 10_000_000)

    def test_open_ended_bucket(self):
        assert parse_price_range("5Cr+") == (50_000_000, None)

    def test_unknown_bucket(self):
        assert parse_price_range("cheap") == (0, None)

    def test_none(self):
        assert parse_price_range(None) == (0, None)


class TestPriceFilter:
    listings = [
        make_listing("A", price=4_999_999),
        make_listing("B", price=5_000_000),
        make_listing("C", price=9_999_999),
        make_listing("D", price=10_000_000),
    ]

    def test_bucket_lower_bound_inclusive_upper_exclusive(self):
        result = apply_filters(self.listings, FilterCriteria(price_range="50L-1Cr"))
        assert sorted(titles(result)) == ["B", "C"]

    def test_adjacent_buckets_do_not_overlap(self):
        low = apply_filters(self.listings, FilterCriteria(price_range="0-50L"))
        high = apply_filters(self.listings, FilterCriteria(price_range="1-2Cr"))
        assert titles(low) == ["A"]
        assert titles(high) == ["D"]

    def test_unknown_bucket_keeps_everything(self):
        result = apply_filters(self.listings, FilterCriteria(price_range="bogus"))
        assert len(result) == 4

    def test_min_max_inclusive(self):
        result = apply_filters(self.listings, FilterCriteria(price_min=5_000_000, price_max=10_000_000))
        assert sorted(titles(result)) == ["B", "C", "D"]

    def test_range_wins_over_min_max(self):
        criteria = FilterCriteria(price_range="0-50L", price_min=10_000_000)
        assert titles(apply_filters(self.listings, criteria)) == ["A"]


class TestCroreBoundaries:
    listings = [
        make_listing("below-2Cr", price=19_999_999),
        make_listing("at-2Cr", price=20_000_000),
        make_listing("below-5Cr", price=49_999_999),
        make_listing("at-5Cr", price=50_000_000),
    ]

    def test_two_crore_starts_the_2_5cr_bucket(self):
        assert titles(apply_filters(self.listings, FilterCriteria(price_range="1-2Cr"))) == ["below-2Cr"]
        result = apply_filters(self.listings, FilterCriteria(price_range="2-5Cr"))
        assert sorted(titles(result)) == ["at-2Cr", "below-5Cr"]

    def test_five_crore_starts_the_open_bucket(self):
        assert titles(apply_filters(self.listings, FilterCriteria(price_range="5Cr+"))) == ["at-5Cr"]

    def test_every_listing_lands_in_exactly_one_bucket(self):
        for listing in self.listings:
            hits = [
                key for key in PRICE_BUCKETS
                if apply_filters([listing], FilterCriteria(price_range=key))
            ]
            assert len(hits) == 1, (listing.title, hits)


class TestCommunities:
    listings = [
        make_listing("Alpha flat", project_name="Alpha"),
        make_listing("Beta flat", project_name="Beta"),
        make_listing("Standalone", project_name=None),
    ]

    def test_single_project(self):
        result = apply_filters(self.listings, FilterCriteria(communities=["Alpha"]))
        assert titles(result) == ["Alpha flat"]

    def test_independent_only(self):
        result = apply_filters(self.listings, FilterCriteria(communities=[INDEPENDENT]))
        assert titles(result) == ["Standalone"]

    def test_independent_is_or_with_projects(self):
        result = apply_filters(self.listings, FilterCriteria(communities=["Alpha", INDEPENDENT]))
        assert sorted(titles(result)) == ["Alpha flat", "Standalone"]

    def test_project_match_is_case_insensitive(self):
        result = apply_filters(self.listings, FilterCriteria(communities=["beta"]))
        assert titles(result) == ["Beta flat"]


class TestPredicates:
    def test_empty_criteria_keeps_everything(self):
        listings = [make_listing("A"), make_listing("B")]
        assert len(apply_filters(listings, FilterCriteria())) == 2

    def test_search_matches_title_description_location(self):
        listings = [
            make_listing("Lake View", description=""),
            make_listing("Other", description="close to the LAKE"),
            make_listing("Third", location="Lakeside"),
            make_listing("Fourth"),
        ]
        result = apply_filters(listings, FilterCriteria(search_query="Lake"))
        assert sorted(titles(result)) == ["Lake View", "Other", "Third"]

    def test_property_type_all_does_not_filter(self):
        listings = [make_listing("A", property_type="Villa"), make_listing("B", property_type="Apartment")]
        assert len(apply_filters(listings, FilterCriteria(property_type="all"))) == 2

    def test_property_types_list(self):
        listings = [
            make_listing("A", property_type="Villa"),
            make_listing("B", property_type="Apartment"),
            make_listing("C", property_type="Plot"),
        ]
        result = apply_filters(listings, FilterCriteria(property_types=["Villa", "Plot"]))
        assert sorted(titles(result)) == ["A", "C"]

    def test_location_matches_micro_market(self):
        listings = [
            make_listing("A", location="Gachibowli"),
            make_listing("B", location="Hyderabad", micro_market="Kokapet"),
        ]
        result = apply_filters(listings, FilterCriteria(location="kokapet"))
        assert titles(result) == ["B"]

    def test_bedrooms_exact(self):
        listings = [make_listing("A", bedrooms=2), make_listing("B", bedrooms=3)]
        assert titles(apply_filters(listings, FilterCriteria(bedrooms=3))) == ["B"]

    def test_share_flags(self):
        listings = [
            make_listing("Land", landowner_share=True),
            make_listing("Inv", investor_share=True),
            make_listing("Plain"),
        ]
        assert titles(apply_filters(listings, FilterCriteria(landowner_share=True))) == ["Land"]
        assert titles(apply_filters(listings, FilterCriteria(investor_share=True))) == ["Inv"]

    def test_amenities_all_required(self):
        listings = [
            make_listing("Both", amenities=["Swimming Pool", "Gym"]),
            make_listing("Pool", amenities=["Swimming Pool"]),
        ]
        result = apply_filters(listings, FilterCriteria(amenities=["pool", "gym"]))
        assert titles(result) == ["Both"]

    def test_filtering_is_idempotent(self):
        listings = [make_listing(f"L{i}", price=i * 3_000_000, project_name="Alpha" if i % 2 else None) for i in range(6)]
        criteria = FilterCriteria(price_range="1-2Cr", communities=["Alpha", INDEPENDENT])
        once = apply_filters(listings, criteria)
        assert apply_filters(once, criteria) == once

    def test_input_is_not_mutated(self):
        listings = [make_listing("B", price=2), make_listing("A", price=1)]
        apply_filters(listings, FilterCriteria(sort_by="price_asc"))
        assert titles(listings) == ["B", "A"]


class TestSortListings:
    def test_default_featured_then_newest(self):
        listings = [
            make_listing("old", created_days_ago=30),
            make_listing("featured-old", created_days_ago=40, is_featured=True),
            make_listing("new", created_days_ago=1),
        ]
        assert titles(sort_listings(listings, None)) == ["featured-old", "new", "old"]

    def test_unknown_key_uses_default(self):
        listings = [make_listing("old", created_days_ago=5), make_listing("new", created_days_ago=1)]
        assert titles(sort_listings(listings, "random")) == ["new", "old"]

    def test_price_asc_is_stable(self):
        listings = [make_listing("first", price=10), make_listing("second", price=10), make_listing("cheap", price=1)]
        assert titles(sort_listings(listings, "price_asc")) == ["cheap", "first", "second"]

    def test_price_desc(self):
        listings = [make_listing("a", price=1), make_listing("b", price=3), make_listing("c", price=2)]
        assert titles(sort_listings(listings, "price_desc")) == ["b", "c", "a"]

    def test_newest_with_missing_created_at_last(self):
        listings = [make_listing("none", created_at=None), make_listing("dated", created_days_ago=3)]
        assert titles(sort_listings(listings, "newest")) == ["dated", "none"]


class TestGroupShareListings:
    def test_groups_sorted_with_independent(self):
        listings = [
            make_listing("z1", project_name="Zenith", landowner_share=True),
            make_listing("solo", project_name=None, investor_share=True),
            make_listing("a1", project_name="Alpha", landowner_share=True),
            make_listing("a2", project_name="Alpha", investor_share=True),
            make_listing("not-share", project_name="Alpha"),
        ]
        groups = group_share_listings(listings)
        assert list(groups) == ["Alpha", INDEPENDENT, "Zenith"]
        assert titles(groups["Alpha"]) == ["a1", "a2"]
        assert titles(groups[INDEPENDENT]) == ["solo"]

    def test_no_share_listings(self):
        assert group_share_listings([make_listing("plain")]) == {}


class TestCriteriaFromQuery:
    def test_full_mapping(self):
        criteria = criteria_from_query({
            "search": "lake",
            "propertyType": "Villa",
            "bedrooms": "3",
            "priceRange": "1-2Cr",
            "communities": "Alpha, Independent",
            "microMarket": "Kokapet",
            "landownerShare": "true",
            "investorShare": "false",
            "sortBy": "price_desc",
        })
        assert criteria.search_query == "lake"
        assert criteria.property_type == "Villa"
        assert criteria.property_types == []
        assert criteria.bedrooms == 3
        assert criteria.price_range == "1-2Cr"
        assert criteria.communities == ["Alpha", "Independent"]
        assert criteria.micro_markets == ["Kokapet"]
        assert criteria.landowner_share is True
        assert criteria.investor_share is None
        assert criteria.sort_by == "price_desc"

    def test_property_type_list(self):
        criteria = criteria_from_query({"propertyType": "Villa,Plot"})
        assert criteria.property_type is None
        assert criteria.property_types == ["Villa", "Plot"]

    def test_junk_numbers_are_ignored(self):
        criteria = criteria_from_query({"bedrooms": "many", "priceMin": "-5"})
        assert criteria.bedrooms is None
        assert criteria.price_min is None

    def test_repeated_keys_are_merged(self):
        criteria = criteria_from_query(QueryParams("communities=Alpha&communities=Beta,Gamma"))
        assert criteria.communities == ["Alpha", "Beta", "Gamma"]

    def test_repeated_amenities_and_property_types(self):
        params = QueryParams("amenities=Gym&amenities=Swimming%20Pool&propertyType=Villa&propertyType=Plot")
        criteria = criteria_from_query(params)
        assert criteria.amenities == ["Gym", "Swimming Pool"]
        assert criteria.property_types == ["Villa", "Plot"]

    def test_repeated_alias_key(self):
        criteria = criteria_from_query(QueryParams("microMarket=Kokapet&microMarket=Narsingi"))
        assert criteria.micro_markets == ["Kokapet", "Narsingi"]

    def test_empty_query(self):
        assert criteria_from_query({}) == FilterCriteria()


class TestFilterCriteria:
    def test_is_immutable(self):
        criteria = FilterCriteria(bedrooms=2)
        with pytest.raises(ValidationError):
            criteria.bedrooms = 3

    def test_negative_bedrooms_rejected(self):
        with pytest.raises(ValidationError):
            FilterCriteria(bedrooms=-1)
