import pytest

from app.services.studio_service import _unique_slug, build_studio_query
from app.utils.slug import generate_slug


def test_no_filters_lists_verified_studios():
    assert build_studio_query() == {"verified": True}


@pytest.mark.parametrize("value", ["all", "ALL", "", "   "])
def test_all_or_blank_means_no_filter(value):
    assert build_studio_query(style=value, city=value, q=value) == {"verified": True}


def test_name_search_is_escaped_and_case_insensitive():
    query = build_studio_query(q="Ink (and) Iron")
    assert query["name"] == {"$regex": r"Ink\ \(and\)\ Iron", "$options": "i"}


def test_style_matches_with_hyphens_or_spaces():
    query = build_studio_query(style="fine-line")
    assert query["styles"] == {"$regex": r"^fine[\s-]+line$", "$options": "i"}


def test_city_filter():
    query = build_studio_query(city="New York")
    assert query["city"] == {"$regex": r"^New[\s-]+York$", "$options": "i"}


def test_price_bounds():
    assert build_studio_query(min_price=50)["priceMin"] == {"$gte": 50}
    assert build_studio_query(max_price=200)["priceMin"] == {"$lte": 200}
    assert build_studio_query(min_price=50, max_price=200)["priceMin"] == {"$gte": 50, "$lte": 200}


def test_admin_queries_can_include_unverified():
    assert "verified" not in build_studio_query(verified_only=False)


@pytest.mark.parametrize("name, location, expected", [
    ("Black Lotus Tattoo", None, "black-lotus-tattoo"),
    ("Ink & Iron", "Portland, OR", "ink-iron-portland-or"),
    ("  Needle_Point  Studio ", None, "needle-point-studio"),
    ("--Mom's Ink--", None, "moms-ink"),
])
def test_generate_slug(name, location, expected):
    assert generate_slug(name, location) == expected


@pytest.mark.asyncio
async def test_slug_collisions_get_numeric_suffix(fake_db):
    fake_db.studios.add(slug="ink-iron-portland")
    fake_db.studios.add(slug="ink-iron-portland-2")

    assert await _unique_slug("ink-iron-portland") == "ink-iron-portland-3"
    assert await _unique_slug("black-lotus") == "black-lotus"


@pytest.mark.asyncio
async def test_unsluggable_name_falls_back_to_studio(fake_db):
    assert generate_slug("!!!", "$$") == ""
    assert await _unique_slug("") == "studio"

    fake_db.studios.add(slug="studio")
    assert await _unique_slug("") == "studio-2"
