import pytest

from app.schemas.review import ReviewCreate
from app.services.review_service import create_review, delete_review, get_studio_reviews
from conftest import make_studio


@pytest.fixture
def studio(fake_db):
    studio = make_studio(rating=0, reviewCount=0)
    fake_db.studios.add(**studio)
    return studio


def completed_booking(fake_db, studio, customer_id, status="completed"):
    booking = fake_db.bookings.add(
        studioId=studio["id"], artistId="artist-1", customerId=customer_id,
        date="2024-11-25", time="10:00", status=status,
    )
    return str(booking["_id"])


@pytest.mark.asyncio
async def test_reviews_recompute_studio_rating(fake_db, studio):
    first = completed_booking(fake_db, studio, "customer-1")
    second = completed_booking(fake_db, studio, "customer-2")

    await create_review(ReviewCreate(bookingId=first, rating=5, comment="Clean lines"), "customer-1")
    review = await create_review(ReviewCreate(bookingId=second, rating=4, comment="Friendly"), "customer-2")

    stored = fake_db.studios.documents[studio["_id"]]
    assert stored["rating"] == 4.5
    assert stored["reviewCount"] == 2
    assert review["studioId"] == studio["id"]

    assert await delete_review(review["id"])
    stored = fake_db.studios.documents[studio["_id"]]
    assert stored["rating"] == 5.0
    assert stored["reviewCount"] == 1


@pytest.mark.asyncio
async def test_booking_can_only_be_reviewed_once(fake_db, studio):
    booking_id = completed_booking(fake_db, studio, "customer-1")
    await create_review(ReviewCreate(bookingId=booking_id, rating=5), "customer-1")

    with pytest.raises(ValueError, match="already been reviewed"):
        await create_review(ReviewCreate(bookingId=booking_id, rating=1), "customer-1")
    assert len(fake_db.reviews.documents) == 1


@pytest.mark.asyncio
async def test_only_completed_own_bookings_can_be_reviewed(fake_db, studio):
    pending = completed_booking(fake_db, studio, "customer-1", status="pending")
    done = completed_booking(fake_db, studio, "customer-1")

    with pytest.raises(ValueError):
        await create_review(ReviewCreate(bookingId=pending, rating=5), "customer-1")
    with pytest.raises(PermissionError):
        await create_review(ReviewCreate(bookingId=done, rating=5), "customer-2")
    with pytest.raises(LookupError):
        await create_review(ReviewCreate(bookingId="0" * 24, rating=5), "customer-1")


@pytest.mark.asyncio
async def test_reviews_carry_reviewer_profile(fake_db, studio):
    reviewer = fake_db.users.add(fullName="Robin Reviewer", avatarUrl="/uploads/avatars/r.png")
    booking_id = completed_booking(fake_db, studio, str(reviewer["_id"]))
    other = completed_booking(fake_db, studio, "deleted-account")
    await create_review(ReviewCreate(bookingId=booking_id, rating=5), str(reviewer["_id"]))
    await create_review(ReviewCreate(bookingId=other, rating=3), "deleted-account")

    reviews = {r["customerId"]: r for r in await get_studio_reviews(studio["id"])}

    assert reviews[str(reviewer["_id"])]["userName"] == "Robin Reviewer"
    assert reviews[str(reviewer["_id"])]["userAvatar"] == "/uploads/avatars/r.png"
    assert reviews["deleted-account"]["userName"] == "Anonymous User"
