from datetime import date

import pytest

from app.services.dashboard_service import get_dashboard_stats
from conftest import make_studio

TODAY = date(2030, 1, 10)


@pytest.mark.asyncio
async def test_dashboard_stats(fake_db):
    studio = make_studio(rating=4.7, reviewCount=3)
    for customer, day, time, status in [
        ("c1", "2030-01-05", "10:00", "completed"),
        ("c1", "2030-01-12", "11:00", "confirmed"),
        ("c2", "2030-01-11", "09:00", "pending"),
        ("c3", "2030-01-15", "10:00", "cancelled"),
        ("c4", "2030-01-20", "14:00", "completed"),
    ]:
        fake_db.bookings.add(studioId=studio["id"], customerId=customer, date=day, time=time, status=status)
    fake_db.bookings.add(studioId="another-studio", customerId="c9", date="2030-01-11", time="09:00", status="pending")

    stats = await get_dashboard_stats(studio, today=TODAY)

    assert stats["totalBookings"] == 5
    assert stats["bookingsByStatus"] == {"pending": 1, "confirmed": 1, "cancelled": 1, "completed": 2}
    assert stats["activeClients"] == 3
    assert stats["averageRating"] == 4.7
    assert stats["reviewCount"] == 3
    assert [(b["date"], b["status"]) for b in stats["upcomingAppointments"]] == [
        ("2030-01-11", "pending"),
        ("2030-01-12", "confirmed"),
        ("2030-01-20", "completed"),
    ]


@pytest.mark.asyncio
async def test_dashboard_for_new_studio(fake_db):
    stats = await get_dashboard_stats(make_studio(rating=0, reviewCount=0), today=TODAY)

    assert stats["totalBookings"] == 0
    assert stats["activeClients"] == 0
    assert stats["upcomingAppointments"] == []
