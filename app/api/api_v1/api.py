from fastapi import APIRouter
from app.api.api_v1.endpoints import (
    auth, studios, artists, availability, bookings, reviews,
    messages, contact, dashboard, admin, uploads
)

router = APIRouter()

# Include all routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(studios.router, prefix="/studios", tags=["Studios"])
router.include_router(artists.router, prefix="/artists", tags=["Artists"])
router.include_router(availability.router, prefix="/availability", tags=["Availability"])
router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
router.include_router(messages.router, prefix="/messages", tags=["Messages"])
router.include_router(contact.router, prefix="/contact", tags=["Contact"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(admin.router, prefix="/admin", tags=["Admin"])
router.include_router(uploads.router, prefix="/uploads", tags=["Uploads"])
