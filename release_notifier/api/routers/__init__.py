"""API routers.

Each router module defines endpoints for a specific resource:
  - media: media listing, details and tracking (GET/POST /media)
  - websites: supported websites (GET /websites)
  - subscriptions: subscriber subscriptions (/subscribers/{id}/subscriptions)
  - scrape: manual scrape cycle trigger (POST /scrape)
"""

from release_notifier.api.routers.media import router as media_router
from release_notifier.api.routers.scrape import router as scrape_router
from release_notifier.api.routers.subscriptions import router as subscriptions_router
from release_notifier.api.routers.websites import router as websites_router

__all__ = ["media_router", "scrape_router", "subscriptions_router", "websites_router"]
