"""Admin API routes.

Sub-routers, each gated by its own minimum role:
- news: article authoring and publishing (editor)
- seasons: season lifecycle and activation (admin)
- schema: schema version and table listing (admin)

Credentials are checked before schema readiness, so an anonymous caller gets
401 even while the database is unavailable.
"""

from fastapi import APIRouter

from hsc_api.routes.admin.news import router as news_router
from hsc_api.routes.admin.schema import router as schema_router
from hsc_api.routes.admin.seasons import router as seasons_router

router = APIRouter(prefix="/admin", tags=["admin"])

# Include sub-routers
router.include_router(news_router)
router.include_router(seasons_router)
router.include_router(schema_router)
