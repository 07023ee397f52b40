from fastapi import APIRouter

from app.api.preview.routes import router as preview_router

router = APIRouter()
router.include_router(preview_router)
