from fastapi import APIRouter

from .features.attendance.router import router as attendance_router
from .features.create_guest.router import router as create_guest_router
from .features.family.router import router as family_router
from .features.get_guest_info.router import router as get_guest_info_router
from .features.progress.router import router as progress_router
from .features.rsvp_token.router import router as rsvp_token_router
from .features.submit_stage1.router import router as submit_stage1_router
from .features.submit_stage2.router import router as submit_stage2_router

router = APIRouter()

router.include_router(get_guest_info_router)
router.include_router(submit_stage1_router)
router.include_router(submit_stage2_router)
router.include_router(create_guest_router)
router.include_router(rsvp_token_router)
router.include_router(family_router)
router.include_router(attendance_router)
router.include_router(progress_router)
