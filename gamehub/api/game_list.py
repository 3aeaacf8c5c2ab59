from fastapi import APIRouter

from gamehub.api import speed_sorting


# one sub-router per game template, mounted under its slug
router = APIRouter(prefix="/game/game-list")

router.include_router(speed_sorting.router)
