# lootbox/handlers/user/router.py
from aiogram import Router

from lootbox.handlers.user.spin import router as spin_router
from lootbox.handlers.user.status import router as status_router
from lootbox.handlers.user.collection import router as collection_router
from lootbox.handlers.user.timezone import router as timezone_router
from lootbox.handlers.user.preview import router as preview_router
from lootbox.handlers.user.achievements import router as achievements_router

router = Router(name="user")

router.include_router(spin_router)
router.include_router(status_router)
router.include_router(collection_router)
router.include_router(timezone_router)
router.include_router(preview_router)
router.include_router(achievements_router)
