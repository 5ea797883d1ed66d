# lootbox/handlers/router.py
from aiogram import Router

from lootbox.handlers.admin.router import router as admin_router
from lootbox.handlers.user.router import router as user_router
from lootbox.handlers.common import router as common_router

router = Router()

router.include_router(admin_router)   # admin commands first
router.include_router(user_router)
router.include_router(common_router)
