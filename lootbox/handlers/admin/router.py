# lootbox/handlers/admin/router.py
from aiogram import Router

from lootbox.handlers.admin.grant import router as grant_router
from lootbox.handlers.admin.settings_admin import router as settings_admin_router
from lootbox.handlers.admin.rescore import router as rescore_router
from lootbox.handlers.admin.dashboard import router as dashboard_router
from lootbox.handlers.admin.roles import router as roles_router

router = Router(name="admin")

router.include_router(grant_router)
router.include_router(settings_admin_router)
router.include_router(rescore_router)
router.include_router(dashboard_router)
router.include_router(roles_router)
