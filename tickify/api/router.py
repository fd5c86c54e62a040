from fastapi import APIRouter

from tickify.api.routes.auth import router as auth_router
from tickify.api.routes.export import router as export_router
from tickify.api.routes.migrations import router as migrations_router
from tickify.api.routes.status import router as status_router
from tickify.api.routes.tickets import router as ticket_router
from tickify.api.routes.users import router as user_router

api_router = APIRouter()
api_router.include_router(status_router, tags=["status"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(user_router, tags=["users"])
api_router.include_router(ticket_router, tags=["tickets"])
api_router.include_router(export_router, tags=["export"])
api_router.include_router(migrations_router, tags=["migrations"])
