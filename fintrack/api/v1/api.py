from fastapi import APIRouter

from fintrack.core.auth import fastapi_users, auth_backend, UserRead, UserCreate
from fintrack.api.v1.routes import auth, records, fixed_settings, debt, goals, motivation, dashboard

api_router = APIRouter()

# Custom logout first so it wins over the fastapi-users route of the same path
api_router.include_router(auth.router, prefix="/auth")
api_router.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix="/auth/jwt",
    tags=["Authentication"],
)
api_router.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(records.router)
api_router.include_router(fixed_settings.router)
api_router.include_router(debt.router)
api_router.include_router(goals.router)
api_router.include_router(motivation.router)
api_router.include_router(dashboard.router)
