from fastapi import APIRouter
from app.api.v1.endpoints import auth, category_limits, customers, leads, finance, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(finance.router, prefix="/finance", tags=["finance"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(category_limits.router, prefix="/category-limits", tags=["category-limits"])
