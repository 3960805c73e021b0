from fastapi import APIRouter
from app.api.routes import auth_router, todos_router, categories_router, devices_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(todos_router)
api_router.include_router(categories_router)
api_router.include_router(devices_router)
