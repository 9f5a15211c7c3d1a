"""HTTP routers."""

from fastapi import APIRouter

from . import health, interviews, persons

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(persons.router)
api_router.include_router(interviews.router)
