from fastapi import APIRouter

from recruit_api.routes import forms, pipelines, submissions, users

api_router = APIRouter()
api_router.include_router(pipelines.router)
api_router.include_router(forms.router)
api_router.include_router(submissions.router)
api_router.include_router(users.router)

__all__ = ["api_router"]
