from fastapi import APIRouter

from momentum.api.routers.data import router as data_router
from momentum.api.routers.milestones import router as milestones_router
from momentum.api.routers.notifications import router as notifications_router
from momentum.api.routers.occurrences import router as occurrences_router
from momentum.api.routers.progress import router as progress_router
from momentum.api.routers.tasks import router as tasks_router
from momentum.api.routers.users import router as users_router


api_router = APIRouter()
api_router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
api_router.include_router(occurrences_router, prefix="/occurrences", tags=["occurrences"])
api_router.include_router(progress_router, prefix="/progress", tags=["progress"])
api_router.include_router(milestones_router, prefix="/milestones", tags=["milestones"])
api_router.include_router(notifications_router, prefix="/notifications", tags=["notifications"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(data_router, prefix="/data", tags=["data"])
