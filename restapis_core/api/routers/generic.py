"""
Router module for generic functionalities
"""

from fastapi import APIRouter


router = APIRouter(tags=["Generic"])


@router.get("/health")
async def verify_running_backend():
    """
    Return 200 OK with an empty object as body to only verify that the service and the middlewares work
    """

    return {}
