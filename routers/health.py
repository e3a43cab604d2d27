# routers/health.py
from fastapi import APIRouter

from core.config import get_provider

router = APIRouter()

@router.get("/", summary="Health check", tags=["health"])
def root():
    return {"message": "Shipping extraction API is running", "provider": get_provider()}
