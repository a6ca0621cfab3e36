"""Greeting: static hello message for the frontend."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_app_settings
from app.config import Settings
from app.schemas.item import GreetingResponse

router = APIRouter(prefix="/greeting", tags=["greeting"])


@router.get("", response_model=GreetingResponse)
async def get_greeting(settings: Settings = Depends(get_app_settings)):
    return GreetingResponse(greeting=settings.greeting)
