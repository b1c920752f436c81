"""FastAPI dependencies resolving collaborators owned by the app lifespan."""

from fastapi import Request

from backend.app.config import Settings
from backend.app.db.repositories import TravelPlanStore
from backend.app.generation.pipeline import ItineraryPipeline
from backend.app.llm.client import GenerationClient


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_pipeline(request: Request) -> ItineraryPipeline:
    """Shared itinerary pipeline."""
    return request.app.state.pipeline


def get_generation_client(request: Request) -> GenerationClient:
    """Shared generation client."""
    return request.app.state.generation_client


def get_plan_store(request: Request) -> TravelPlanStore:
    """Shared travel plan store."""
    return request.app.state.plan_store
