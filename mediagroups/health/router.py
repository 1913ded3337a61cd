from fastapi import APIRouter, Request

from mediagroups.models import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    return HealthResponse(status="ok", storage=request.app.state.settings.storage_backend)
