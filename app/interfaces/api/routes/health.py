from fastapi import APIRouter, Depends

from app.infrastructure.notifications import RealtimeGateway
from app.interfaces.api.dependencies import get_realtime_gateway
from app.interfaces.api.schemas import HealthRead

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthRead)
async def health(gateway: RealtimeGateway = Depends(get_realtime_gateway)) -> HealthRead:
    return HealthRead(status="ok", online_users=gateway.online_count())
