from fastapi import APIRouter

from lingua_relay.core.deps import ConnectionsDep, RelayDep
from lingua_relay.core.time import to_iso
from lingua_relay.schemas.rooms import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, response_model_by_alias=True)
async def health_check(relay: RelayDep, connections: ConnectionsDep):
    return HealthResponse(
        status="ok",
        timestamp=to_iso(),
        rooms=len(relay.registry),
        connections=len(connections),
    )
