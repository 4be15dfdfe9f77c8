from typing import List

from fastapi import APIRouter

from lingua_relay.core.deps import RelayDep
from lingua_relay.schemas.rooms import LanguageResponse

router = APIRouter()


@router.get("/languages", response_model=List[LanguageResponse])
async def list_languages(relay: RelayDep):
    return [
        LanguageResponse(code=lang.code, name=lang.name, native=lang.native)
        for lang in relay.directory.languages()
    ]
