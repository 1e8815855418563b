"""Stage vocabulary endpoint for transition menus and badges."""

from fastapi import APIRouter

from backend.app.core.stages import CANONICAL_STAGES, STAGE_DISPLAY
from backend.app.schemas.stage import StageRead

router = APIRouter(prefix="/stages", tags=["stages"])


@router.get("/", response_model=list[StageRead])
async def list_stages():
    return [
        StageRead(
            id=stage.value,
            label=STAGE_DISPLAY[stage].label,
            badge=STAGE_DISPLAY[stage].badge,
            icon=STAGE_DISPLAY[stage].icon,
            icon_color=STAGE_DISPLAY[stage].icon_color,
        )
        for stage in CANONICAL_STAGES
    ]
