# routers/health.py
from fastapi import APIRouter, Depends

from deps.session import get_session
from session import Session

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health(session: Session = Depends(get_session)):
    return {
        "ok": True,
        "view": session.view.value,
        "phase": session.phase.value,
        "busy": session.busy,
        "problems": len(session.problems),
    }
