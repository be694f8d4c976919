# routers/problem.py
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from deps.session import get_session
from session import Session

router = APIRouter(tags=["problem"])


def _home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


@router.post("/answer")
async def update_answer(answer: str = Form(""), session: Session = Depends(get_session)):
    session.set_answer(answer)
    return _home()


@router.post("/submit")
async def submit_answer(
    answer: Optional[str] = Form(None), session: Session = Depends(get_session)
):
    await session.submit(answer)
    return _home()


@router.post("/explain")
async def explain(session: Session = Depends(get_session)):
    await session.request_explanation()
    return _home()


@router.post("/back")
async def back_to_catalog(session: Session = Depends(get_session)):
    await session.return_to_catalog()
    return _home()
