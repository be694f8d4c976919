# routers/catalog.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from deps.session import get_session
from render import render, template_for, templates
from session import Session

router = APIRouter(tags=["catalog"])


def _home() -> RedirectResponse:
    # POST/redirect/GET: a refresh must not re-send a trigger
    return RedirectResponse(url="/", status_code=303)


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, session: Session = Depends(get_session)):
    screen = render(session)
    return templates.TemplateResponse(request, template_for(screen), {"screen": screen})


@router.get("/state")
async def state(session: Session = Depends(get_session)):
    return render(session).model_dump()


@router.post("/problems/{problem_id}/select")
async def select_problem(problem_id: str, session: Session = Depends(get_session)):
    session.select(problem_id)
    return _home()


@router.post("/retry")
async def retry_load(session: Session = Depends(get_session)):
    await session.retry_load()
    return _home()


@router.post("/notice/dismiss")
async def dismiss_notice(session: Session = Depends(get_session)):
    session.dismiss_notice()
    return _home()
