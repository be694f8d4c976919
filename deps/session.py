from fastapi import HTTPException, Request

from session import Session


def get_session(request: Request) -> Session:
    """
    The one Session owned by this client process (created in the app lifespan).
    """
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Session not started.")
    return session
