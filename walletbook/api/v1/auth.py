"""
Authentication routes (login, logout, first-user setup, session)
"""
import logging

from fastapi import APIRouter, Request, Form, Depends
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from walletbook.api.deps import get_db, get_current_user
from walletbook.api.v1.pages import templates
from walletbook.auth import verify_password, get_user_by_email, has_any_user, create_user
from walletbook.infrastructure.db.models import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

MIN_PASSWORD_LENGTH = 8


class SessionResponse(BaseModel):
    user_id: int
    email: str


@router.get("/login", response_class=HTMLResponse)
def login_get(request: Request, db: Session = Depends(get_db)):
    """Login form"""
    return templates.TemplateResponse(
        request, "login.html", {"setup_available": not has_any_user(db)}
    )


@router.post("/login", response_class=HTMLResponse)
def login_post(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    """Login form submit"""
    user = get_user_by_email(db, email)

    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid email or password", "email": email},
            status_code=401,
        )

    request.session["user_id"] = user.id
    return RedirectResponse("/", status_code=302)


@router.get("/logout")
def logout(request: Request):
    request.session.clear()
    return RedirectResponse("/login", status_code=302)


@router.get("/setup", response_class=HTMLResponse)
def setup_get(request: Request, db: Session = Depends(get_db)):
    """First-user form; only available while there are no users"""
    if has_any_user(db):
        return RedirectResponse("/login", status_code=302)
    return templates.TemplateResponse(request, "setup.html", {})


@router.post("/setup", response_class=HTMLResponse)
def setup_post(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    if has_any_user(db):
        return RedirectResponse("/login", status_code=302)

    error = None
    if "@" not in email:
        error = "Please enter a valid email"
    elif len(password) < MIN_PASSWORD_LENGTH:
        error = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    if error:
        return templates.TemplateResponse(
            request, "setup.html", {"error": error, "email": email}, status_code=400
        )

    user = create_user(db, email, password)
    logger.info("Created first user %s", user.email)
    request.session["user_id"] = user.id
    return RedirectResponse("/", status_code=302)


@router.get("/api/v1/auth/session", response_model=SessionResponse)
def current_session(user: User = Depends(get_current_user)):
    return SessionResponse(user_id=user.id, email=user.email)
