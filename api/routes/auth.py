"""Login / logout endpoints backed by the login webhook."""

import asyncio

from fastapi import APIRouter, Depends, HTTPException

from api.models import AuthStatusOut, LoginIn
from api.services import get_auth
from dashboard.auth import AuthService
from dashboard.errors import AuthConnectionError, InvalidCredentialsError, MissingCredentialsError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=AuthStatusOut, summary="Log in")
async def login(body: LoginIn, auth: AuthService = Depends(get_auth)) -> AuthStatusOut:
    """Check credentials against the login webhook and set the auth flag.

    Returns 400 for empty fields, 401 for rejected credentials and 502 when
    the webhook cannot be reached.
    """
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, auth.login, body.username, body.password)
    except MissingCredentialsError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=401, detail=str(exc))
    except AuthConnectionError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return AuthStatusOut(authenticated=True)


@router.post("/logout", response_model=AuthStatusOut, summary="Log out")
def logout(auth: AuthService = Depends(get_auth)) -> AuthStatusOut:
    auth.logout()
    return AuthStatusOut(authenticated=False)


@router.get("/status", response_model=AuthStatusOut, summary="Authentication status")
def status(auth: AuthService = Depends(get_auth)) -> AuthStatusOut:
    return AuthStatusOut(authenticated=auth.is_authenticated())
