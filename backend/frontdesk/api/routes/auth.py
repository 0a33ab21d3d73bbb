"""Staff login routes (local credential check, no tokens)."""

from fastapi import APIRouter, HTTPException, Request, status

from frontdesk.container import Container
from frontdesk.core.rate_limit import limiter
from frontdesk.core.responses import list_response
from frontdesk.schemas.auth import LoginRequest, User, UserCreate

router = APIRouter()


@router.post("/login", response_model=User)
@limiter.limit("10/minute")
def login(request: Request, data: LoginRequest, container: Container):
    user = container.auth.login(data.username, data.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    return user


@router.get("/me", response_model=User)
def current_user(container: Container):
    user = container.auth.current_user()
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return user


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(container: Container):
    container.auth.logout()


@router.get("/users")
def list_users(container: Container):
    return list_response(container.auth.list_users())


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def add_user(data: UserCreate, container: Container):
    return container.auth.add_user(data)
