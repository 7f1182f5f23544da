# =============================================================================
# app/auth/routes.py - Registration and Login Endpoints
# =============================================================================
# Bare-bones accounts: no tokens or sessions are issued on login.
# =============================================================================

from fastapi import APIRouter, status

from app.dependencies import UserServiceDep
from core.models.user import LoginRequest, MessageResponse, RegisterRequest

router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, users: UserServiceDep):
    """
    Register a new user.

    The password is stored as a bcrypt hash. 400 if the email is already
    registered.
    """
    users.register(request.username, request.email, request.password)
    return MessageResponse(message="User registered successfully!")


@router.post("/login", response_model=MessageResponse)
def login(request: LoginRequest, users: UserServiceDep):
    """
    Check a user's credentials.

    400 if the email is unknown, 401 if the password does not match.
    """
    users.login(request.email, request.password)
    return MessageResponse(message="Login successful!")
