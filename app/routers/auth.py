from fastapi import APIRouter, Depends, status
from typing import List, Optional
from app.api.deps import get_account_service, get_bearer_token, get_token_claims
from app.core.exceptions import UnauthenticatedError
from app.schemas.user import (
    UserCreate, UserLogin, PasswordResetRequest, UserResponse, UserSummary,
    RegisterResponse, LoginResponse, ProfileResponse, MessageResponse,
)
from app.services.accounts import AccountService
from app.utils.auth import TokenClaims

router = APIRouter(prefix="/users", tags=["Accounts"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, accounts: AccountService = Depends(get_account_service)):
    user = accounts.register(user_data)
    return RegisterResponse(user=UserResponse.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(credentials: UserLogin, accounts: AccountService = Depends(get_account_service)):
    token, user, expires_at = accounts.login(credentials.mobile, credentials.password)
    return LoginResponse(
        token=token,
        user=UserResponse.model_validate(user),
        expires_at=expires_at,
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: Optional[str] = Depends(get_bearer_token),
    accounts: AccountService = Depends(get_account_service),
):
    """Checks the token itself instead of going through the request gate."""
    if not token:
        raise UnauthenticatedError("Unauthorized")
    accounts.logout(token)
    return MessageResponse(message="Logout successful")


@router.get("/profile", response_model=ProfileResponse)
def get_profile(
    claims: TokenClaims = Depends(get_token_claims),
    accounts: AccountService = Depends(get_account_service),
):
    user = accounts.get_profile(claims.user_id)
    return ProfileResponse(user=UserResponse.model_validate(user))


@router.delete("/delete-account", response_model=MessageResponse)
def delete_account(
    claims: TokenClaims = Depends(get_token_claims),
    accounts: AccountService = Depends(get_account_service),
):
    accounts.delete_account(claims.user_id)
    return MessageResponse(message="Account deleted successfully")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(request: PasswordResetRequest, accounts: AccountService = Depends(get_account_service)):
    """
    Set a new password for a mobile number.
    The client must already have verified the number with the OTP provider.
    """
    accounts.reset_password(request.mobile, request.new_password)
    return MessageResponse(message="Password updated successfully")


@router.get("/all-users", response_model=List[UserSummary])
def list_users(accounts: AccountService = Depends(get_account_service)):
    return accounts.list_users_summary()
