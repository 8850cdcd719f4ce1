from fastapi import APIRouter, Body, Depends, status

from moccam.core.deps import AuthorizationService
from moccam.schemas.auth.user import GoogleLogin, LoginUser, RegisterCustomer
from moccam.services.shares.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    schema: RegisterCustomer = Body(),
    auth_service: AuthService = Depends(AuthService),
):
    return await auth_service.register_customer_async(schema)


@router.post("/login", status_code=200)
async def login(
    schema: LoginUser = Body(),
    auth_service: AuthService = Depends(AuthService),
):
    return await auth_service.login_async(schema)


@router.post("/google-login", status_code=200)
async def google_login(
    schema: GoogleLogin = Body(),
    auth_service: AuthService = Depends(AuthService),
):
    return await auth_service.login_google_async(schema)


@router.get("/me")
async def me(
    auth_service: AuthService = Depends(AuthService),
    authorization: AuthorizationService = Depends(AuthorizationService),
):
    user = await authorization.get_current_user()
    return await auth_service.me_async(user)
