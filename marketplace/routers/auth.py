# marketplace/routers/auth.py
from fastapi import APIRouter, Depends, status

from marketplace.dependencies import get_auth_service
from marketplace.schemas.auth import LoginPayload, MeRead, SignUpPayload
from marketplace.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/sign-up", status_code=status.HTTP_201_CREATED, response_model=MeRead)
async def sign_up(
    payload: SignUpPayload,
    service: AuthService = Depends(get_auth_service),
):
    """
    Create an account.

    Depending on the project's email settings the user may still need to
    confirm the address before a session exists.
    """
    await service.sign_up(payload)
    return MeRead(identity=service.session.current_identity())


@router.post("/sign-in", response_model=MeRead)
async def sign_in(
    payload: LoginPayload,
    service: AuthService = Depends(get_auth_service),
):
    await service.sign_in(payload)
    return MeRead(
        identity=service.session.current_identity(),
        profile=await service.get_profile(),
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(service: AuthService = Depends(get_auth_service)):
    await service.sign_out()
    return None


@router.get("/me", response_model=MeRead)
async def read_me(service: AuthService = Depends(get_auth_service)):
    """
    Return the signed-in identity and profile (both None for guests).
    """
    return MeRead(
        identity=service.session.current_identity(),
        profile=await service.get_profile(),
    )
