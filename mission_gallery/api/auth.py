"""Login and guest-password management."""

import logging

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette import status

from mission_gallery.dependencies import get_auth_service
from mission_gallery.dependencies import get_metadata_index
from mission_gallery.metadata.index import MetadataIndex
from mission_gallery.services.auth_service import ROLE_GUEST
from mission_gallery.services.auth_service import AuthService


logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""
    role: str = ROLE_GUEST


class PasswordRequest(BaseModel):
    password: str = ""


@router.post("/login")
async def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> JSONResponse:
    result = await auth.login(body.username.strip(), body.password, body.role)
    if result is None:
        return JSONResponse(
            {"success": False, "error": "Invalid credentials"},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return JSONResponse({"success": True, "user": {"username": result.username, "role": result.role}})


@router.get("/users")
async def list_guest_passwords(index: MetadataIndex = Depends(get_metadata_index)) -> JSONResponse:
    return JSONResponse(await index.guest_passwords())


@router.post("/users")
async def add_guest_password(
    body: PasswordRequest,
    index: MetadataIndex = Depends(get_metadata_index),
) -> JSONResponse:
    password = body.password.strip()
    if not password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password is required")

    if not await index.add_guest_password(password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Password already exists")

    logger.info("Guest password added")
    return JSONResponse({"success": True, "message": "Guest password added successfully"})


@router.post("/users/delete")
async def delete_guest_password(
    body: PasswordRequest,
    index: MetadataIndex = Depends(get_metadata_index),
) -> JSONResponse:
    if not await index.remove_guest_password(body.password):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Password not found")

    logger.info("Guest password removed")
    return JSONResponse({"success": True, "message": "Guest password deleted successfully"})
