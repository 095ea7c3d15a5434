from __future__ import annotations

from typing import List

from fastapi import APIRouter, Response

from app.api.deps import UserServiceDep
from app.schemas.errors import ErrorResponse
from app.schemas.users import UserCreate, UserResponse, UserUpdate
from app.services.user_service import UserService

"""
API Utilisateurs.

Rôle (fonctionnel) :
- Expose le CRUD utilisateurs (création, lecture par id/email/username, liste,
  mise à jour partielle, suppression).
- Aucune règle métier ici : tout est délégué à UserService.
- Toute erreur est convertie en payload standard par les handlers de app.main.
"""

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(payload: UserCreate, service: UserService = UserServiceDep):
    return await service.create(payload)


@router.get("", response_model=List[UserResponse])
async def list_users(service: UserService = UserServiceDep):
    return await service.list_all()


@router.get("/email/{email}", response_model=UserResponse)
async def get_user_by_email(email: str, service: UserService = UserServiceDep):
    return await service.get_by_email(email)


@router.get("/username/{username}", response_model=UserResponse)
async def get_user_by_username(username: str, service: UserService = UserServiceDep):
    return await service.get_by_username(username)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, service: UserService = UserServiceDep):
    return await service.get_by_id(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, payload: UserUpdate, service: UserService = UserServiceDep):
    return await service.update(user_id, payload)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: int, service: UserService = UserServiceDep):
    await service.delete(user_id)
    return Response(status_code=204)
