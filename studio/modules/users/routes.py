from fastapi import APIRouter, Depends, HTTPException, status

from studio.core.dependencies import get_storage
from studio.modules.users.schemas import User, UserCreate, UserUpdate
from studio.storage import Storage

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, storage: Storage = Depends(get_storage)):
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("", response_model=User, status_code=201)
async def create_user(user_data: UserCreate, storage: Storage = Depends(get_storage)):
    return await storage.create_user(user_data)


@router.patch("/{user_id}", response_model=User)
async def update_user(user_id: str, updates: UserUpdate, storage: Storage = Depends(get_storage)):
    user = await storage.update_user(user_id, updates)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, storage: Storage = Depends(get_storage)):
    if not await storage.delete_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return None
