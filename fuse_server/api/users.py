# fuse_server/api/users.py
import logging
from typing import List

from fastapi import APIRouter, status

from fuse_server.api.auth import CurrentUser
from fuse_server.core.errors import ForbiddenError
from fuse_server.schemas.read import Message, UserRead
from fuse_server.schemas.write import UserPayload
from fuse_server.services.store import StoreDep
from fuse_server.services.user import account_changes, delete_account, register_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[UserRead])
def list_users(store: StoreDep):
    return store.list_users()


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserPayload, store: StoreDep):
    return register_user(store, payload)


@router.get("/me", response_model=UserRead)
def read_me(current_user: CurrentUser, store: StoreDep):
    return store.get_user(current_user.id, depth=1)


@router.get("/{user_id}", response_model=UserRead)
def get_user(user_id: str, store: StoreDep):
    return store.get_user(user_id, depth=1)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(user_id: str, payload: UserPayload, current_user: CurrentUser, store: StoreDep):
    if current_user.id != user_id:
        logger.warning(f"User {current_user.id} tried to update account {user_id}")
        raise ForbiddenError("You are not authorized to update this user")
    return store.update_user(user_id, account_changes(payload))


@router.delete("/{user_id}", response_model=Message)
def delete_user(user_id: str, current_user: CurrentUser, store: StoreDep):
    delete_account(store, current_user, user_id)
    return Message(message="User deleted successfully")
