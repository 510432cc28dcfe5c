# fuse_server/services/user.py
import logging
from typing import Any, Dict

from fuse_server.core.config import Settings
from fuse_server.core.errors import ForbiddenError, InvalidError, UnauthorizedError
from fuse_server.core.security import (create_access_token, dummy_verify,
                                       get_password_hash, verify_password)
from fuse_server.schemas.read import EditorRead, UserRead
from fuse_server.schemas.write import AccountPayload
from fuse_server.services.store import EntityStore

logger = logging.getLogger(__name__)


def account_changes(payload: AccountPayload) -> Dict[str, Any]:
    """Merge-patch of an account payload with the password already hashed."""
    changes = payload.merge_patch()
    if "password" in changes:
        changes["hashed_password"] = get_password_hash(changes.pop("password"))
    return changes


def _new_account_values(payload: AccountPayload) -> Dict[str, Any]:
    if not payload.email or not payload.password:
        raise InvalidError("Email and password are required")
    values = account_changes(payload)
    values.setdefault("username", str(payload.email).split("@")[0])
    return values


def register_user(store: EntityStore, payload: AccountPayload) -> UserRead:
    values = _new_account_values(payload)
    if store.find_user_by_email(values["email"]) is not None:
        raise InvalidError("Email already registered")
    user = store.create_user(values)
    logger.info(f"User {user.id} has registered.")
    return user


def register_editor(store: EntityStore, payload: AccountPayload) -> EditorRead:
    return store.create_editor(_new_account_values(payload))


def authenticate(store: EntityStore, email: str, password: str) -> UserRead:
    """Same failure whether the email is unknown or the password is wrong."""
    if not email or not password:
        raise InvalidError("Invalid login data")
    row = store.find_user_by_email(email)
    if row is None:
        dummy_verify()
        logger.warning(f"Login failed for {email}")
        raise UnauthorizedError("Invalid email or password")
    if not verify_password(password, row.hashed_password):
        logger.warning(f"Login failed for {email}")
        raise UnauthorizedError("Invalid email or password")
    return store.get_user(row.id)


def issue_token(user: UserRead, settings: Settings) -> str:
    token = create_access_token(user.id, settings)
    logger.info(f"Issued access token for user {user.id}")
    return token


def delete_account(store: EntityStore, caller: UserRead, user_id: str) -> None:
    """Deletes every channel of the account, then the account itself.

    Each delete commits on its own. If a channel delete fails the user row is
    kept, but channels deleted before the failure stay deleted.
    """
    if caller.id != user_id:
        logger.warning(f"User {caller.id} tried to delete account {user_id}")
        raise ForbiddenError("You are not authorized to delete this user")

    channels = store.list_channels(owner_id=user_id)
    for channel in channels:
        store.delete_channel(channel.id)
    store.delete_user(user_id)
    logger.info(f"Deleted account {user_id} with {len(channels)} channel(s)")
