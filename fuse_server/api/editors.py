# fuse_server/api/editors.py
from typing import List, Optional

from fastapi import APIRouter, status

from fuse_server.schemas.read import EditorRead, Message
from fuse_server.schemas.write import EditorPayload
from fuse_server.services.store import StoreDep
from fuse_server.services.user import account_changes, register_editor

router = APIRouter()


@router.get("/", response_model=List[EditorRead])
def list_editors(store: StoreDep, video_id: Optional[str] = None):
    return store.list_editors(video_id=video_id)


@router.post("/", response_model=EditorRead, status_code=status.HTTP_201_CREATED)
def create_editor(payload: EditorPayload, store: StoreDep):
    return register_editor(store, payload)


@router.get("/{editor_id}", response_model=EditorRead)
def get_editor(editor_id: str, store: StoreDep):
    return store.get_editor(editor_id)


@router.patch("/{editor_id}", response_model=EditorRead)
def update_editor(editor_id: str, payload: EditorPayload, store: StoreDep):
    return store.update_editor(editor_id, account_changes(payload))


@router.delete("/{editor_id}", response_model=Message)
def delete_editor(editor_id: str, store: StoreDep):
    store.delete_editor(editor_id)
    return Message(message="Editor deleted successfully")
