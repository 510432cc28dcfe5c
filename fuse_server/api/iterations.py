# fuse_server/api/iterations.py
from typing import List, Optional

from fastapi import APIRouter, status

from fuse_server.core.errors import InvalidError
from fuse_server.schemas.read import IterationRead, Message
from fuse_server.schemas.write import IterationPayload, NotePayload
from fuse_server.services.store import StoreDep

router = APIRouter()


@router.get("/", response_model=List[IterationRead])
def list_iterations(store: StoreDep, video_id: Optional[str] = None):
    return store.list_iterations(video_id=video_id, with_video=True)


@router.post("/", response_model=IterationRead, status_code=status.HTTP_201_CREATED)
def create_iteration(payload: IterationPayload, store: StoreDep):
    return store.create_iteration(payload.video_id, payload.merge_patch())


@router.get("/{iteration_id}", response_model=IterationRead)
def get_iteration(iteration_id: str, store: StoreDep):
    return store.get_iteration(iteration_id)


@router.patch("/{iteration_id}", response_model=IterationRead)
def update_iteration(iteration_id: str, payload: IterationPayload, store: StoreDep):
    changes = payload.merge_patch()
    if payload.video_id:
        changes["video_id"] = payload.video_id
    return store.update_iteration(iteration_id, changes)


@router.delete("/{iteration_id}", response_model=Message)
def delete_iteration(iteration_id: str, store: StoreDep):
    store.delete_iteration(iteration_id)
    return Message(message="Iteration deleted successfully")


@router.post("/{iteration_id}/notes", response_model=IterationRead)
def add_note(iteration_id: str, note: NotePayload, store: StoreDep):
    if not note.content.strip():
        raise InvalidError("Note content is required")
    return store.add_note(iteration_id, note.content)
