# fuse_server/services/store.py
"""Entity Store: persistence and relationship hydration.

Every read returns a fully hydrated representation built by further store
calls, so a failure at any depth fails the whole call.

Hydration depth
---------------
``depth`` counts how many downward collections (user -> channels,
channel -> videos) may still be expanded; it is clamped to
``MAX_HYDRATION_DEPTH``. Upward references (channel -> owner,
video -> channel, iteration -> video) are always hydrated, and always at
depth 0, so a video shows its channel and that channel's owner but never the
owner's channel list. A video's iterations and editors are always present;
iterations nested in a video carry ``video_id`` only.
"""
import logging
from typing import Annotated, Any, Dict, Iterable, List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from fuse_server.core.database import SessionDep
from fuse_server.core.errors import InternalError, InvalidError, NotFoundError
from fuse_server.models.base import utcnow
from fuse_server.models.channel import Channel
from fuse_server.models.editor import Editor
from fuse_server.models.iteration import Iteration
from fuse_server.models.user import User
from fuse_server.models.video import Video, VideoEditorLink
from fuse_server.schemas.read import ChannelRead, EditorRead, IterationRead, UserRead, VideoRead

logger = logging.getLogger(__name__)

MAX_HYDRATION_DEPTH = 1


def clamp_depth(depth: int) -> int:
    return max(0, min(depth, MAX_HYDRATION_DEPTH))


class EntityStore:
    def __init__(self, session: Session):
        self.session = session

    # --- Helpers ---

    def _row(self, model, entity_id: str, label: str):
        row = self.session.get(model, entity_id) if entity_id else None
        if row is None:
            raise NotFoundError(f"{label} not found")
        return row

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Integrity error on commit: {e.orig}")
            raise InvalidError("Request conflicts with existing data") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error on commit: {e}", exc_info=True)
            raise InternalError("Database error") from e

    def _apply(self, row, changes: Dict[str, Any]) -> None:
        for key, value in changes.items():
            setattr(row, key, value)
        row.updated_at = utcnow()
        self.session.add(row)

    def _delete(self, row) -> None:
        self.session.delete(row)
        self._commit()

    # --- Users ---

    def get_user(self, user_id: str, depth: int = 0) -> UserRead:
        return self._hydrate_user(self._row(User, user_id, "User"), depth)

    def find_user_by_email(self, email: str) -> Optional[User]:
        """Returns the raw row, password hash included, for login checks."""
        return self.session.exec(select(User).where(User.email == email)).first()

    def list_users(self, depth: int = 0) -> List[UserRead]:
        rows = self.session.exec(select(User).order_by(User.created_at)).all()
        return [self._hydrate_user(row, depth) for row in rows]

    def create_user(self, values: Dict[str, Any]) -> UserRead:
        user = User(**values)
        self.session.add(user)
        self._commit()
        logger.info(f"Created user {user.id}")
        return self.get_user(user.id)

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> UserRead:
        self._apply(self._row(User, user_id, "User"), changes)
        self._commit()
        return self.get_user(user_id)

    def delete_user(self, user_id: str) -> None:
        """Removes the user row only; owned channels are the caller's job."""
        self._delete(self._row(User, user_id, "User"))
        logger.info(f"Deleted user {user_id}")

    def _hydrate_user(self, row: User, depth: int) -> UserRead:
        depth = clamp_depth(depth)
        channels = self.list_channels(owner_id=row.id, depth=depth - 1) if depth > 0 else []
        return UserRead.model_validate({**row.model_dump(), "channels": channels})

    # --- Channels ---

    def get_channel(self, channel_id: str, depth: int = 0) -> ChannelRead:
        return self._hydrate_channel(self._row(Channel, channel_id, "Channel"), depth)

    def list_channels(self, owner_id: Optional[str] = None, depth: int = 0) -> List[ChannelRead]:
        statement = select(Channel)
        if owner_id is not None:
            statement = statement.where(Channel.owner_id == owner_id)
        rows = self.session.exec(statement.order_by(Channel.created_at)).all()
        return [self._hydrate_channel(row, depth) for row in rows]

    def create_channel(self, owner_id: str, values: Dict[str, Any]) -> ChannelRead:
        self._row(User, owner_id, "Owner")
        channel = Channel(owner_id=owner_id, **values)
        self.session.add(channel)
        self._commit()
        logger.info(f"Created channel {channel.id} for owner {owner_id}")
        return self.get_channel(channel.id)

    def update_channel(self, channel_id: str, changes: Dict[str, Any]) -> ChannelRead:
        self._apply(self._row(Channel, channel_id, "Channel"), changes)
        self._commit()
        return self.get_channel(channel_id)

    def delete_channel(self, channel_id: str) -> None:
        self._delete(self._row(Channel, channel_id, "Channel"))
        logger.info(f"Deleted channel {channel_id}")

    def _hydrate_channel(self, row: Channel, depth: int) -> ChannelRead:
        depth = clamp_depth(depth)
        owner = self.get_user(row.owner_id)
        videos = self.list_videos(channel_id=row.id, depth=depth - 1) if depth > 0 else []
        return ChannelRead.model_validate({**row.model_dump(), "owner": owner, "videos": videos})

    # --- Videos ---

    def get_video(self, video_id: str, depth: int = 0) -> VideoRead:
        return self._hydrate_video(self._row(Video, video_id, "Video"), depth)

    def list_videos(
        self, channel_id: Optional[str] = None, owner_id: Optional[str] = None, depth: int = 0
    ) -> List[VideoRead]:
        statement = select(Video)
        if channel_id is not None:
            statement = statement.where(Video.channel_id == channel_id)
        if owner_id is not None:
            statement = statement.join(Channel, Channel.id == Video.channel_id).where(
                Channel.owner_id == owner_id
            )
        rows = self.session.exec(statement.order_by(Video.created_at)).all()
        return [self._hydrate_video(row, depth) for row in rows]

    def create_video(
        self, channel_id: str, values: Dict[str, Any], editor_ids: Iterable[str] = ()
    ) -> VideoRead:
        self._row(Channel, channel_id, "Channel")
        video = Video(channel_id=channel_id, **values)
        self.session.add(video)
        self.session.flush()
        for editor_id in dict.fromkeys(editor_ids):
            self._row(Editor, editor_id, "Editor")
            self.session.add(VideoEditorLink(video_id=video.id, editor_id=editor_id))
        self._commit()
        logger.info(f"Created video {video.id} in channel {channel_id}")
        return self.get_video(video.id)

    def update_video(
        self, video_id: str, changes: Dict[str, Any], editor_ids: Iterable[str] = ()
    ) -> VideoRead:
        """Merges ``changes`` and adds editors that are not associated yet.

        Editors missing from ``editor_ids`` stay associated.
        """
        self._apply(self._row(Video, video_id, "Video"), changes)
        current = set(
            self.session.exec(
                select(VideoEditorLink.editor_id).where(VideoEditorLink.video_id == video_id)
            ).all()
        )
        for editor_id in editor_ids:
            if editor_id in current:
                continue
            self._row(Editor, editor_id, "Editor")
            self.session.add(VideoEditorLink(video_id=video_id, editor_id=editor_id))
            current.add(editor_id)
        self._commit()
        return self.get_video(video_id)

    def delete_video(self, video_id: str) -> None:
        video = self._row(Video, video_id, "Video")
        links = self.session.exec(
            select(VideoEditorLink).where(VideoEditorLink.video_id == video_id)
        ).all()
        for link in links:
            self.session.delete(link)
        self.session.flush()
        self._delete(video)
        logger.info(f"Deleted video {video_id}")

    def _hydrate_video(self, row: Video, depth: int) -> VideoRead:
        # Videos have no depth-dependent collections; the channel is an
        # upward reference and is always hydrated at depth 0
        channel = self.get_channel(row.channel_id)
        iterations = self.list_iterations(video_id=row.id)
        editors = self.list_editors(video_id=row.id)
        return VideoRead.model_validate(
            {**row.model_dump(), "channel": channel, "iterations": iterations, "editors": editors}
        )

    # --- Iterations ---

    def get_iteration(self, iteration_id: str) -> IterationRead:
        return self._hydrate_iteration(self._row(Iteration, iteration_id, "Iteration"), with_video=True)

    def list_iterations(self, video_id: Optional[str] = None, with_video: bool = False) -> List[IterationRead]:
        statement = select(Iteration)
        if video_id is not None:
            statement = statement.where(Iteration.video_id == video_id)
        rows = self.session.exec(statement.order_by(Iteration.created_at)).all()
        return [self._hydrate_iteration(row, with_video) for row in rows]

    def create_iteration(self, video_id: str, values: Dict[str, Any]) -> IterationRead:
        self._row(Video, video_id, "Video")
        iteration = Iteration(video_id=video_id, **values)
        self.session.add(iteration)
        self._commit()
        logger.info(f"Created iteration {iteration.id} for video {video_id}")
        return self.get_iteration(iteration.id)

    def update_iteration(self, iteration_id: str, changes: Dict[str, Any]) -> IterationRead:
        iteration = self._row(Iteration, iteration_id, "Iteration")
        if "video_id" in changes:
            self._row(Video, changes["video_id"], "Video")
        self._apply(iteration, changes)
        self._commit()
        return self.get_iteration(iteration_id)

    def add_note(self, iteration_id: str, content: str) -> IterationRead:
        iteration = self._row(Iteration, iteration_id, "Iteration")
        notes = f"{iteration.notes}\n{content}" if iteration.notes else content
        self._apply(iteration, {"notes": notes})
        self._commit()
        return self.get_iteration(iteration_id)

    def delete_iteration(self, iteration_id: str) -> None:
        self._delete(self._row(Iteration, iteration_id, "Iteration"))
        logger.info(f"Deleted iteration {iteration_id}")

    def _hydrate_iteration(self, row: Iteration, with_video: bool) -> IterationRead:
        video = self.get_video(row.video_id) if with_video else None
        return IterationRead.model_validate({**row.model_dump(), "video": video})

    # --- Editors ---

    def get_editor(self, editor_id: str) -> EditorRead:
        return EditorRead.model_validate(self._row(Editor, editor_id, "Editor").model_dump())

    def list_editors(self, video_id: Optional[str] = None) -> List[EditorRead]:
        statement = select(Editor)
        if video_id is not None:
            statement = statement.join(VideoEditorLink, VideoEditorLink.editor_id == Editor.id).where(
                VideoEditorLink.video_id == video_id
            )
        rows = self.session.exec(statement.order_by(Editor.created_at)).all()
        return [EditorRead.model_validate(row.model_dump()) for row in rows]

    def create_editor(self, values: Dict[str, Any]) -> EditorRead:
        editor = Editor(**values)
        self.session.add(editor)
        self._commit()
        logger.info(f"Created editor {editor.id}")
        return self.get_editor(editor.id)

    def update_editor(self, editor_id: str, changes: Dict[str, Any]) -> EditorRead:
        self._apply(self._row(Editor, editor_id, "Editor"), changes)
        self._commit()
        return self.get_editor(editor_id)

    def delete_editor(self, editor_id: str) -> None:
        editor = self._row(Editor, editor_id, "Editor")
        links = self.session.exec(
            select(VideoEditorLink).where(VideoEditorLink.editor_id == editor_id)
        ).all()
        for link in links:
            self.session.delete(link)
        self.session.flush()
        self._delete(editor)
        logger.info(f"Deleted editor {editor_id}")


def get_store(session: SessionDep) -> EntityStore:
    return EntityStore(session)


StoreDep = Annotated[EntityStore, Depends(get_store)]
