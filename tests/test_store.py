import pytest

from fuse_server.core.errors import InvalidError, NotFoundError
from fuse_server.services.store import MAX_HYDRATION_DEPTH, clamp_depth


def seed(store):
    user = store.create_user({"email": "owner@studio.io", "username": "owner", "hashed_password": "x"})
    channel = store.create_channel(user.id, {"name": "Main", "api_key": "key-1"})
    video = store.create_video(channel.id, {"title": "Pilot", "status": "draft"})
    return user, channel, video


def test_clamp_depth():
    assert clamp_depth(-3) == 0
    assert clamp_depth(0) == 0
    assert clamp_depth(7) == MAX_HYDRATION_DEPTH


def test_user_depth_zero_has_no_channels(store):
    user, channel, _ = seed(store)

    assert store.get_user(user.id).channels == []


def test_user_depth_one_expands_channels_only_one_level(store):
    user, channel, video = seed(store)

    read = store.get_user(user.id, depth=1)

    assert [c.id for c in read.channels] == [channel.id]
    nested = read.channels[0]
    assert nested.videos == []
    assert nested.owner.id == user.id
    assert nested.owner.channels == []


def test_depth_is_capped(store):
    user, _, _ = seed(store)

    assert store.get_user(user.id, depth=5) == store.get_user(user.id, depth=1)


def test_channel_depth_one_lists_videos_with_upward_references(store):
    user, channel, video = seed(store)

    read = store.get_channel(channel.id, depth=1)

    assert [v.id for v in read.videos] == [video.id]
    nested = read.videos[0]
    assert nested.channel.id == channel.id
    assert nested.channel.videos == []
    assert nested.channel.owner.id == user.id
    assert nested.channel.owner.channels == []


def test_video_always_nests_iterations_and_editors(store):
    _, channel, _ = seed(store)
    editor = store.create_editor({"email": "ed@studio.io", "hashed_password": "x"})
    video = store.create_video(channel.id, {"title": "Second"}, [editor.id, editor.id])
    iteration = store.create_iteration(video.id, {"url": "http://cdn.studio.io/v1.mp4"})

    read = store.get_video(video.id)

    assert [e.id for e in read.editors] == [editor.id]
    assert [i.id for i in read.iterations] == [iteration.id]
    assert read.iterations[0].video is None
    assert read.iterations[0].video_id == video.id


def test_iteration_carries_its_video(store):
    _, _, video = seed(store)
    iteration = store.create_iteration(video.id, {"length": "3:20"})

    read = store.get_iteration(iteration.id)

    assert read.video.id == video.id
    assert read.status.value == "processing"


def test_create_with_missing_parent(store):
    with pytest.raises(NotFoundError):
        store.create_channel("no-such-user", {"name": "Orphan"})
    with pytest.raises(NotFoundError):
        store.create_video("no-such-channel", {"title": "Orphan"})
    with pytest.raises(NotFoundError):
        store.create_iteration("no-such-video", {})


def test_create_video_with_unknown_editor(store):
    _, channel, _ = seed(store)

    with pytest.raises(NotFoundError, match="Editor not found"):
        store.create_video(channel.id, {"title": "X"}, ["ghost"])


def test_duplicate_user_email_is_rejected(store):
    seed(store)

    with pytest.raises(InvalidError):
        store.create_user({"email": "owner@studio.io", "hashed_password": "y"})


def test_update_always_stamps_updated_at(store):
    _, channel, _ = seed(store)

    updated = store.update_channel(channel.id, {})

    assert updated.updated_at > channel.updated_at
    assert updated.name == "Main"


def test_update_video_adds_editors_and_never_removes(store):
    _, _, video = seed(store)
    first = store.create_editor({"email": "one@studio.io", "hashed_password": "x"})
    second = store.create_editor({"email": "two@studio.io", "hashed_password": "x"})

    store.update_video(video.id, {}, [first.id])
    read = store.update_video(video.id, {"title": "Renamed"}, [second.id])

    assert {e.id for e in read.editors} == {first.id, second.id}
    assert read.title == "Renamed"
    assert read.status.value == "draft"


def test_add_note_appends(store):
    _, _, video = seed(store)
    iteration = store.create_iteration(video.id, {})

    store.add_note(iteration.id, "trim intro")
    read = store.add_note(iteration.id, "fix audio")

    assert read.notes == "trim intro\nfix audio"


def test_delete_video_drops_editor_links_only(store):
    _, _, video = seed(store)
    editor = store.create_editor({"email": "ed@studio.io", "hashed_password": "x"})
    store.update_video(video.id, {}, [editor.id])

    store.delete_video(video.id)

    with pytest.raises(NotFoundError):
        store.get_video(video.id)
    assert store.get_editor(editor.id).id == editor.id
    assert store.list_editors(video_id=video.id) == []


def test_delete_editor_detaches_from_videos(store):
    _, channel, _ = seed(store)
    editor = store.create_editor({"email": "ed@studio.io", "hashed_password": "x"})
    video = store.create_video(channel.id, {}, [editor.id])

    store.delete_editor(editor.id)

    assert store.get_video(video.id).editors == []


def test_delete_user_with_channels_is_rejected(store):
    user, channel, _ = seed(store)

    with pytest.raises(InvalidError):
        store.delete_user(user.id)

    assert store.get_user(user.id).id == user.id
    assert store.get_channel(channel.id).owner.id == user.id


def test_delete_channel_with_videos_is_rejected(store):
    _, channel, video = seed(store)

    with pytest.raises(InvalidError):
        store.delete_channel(channel.id)

    assert store.get_video(video.id).channel.id == channel.id


def test_delete_video_with_iterations_is_rejected(store):
    _, _, video = seed(store)
    editor = store.create_editor({"email": "ed@studio.io", "hashed_password": "x"})
    store.update_video(video.id, {}, [editor.id])
    iteration = store.create_iteration(video.id, {})

    with pytest.raises(InvalidError):
        store.delete_video(video.id)

    # The link rows removed before the failed delete are rolled back too
    read = store.get_video(video.id)
    assert [e.id for e in read.editors] == [editor.id]
    assert [i.id for i in read.iterations] == [iteration.id]


@pytest.mark.parametrize("method", [
    "delete_user", "delete_channel", "delete_video", "delete_iteration", "delete_editor",
])
def test_delete_missing_entity(store, method):
    with pytest.raises(NotFoundError):
        getattr(store, method)("missing")


def test_list_videos_by_owner(store):
    user, channel, video = seed(store)
    other = store.create_user({"email": "other@studio.io", "hashed_password": "x"})
    other_channel = store.create_channel(other.id, {"name": "Other"})
    store.create_video(other_channel.id, {"title": "Not mine"})

    assert [v.id for v in store.list_videos(owner_id=user.id)] == [video.id]
    assert len(store.list_videos()) == 2
