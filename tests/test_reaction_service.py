"""VideosService reaction persistence: guarded set moves and clamps."""

import pytest

from video_api.services.reactions import Reaction
from tests.helpers import new_sub


async def make_user(registration, users_svc):
    sub = new_sub()
    await registration.register(sub)
    return await users_svc.get_current_user(sub)


async def make_video(videos_svc, user) -> str:
    resp = await videos_svc.upload_video(user, b"data", "a.mp4", "video/mp4")
    return resp.video_id


async def test_stale_state_raises_conflict_and_keeps_counters(
        registration, users_svc, videos_svc):
    user = await make_user(registration, users_svc)
    vid = await make_video(videos_svc, user)

    # two requests read the same NONE state; only the first may apply
    await videos_svc.react(user, vid, Reaction.LIKE)
    with pytest.raises(RuntimeError, match="reaction_conflict"):
        await videos_svc.react(user, vid, Reaction.LIKE)

    fresh = await users_svc.get_current_user(user["sub"])
    video = await videos_svc.repo.get_by_id(vid)
    assert fresh["liked_videos"] == [vid]
    assert video["likes"] == 1


async def test_decrement_on_zero_counter_is_clamped(
        registration, users_svc, videos_svc, db):
    user = await make_user(registration, users_svc)
    vid = await make_video(videos_svc, user)
    await videos_svc.react(user, vid, Reaction.LIKE)
    # counter drifted to zero while the user still holds the like
    await db["videos"].update_one({}, {"$set": {"likes": 0}})

    user = await users_svc.get_current_user(user["sub"])
    dto = await videos_svc.react(user, vid, Reaction.DISLIKE)

    assert dto.like_count == 0
    assert dto.dislike_count == 1


async def test_react_on_missing_video_raises_not_found(
        registration, users_svc, videos_svc):
    user = await make_user(registration, users_svc)
    with pytest.raises(RuntimeError, match="video_not_found"):
        await videos_svc.react(user, "0" * 24, Reaction.DISLIKE)
