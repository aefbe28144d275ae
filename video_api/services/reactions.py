"""Like/dislike state machine for a single (user, video) pair.

A user's reaction to a video is derived from membership in the user's
liked and disliked sets, and the two sets never share a video id.
`transition` returns the next state together with the deltas that keep
the video's like/dislike counters equal to the number of users in each
state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Dict, Optional

from video_api.services.repositories.users_repo import DISLIKED, LIKED


class ReactionState(str, Enum):
    NONE = 'none'
    LIKED = 'liked'
    DISLIKED = 'disliked'


class Reaction(str, Enum):
    LIKE = 'like'
    DISLIKE = 'dislike'


@dataclass(frozen=True)
class Transition:
    before: ReactionState
    after: ReactionState
    like_delta: int = 0
    dislike_delta: int = 0


# (current state, reaction) -> transition; exhaustive over 3 x 2 cases
_TABLE: Dict[tuple[ReactionState, Reaction], Transition] = {
    (ReactionState.LIKED, Reaction.LIKE): Transition(
        ReactionState.LIKED, ReactionState.NONE, like_delta=-1),
    (ReactionState.DISLIKED, Reaction.LIKE): Transition(
        ReactionState.DISLIKED, ReactionState.LIKED,
        like_delta=1, dislike_delta=-1),
    (ReactionState.NONE, Reaction.LIKE): Transition(
        ReactionState.NONE, ReactionState.LIKED, like_delta=1),
    (ReactionState.DISLIKED, Reaction.DISLIKE): Transition(
        ReactionState.DISLIKED, ReactionState.NONE, dislike_delta=-1),
    (ReactionState.LIKED, Reaction.DISLIKE): Transition(
        ReactionState.LIKED, ReactionState.DISLIKED,
        like_delta=-1, dislike_delta=1),
    (ReactionState.NONE, Reaction.DISLIKE): Transition(
        ReactionState.NONE, ReactionState.DISLIKED, dislike_delta=1),
}

# reaction set on the user document that holds each state
SET_FOR_STATE: Dict[ReactionState, Optional[str]] = {
    ReactionState.NONE: None,
    ReactionState.LIKED: LIKED,
    ReactionState.DISLIKED: DISLIKED,
}


def state_of(
        video_id: str,
        liked: Collection[str],
        disliked: Collection[str]) -> ReactionState:
    """Current reaction of a user given their liked/disliked sets."""
    if video_id in liked:
        return ReactionState.LIKED
    if video_id in disliked:
        return ReactionState.DISLIKED
    return ReactionState.NONE


def transition(state: ReactionState, reaction: Reaction) -> Transition:
    return _TABLE[(ReactionState(state), Reaction(reaction))]


def state_guard(video_id: str, state: ReactionState) -> Dict[str, Any]:
    """Mongo filter matching a user document that is in `state`."""
    if state is ReactionState.LIKED:
        return {LIKED: video_id}
    if state is ReactionState.DISLIKED:
        return {DISLIKED: video_id}
    return {LIKED: {'$ne': video_id}, DISLIKED: {'$ne': video_id}}
