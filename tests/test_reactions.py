"""State table of the like/dislike state machine."""

from __future__ import annotations

import pytest

from video_api.services.reactions import (
    Reaction,
    ReactionState,
    state_guard,
    state_of,
    transition,
)

NONE, LIKED, DISLIKED = (ReactionState.NONE, ReactionState.LIKED,
                         ReactionState.DISLIKED)


@pytest.mark.parametrize(
    "state, reaction, after, like_delta, dislike_delta",
    [
        (LIKED, Reaction.LIKE, NONE, -1, 0),
        (DISLIKED, Reaction.LIKE, LIKED, 1, -1),
        (NONE, Reaction.LIKE, LIKED, 1, 0),
        (DISLIKED, Reaction.DISLIKE, NONE, 0, -1),
        (LIKED, Reaction.DISLIKE, DISLIKED, -1, 1),
        (NONE, Reaction.DISLIKE, DISLIKED, 0, 1),
    ],
)
def test_transition_table(state, reaction, after, like_delta,
                          dislike_delta):
    step = transition(state, reaction)
    assert step.before is state
    assert step.after is after
    assert (step.like_delta, step.dislike_delta) == (like_delta,
                                                     dislike_delta)


def test_state_of_reads_set_membership():
    assert state_of("v1", {"v1"}, set()) is LIKED
    assert state_of("v1", set(), {"v1"}) is DISLIKED
    assert state_of("v1", {"v2"}, {"v3"}) is NONE


def test_reacting_twice_returns_to_start():
    for reaction in Reaction:
        first = transition(NONE, reaction)
        second = transition(first.after, reaction)
        assert second.after is NONE
        assert first.like_delta + second.like_delta == 0
        assert first.dislike_delta + second.dislike_delta == 0


def test_string_values_are_accepted():
    assert transition("liked", "dislike").after is DISLIKED


def test_state_guard_for_none_excludes_both_sets():
    assert state_guard("v1", NONE) == {
        "liked_videos": {"$ne": "v1"},
        "disliked_videos": {"$ne": "v1"},
    }
    assert state_guard("v1", LIKED) == {"liked_videos": "v1"}
    assert state_guard("v1", DISLIKED) == {"disliked_videos": "v1"}
