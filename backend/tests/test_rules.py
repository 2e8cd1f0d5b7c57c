import pytest

from arcade.errors import ValidationFailed
from arcade.services.rules import (
    MINE_UNLOCK_THRESHOLDS,
    can_play_mine,
    can_transition,
    difficulty_for_access_code,
    grand_total,
    reveal_outcome,
)


@pytest.mark.parametrize('difficulty', ['easy', 'medium', 'hard'])
def test_mine_unlock_threshold_for_every_score(difficulty):
    threshold = MINE_UNLOCK_THRESHOLDS[difficulty]
    for score in range(0, 9):
        assert can_play_mine(score, difficulty) is (score >= threshold)


def test_thresholds_per_difficulty():
    assert can_play_mine(6, 'easy') and not can_play_mine(5, 'easy')
    assert can_play_mine(5, 'medium') and not can_play_mine(4, 'medium')
    assert can_play_mine(4, 'hard') and not can_play_mine(3, 'hard')


def test_access_codes_map_to_difficulty():
    assert difficulty_for_access_code('EASY123', 'techteammode') == 'easy'
    assert difficulty_for_access_code('MED456', 'techteammode') == 'medium'
    assert difficulty_for_access_code('HARD789', 'techteammode') == 'hard'
    assert difficulty_for_access_code('techteammode', 'techteammode') == 'admin'


def test_unknown_access_code_rejected():
    with pytest.raises(ValidationFailed) as info:
        difficulty_for_access_code('easy123', 'techteammode')
    assert info.value.error_code == 'INVALID_ACCESS_CODE'
    assert info.value.message == 'Invalid access code! Try again.'


def test_reveal_outcomes():
    assert reveal_outcome('mine') == ('hit', 100)
    assert reveal_outcome('pro') == ('pro_found', 200)
    assert reveal_outcome('blank') == ('miss', 0)


def test_grand_total():
    assert grand_total(7, 200, 200) == 470
    assert grand_total(0, 0, 0) == 0


def test_status_only_moves_forward():
    assert can_transition('active', 'quiz_completed')
    assert can_transition('quiz_completed', 'mine_completed')
    assert can_transition('mine_completed', 'finished')
    assert not can_transition('quiz_completed', 'active')
    assert not can_transition('mine_completed', 'quiz_completed')
    assert not can_transition('quiz_completed', 'quiz_completed')
