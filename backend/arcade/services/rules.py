"""Scoring and eligibility rules.

Pure functions and lookup tables with no database access, shared by the
models (total score hook), the services and the tests.
"""

from arcade.errors import ValidationFailed

DIFFICULTIES = ('easy', 'medium', 'hard')
ADMIN_DIFFICULTY = 'admin'

ACCESS_CODE_DIFFICULTY = {
    'EASY123': 'easy',
    'MED456': 'medium',
    'HARD789': 'hard',
}

TOTAL_QUESTIONS = 8

# Minimum quiz score needed to unlock the mine game
MINE_UNLOCK_THRESHOLDS = {'easy': 6, 'medium': 5, 'hard': 4}

MINE_GAME_CONFIGS = {
    'easy': {'attempts': 2, 'mines': 5, 'pros': 2, 'blanks': 2},
    'medium': {'attempts': 3, 'mines': 4, 'pros': 3, 'blanks': 2},
    'hard': {'attempts': 4, 'mines': 3, 'pros': 4, 'blanks': 2},
}

# cell type -> (result, points)
CELL_OUTCOMES = {
    'mine': ('hit', 100),
    'pro': ('pro_found', 200),
    'blank': ('miss', 0),
}

QUIZ_POINTS_PER_ANSWER = 10

SESSION_STATUSES = ('active', 'quiz_completed', 'mine_completed', 'finished')
QUIZ_DONE_STATUSES = ('quiz_completed', 'mine_completed', 'finished')
MINE_DONE_STATUSES = ('mine_completed', 'finished')


def difficulty_for_access_code(access_code: str, admin_code: str) -> str:
    """Map an access code to its difficulty, or ``'admin'`` for the admin code."""
    if admin_code and access_code == admin_code:
        return ADMIN_DIFFICULTY
    difficulty = ACCESS_CODE_DIFFICULTY.get(access_code)
    if difficulty is None:
        raise ValidationFailed(
            'Invalid access code! Try again.',
            error_code='INVALID_ACCESS_CODE',
            details=[{'loc': ['accessCode'], 'msg': 'Invalid access code'}],
        )
    return difficulty


def can_play_mine(score: int, difficulty: str) -> bool:
    return score >= MINE_UNLOCK_THRESHOLDS[difficulty]


def reveal_outcome(cell_type: str):
    return CELL_OUTCOMES[cell_type]


def grand_total(quiz_score: int, mine_score: int, pro_score: int) -> int:
    return quiz_score * QUIZ_POINTS_PER_ANSWER + mine_score + pro_score


def can_transition(current: str, target: str) -> bool:
    """Status only ever moves strictly forward."""
    return SESSION_STATUSES.index(target) > SESSION_STATUSES.index(current)
