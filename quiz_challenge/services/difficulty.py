from ..models import Difficulty

def difficulty_for(level: int) -> Difficulty:
    if level <= 5:
        return Difficulty.EASY
    if level <= 10:
        return Difficulty.MEDIUM
    if level <= 15:
        return Difficulty.HARD
    return Difficulty.VERY_HARD
