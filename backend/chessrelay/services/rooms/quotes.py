import random
from typing import Optional

GAME_START = 'gameStart'
CAPTURE = 'capture'
CHECK = 'check'
CHECKMATE = 'checkmate'
DRAW = 'draw'

QUOTES = {
    GAME_START: [
        "The soul is healed by being with children... and chess.",
        "To go wrong in one's own way is better than to go right in someone else's.",
        "The darker the night, the brighter the stars.",
        "Man is what he believes.",
        "Taking a new step, uttering a new word, is what people fear most.",
    ],
    CAPTURE: [
        "Pain and suffering are always inevitable for a large intelligence.",
        "The cleverest of all, in my opinion, is the man who calls himself a fool.",
        "To live without hope is to cease to live.",
        "What is hell? I maintain that it is the suffering of being unable to love.",
        "The soul has its torments.",
    ],
    CHECK: [
        "Power is given only to those who dare to lower themselves and pick it up.",
        "It takes something more than intelligence to act intelligently.",
        "The awful thing is that beauty is mysterious as well as terrible.",
        "Man only likes to count his troubles; he doesn't calculate his happiness.",
        "Right or wrong, it's very pleasant to break something from time to time.",
    ],
    CHECKMATE: [
        "To remain human, we must keep looking into the abyss.",
        "Nothing in this world is harder than speaking the truth.",
        "The mystery of human existence lies not in just staying alive, but in finding something to live for.",
        "Above all, don't lie to yourself.",
        "The degree of civilization in a society can be judged by entering its prisons.",
    ],
    DRAW: [
        "Neither combatant emerged victorious, yet both gained wisdom.",
        "In abstraction, there is no tragedy.",
        "The more I love humanity in general, the less I love man in particular.",
    ],
}


def random_quote(category: Optional[str], rng: random.Random = None) -> str:
    """Pick a quote from `category`, falling back to the game-start pool."""
    pool = QUOTES.get(category) or QUOTES[GAME_START]
    return (rng or random).choice(pool)


def move_quote_category(is_capture=False, is_check=False, is_checkmate=False, is_draw=False) -> Optional[str]:
    """Checkmate beats draw beats check beats capture; quiet moves get nothing."""
    if is_checkmate:
        return CHECKMATE
    if is_draw:
        return DRAW
    if is_check:
        return CHECK
    if is_capture:
        return CAPTURE
    return None
