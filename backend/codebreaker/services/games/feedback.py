from dataclasses import dataclass
from typing import List, Sequence

EXACT_PEG = 'black'
COLOR_PEG = 'white'

_CONSUMED = object()


@dataclass(frozen=True)
class Feedback:
    exact: int = 0
    color: int = 0

    def pegs(self) -> List[str]:
        return [EXACT_PEG] * self.exact + [COLOR_PEG] * self.color

    def is_solved(self, length: int) -> bool:
        return self.exact == length


def score(secret: Sequence, guess: Sequence) -> Feedback:
    """Score ``guess`` against ``secret``.

    Exact matches are counted and consumed first, left to right. Then every
    remaining secret value, in position order, consumes the lowest-index
    remaining guess value equal to it and earns a color peg. For
    secret=[1, 1, 2, 3], guess=[1, 2, 3, 3] this gives exact=2, color=1.
    """
    if len(secret) != len(guess):
        raise ValueError(f'Secret and guess lengths differ: {len(secret)} != {len(guess)}')

    secret_left = list(secret)
    guess_left = list(guess)
    exact = 0
    for i, value in enumerate(secret_left):
        if value == guess_left[i]:
            exact += 1
            secret_left[i] = guess_left[i] = _CONSUMED

    color = 0
    for value in secret_left:
        if value is _CONSUMED:
            continue
        for j, candidate in enumerate(guess_left):
            if candidate is not _CONSUMED and candidate == value:
                color += 1
                guess_left[j] = _CONSUMED
                break

    return Feedback(exact=exact, color=color)
