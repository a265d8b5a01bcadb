from __future__ import annotations

import random
from typing import Callable

from .models import Card
from .words import generate_words

WordSource = Callable[[int], list[str]]


def build_deck(
    total_cards: int,
    words: list[str] | None = None,
    word_source: WordSource = generate_words,
    rng: random.Random | None = None,
) -> list[Card]:
    """Build a shuffled deck with exactly half the cards owned by each team.

    The first half of the word list is red-owned and the rest blue-owned
    before shuffling; indexes are assigned after the shuffle so ownership
    cannot be read from a card's position.
    """
    if total_cards < 4 or total_cards % 2:
        raise ValueError(f"total_cards must be even and >= 4, got {total_cards}")

    if words is None:
        words = word_source(total_cards)
    words = list(words)
    if len(words) != total_cards:
        raise ValueError(f"expected {total_cards} words, got {len(words)}")
    if len(set(words)) != len(words):
        raise ValueError("deck words must be distinct")

    half = total_cards // 2
    entries = [(word, "red" if i < half else "blue") for i, word in enumerate(words)]
    (rng or random).shuffle(entries)

    return [Card(index=i, word=word, team=team) for i, (word, team) in enumerate(entries)]
