"""Synthetic name source for the sample data generator."""

from __future__ import annotations

import random
import string

FIRST_NAMES = (
    "Ada", "Aiko", "Amara", "Anders", "Bruno", "Carmen", "Chen", "Dmitri", "Elena", "Emeka",
    "Farid", "Fatima", "Felix", "Freya", "Gustavo", "Hana", "Ibrahim", "Ines", "Jonas", "Kim",
    "Lars", "Leila", "Mateo", "Mei", "Nadia", "Noah", "Olga", "Omar", "Priya", "Quentin",
    "Rosa", "Salvador", "Sana", "Tariq", "Uma", "Viktor", "Wanjiru", "Xavier", "Yara", "Zoe",
)

LAST_NAMES = (
    "Abara", "Becker", "Castillo", "Dubois", "Eriksen", "Fischer", "Fonseca", "Garcia", "Haddad",
    "Hu", "Ivanova", "Jensen", "Kowalski", "Larsen", "Moreau", "Nakamura", "Novak", "Okafor",
    "Petrov", "Quispe", "Rossi", "Santos", "Sato", "Tanaka", "Ulyanov", "Van Dijk", "Weber",
    "Witcher", "Xu", "Yilmaz", "Zhang",
)


def synthetic_name(rng: random.Random, middle_initial_rate: float = 0.25) -> str:
    """Return "First [M.] Last" drawn from the built-in lists."""
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    if rng.random() < middle_initial_rate:
        return f"{first} {rng.choice(string.ascii_uppercase)}. {last}"
    return f"{first} {last}"


__all__ = ["FIRST_NAMES", "LAST_NAMES", "synthetic_name"]
