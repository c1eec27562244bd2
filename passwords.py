"""
passwords.py – Password strength estimation and password generation.

evaluate() scores a candidate password with a simple character-class model:
the password is treated as a uniformly random string drawn from the union of
the classes it uses, so its entropy is length * log2(pool size).  It does not
look for dictionary words, repeated patterns or breached passwords.

  Class                            Pool contribution
  lowercase ASCII  [a-z]           26
  uppercase ASCII  [A-Z]           26
  ASCII digits     [0-9]           10
  anything else    [^a-zA-Z0-9]    32  (punctuation, whitespace, non-ASCII)

The result is rated Weak below 40 bits, Basic from 40 up to 60 bits and
Strong from 60 bits upwards.

generate_password() backs the "Generate" button of the password dialog.
"""

import math
import re
import secrets
import string
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

from config import MIN_LENGTH, SYMBOLS

# (pattern, pool contribution) for each character class.
_CHARACTER_CLASSES = (
    (re.compile(r"[a-z]"), 26),
    (re.compile(r"[A-Z]"), 26),
    (re.compile(r"[0-9]"), 10),
    (re.compile(r"[^a-zA-Z0-9]"), 32),
)

BASIC_THRESHOLD = 40.0
STRONG_THRESHOLD = 60.0


@total_ordering
class PasswordStrength(Enum):
    """Qualitative rating; the value is the label shown to the user.

    Members are ordered by declaration, weakest first.
    """

    WEAK = "Weak"
    BASIC = "Basic"
    STRONG = "Strong"

    @property
    def rank(self) -> int:
        return list(PasswordStrength).index(self)

    def __lt__(self, other):
        if not isinstance(other, PasswordStrength):
            return NotImplemented
        return self.rank < other.rank


@dataclass(frozen=True)
class PasswordStrengthResult:
    entropy_bits: float
    strength: PasswordStrength


def pool_size(password: str) -> int:
    """Return the alphabet size implied by the character classes in *password*."""
    return sum(size for pattern, size in _CHARACTER_CLASSES if pattern.search(password))


def classify(entropy_bits: float) -> PasswordStrength:
    if entropy_bits < BASIC_THRESHOLD:
        return PasswordStrength.WEAK
    if entropy_bits < STRONG_THRESHOLD:
        return PasswordStrength.BASIC
    return PasswordStrength.STRONG


def evaluate(password: str) -> PasswordStrengthResult:
    """
    Estimate the entropy of *password* and rate it.

    Total over every string: the empty string is 0 bits / Weak, and a pool
    size of zero yields 0 bits instead of a math domain error.
    """
    length = len(password)
    if length == 0:
        return PasswordStrengthResult(0.0, PasswordStrength.WEAK)

    pool = pool_size(password)
    # length * log2(pool) == log2(pool ** length) without overflowing for
    # long inputs.
    entropy = length * math.log2(pool) if pool > 0 else 0.0

    return PasswordStrengthResult(entropy, classify(entropy))


def generate_password(length: int = MIN_LENGTH) -> str:
    """
    Return a random password of *length* characters.

    Characters come from lowercase, uppercase, digits and SYMBOLS, with at
    least one character from each, so the result always uses the full
    94-character pool of evaluate().

    Raises ValueError if *length* is too short to hold all four classes.
    """
    groups = [string.ascii_lowercase, string.ascii_uppercase, string.digits, "".join(SYMBOLS)]
    if length < len(groups):
        raise ValueError(f"Password length must be at least {len(groups)}")

    alphabet = "".join(groups)
    chars = [secrets.choice(group) for group in groups]
    chars += [secrets.choice(alphabet) for _ in range(length - len(groups))]

    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)
