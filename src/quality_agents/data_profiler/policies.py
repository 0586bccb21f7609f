"""
Column-name policies.

A column's semantic role is guessed from its name. The guesses live in one
ordered table instead of being spread through the detectors, so the order
they are tried in is explicit: email, name, age, phone, then the generic
fallback.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Tuple

from .values import to_number

# Values outside this range are impossible for an "age" column
AGE_MIN = 0
AGE_MAX = 120


class ContextLabel(Enum):
    EMAIL = "email"
    NAME = "name"
    AGE = "age"
    PHONE = "phone"
    STRING = "string"  # no recognised role, any non-empty value is valid


EMAIL_PATTERN = re.compile(r"^[\w.-]+@([\w-]+\.)+[\w-]{2,}$", re.IGNORECASE | re.ASCII)
NAME_PATTERN = re.compile(r"^[A-Za-zÀ-ÿ ,.'-]{2,}\s+[A-Za-zÀ-ÿ ,.'-]{2,}$")
PHONE_PATTERN = re.compile(r"^\+?\d[\d\s.-]{6,}\d$", re.ASCII)


def _matches(pattern: re.Pattern) -> Callable[[str], bool]:
    return lambda text: pattern.match(text) is not None


def is_valid_age(text: str) -> bool:
    num = to_number(text)
    return num is not None and AGE_MIN <= num <= AGE_MAX


@dataclass(frozen=True)
class ContextPolicy:
    """A name keyword and the check a non-empty value must pass."""
    keyword: str
    label: ContextLabel
    check: Callable[[str], bool]

    def applies_to(self, column_name: str) -> bool:
        return self.keyword in column_name.lower()


@dataclass(frozen=True)
class DomainBounds:
    """Hard numeric bounds for columns whose name carries the keyword."""
    keyword: str
    minimum: float
    maximum: float

    def applies_to(self, column_name: str) -> bool:
        return self.keyword in column_name.lower()


# evaluated top to bottom, first hit wins
CONTEXT_POLICIES: Tuple[ContextPolicy, ...] = (
    ContextPolicy("email", ContextLabel.EMAIL, _matches(EMAIL_PATTERN)),
    ContextPolicy("name", ContextLabel.NAME, _matches(NAME_PATTERN)),
    ContextPolicy("age", ContextLabel.AGE, is_valid_age),
    ContextPolicy("phone", ContextLabel.PHONE, _matches(PHONE_PATTERN)),
)

GENERIC_POLICY = ContextPolicy("", ContextLabel.STRING, lambda text: True)

# every matching entry is applied by the outlier detector
DOMAIN_BOUNDS: Tuple[DomainBounds, ...] = (
    DomainBounds("age", AGE_MIN, AGE_MAX),
)


def context_policy_for(column_name: str) -> ContextPolicy:
    for policy in CONTEXT_POLICIES:
        if policy.applies_to(column_name):
            return policy
    return GENERIC_POLICY


def domain_bounds_for(column_name: str) -> Tuple[DomainBounds, ...]:
    return tuple(b for b in DOMAIN_BOUNDS if b.applies_to(column_name))
