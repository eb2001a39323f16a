"""
Base class for contribution policies.

A policy answers one question per simulated year: given the member's age and
salary that year, how much do they contribute personally? Employer
contributions are not part of the policy; the accumulation simulator adds them.
"""

from __future__ import annotations


class ContributionPolicy:
    """Interface for personal contribution rules (callable as f(age, salary))."""

    name: str = "policy"

    def personal_contribution(self, age: int, salary: float) -> float:
        raise NotImplementedError

    def __call__(self, age: int, salary: float) -> float:
        return self.personal_contribution(age, salary)
