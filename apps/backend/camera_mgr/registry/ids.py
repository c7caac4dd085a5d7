from __future__ import annotations

import secrets
import string
from collections.abc import Collection
from typing import Protocol

from camera_mgr.errors import AllocationExhausted

ID_ALPHABET = string.ascii_letters + string.digits
DEFAULT_ID_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 64


class IdAllocator(Protocol):
    def allocate(self, existing_ids: Collection[str]) -> str: ...


class RandomIdAllocator:
    """Random alphanumeric ids, regenerated until one is not already taken.

    62**8 possible ids makes a collision rare; ``max_attempts`` bounds the
    loop for registries that are somehow close to the id space.
    """

    def __init__(self, length: int = DEFAULT_ID_LENGTH, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        if length < 1:
            raise ValueError("id length must be positive")
        if max_attempts < 1:
            raise ValueError("max_attempts must be positive")
        self.length = length
        self.max_attempts = max_attempts

    def generate(self) -> str:
        return "".join(secrets.choice(ID_ALPHABET) for _ in range(self.length))

    def allocate(self, existing_ids: Collection[str]) -> str:
        for _ in range(self.max_attempts):
            candidate = self.generate()
            if candidate not in existing_ids:
                return candidate
        raise AllocationExhausted(self.max_attempts)


class MonotonicIdAllocator:
    """Next id is one past the largest numeric id in the registry."""

    def allocate(self, existing_ids: Collection[str]) -> str:
        numeric = [int(value) for value in existing_ids if value.isascii() and value.isdigit()]
        return str(max(numeric, default=0) + 1)


def create_allocator(policy: str) -> IdAllocator:
    if policy == "random":
        return RandomIdAllocator()
    if policy == "monotonic":
        return MonotonicIdAllocator()
    raise ValueError(f"Unknown id policy: {policy}")
