# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Unified exception hierarchy for censor.

All interception errors inherit from CensorException, so callers can catch
every misuse of the engine in one place or target a specific condition.
Each concrete exception also derives from the closest builtin so existing
``except TypeError`` / ``except AttributeError`` handlers keep working.

Categories:
- TypeMismatchException: a name, handle or target failed a type check
- UnregisteredOriginalException: pass-through reached an empty shadow archive
- LookupExhaustedException: bounded descriptor lookup found nothing
- InvalidTargetException: the dispatcher cannot intercept the given value
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Base Exception
# =============================================================================


class CensorException(Exception):
    """Base exception for all censor errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "TYPE_MISMATCH").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code if code is not None else self.default_code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Registration-time failures
# =============================================================================


class TypeMismatchException(CensorException, TypeError):
    """A member name, handle or target has the wrong type."""

    default_code = "TYPE_MISMATCH"

    @classmethod
    def expected(cls, what: str, value: Any, expected: str) -> TypeMismatchException:
        """Build the standard ``Got <type> expected <type>`` error."""
        got = type(value).__name__
        return cls(
            f"{what}: got {got} expected {expected}",
            context={"got": got, "expected": expected},
        )


class InvalidTargetException(CensorException, TypeError):
    """The value is neither an interceptable object nor a constructor."""

    default_code = "INVALID_TARGET"


class LookupExhaustedException(CensorException, AttributeError):
    """No accessor was found within the bounded type-hierarchy walk."""

    default_code = "LOOKUP_EXHAUSTED"


# =============================================================================
# Dispatch-time failures
# =============================================================================


class UnregisteredOriginalException(CensorException, LookupError):
    """Pass-through was attempted but no original was ever archived."""

    default_code = "UNREGISTERED_ORIGINAL"
