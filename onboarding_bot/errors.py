from __future__ import annotations

import asyncio

import aiohttp

from .models import VerificationOutcome

# Failures below the discord.py HTTP layer: resets, DNS, timeouts.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""


class ClassificationLookupError(Exception):
    """Raised when the moderation log cannot be read."""


class VerificationError(Exception):
    """Base class for failures that end a verification attempt."""

    outcome: VerificationOutcome = VerificationOutcome.APPLY_ERROR


class WrongChannelError(VerificationError):
    outcome = VerificationOutcome.WRONG_CHANNEL


class TargetResolutionError(VerificationError):
    outcome = VerificationOutcome.NO_TARGET_MEMBER


class FormatError(VerificationError, ValueError):
    """Raised when verification text does not match the two-line format."""

    outcome = VerificationOutcome.BAD_FORMAT


class ApplyError(VerificationError):
    outcome = VerificationOutcome.APPLY_ERROR
