from __future__ import annotations

import pytest

from onboarding_bot.cleanup import CleanupScheduler
from onboarding_bot.models import OnboardingSettings


@pytest.fixture
def settings() -> OnboardingSettings:
    return OnboardingSettings(cleanup_delay=0)


@pytest.fixture
def cleanup() -> CleanupScheduler:
    return CleanupScheduler(delay=0)
