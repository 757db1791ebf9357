"""Configuration profile selection."""

import os
from enum import Enum

PROFILE_ENV_VAR = "NOTEBRAIN_PROFILE"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def detect_profile() -> Profile:
    """Detect the profile from NOTEBRAIN_PROFILE, defaulting to dev.

    Unknown values fall back to dev.
    """
    value = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    try:
        return Profile(value)
    except ValueError:
        return Profile.DEV


__all__ = ["PROFILE_ENV_VAR", "Profile", "detect_profile"]
