"""Pytest configuration and fixtures."""

import pytest

from glycocare_api.models import UserProfile, VitalsSnapshot


@pytest.fixture
def sample_vitals() -> VitalsSnapshot:
    """Vitals as the mobile client sends them (numeric strings)."""
    return VitalsSnapshot.model_validate(
        {"glucose": "110", "systolic": "120", "diastolic": "80", "heartRate": "72"}
    )


@pytest.fixture
def diabetic_profile() -> UserProfile:
    """Profile with type 2 diabetes and both cardiovascular flags."""
    return UserProfile(
        age=58,
        weight=82.5,
        diabetes_type="type2",
        has_blood_pressure_condition=True,
        has_heart_condition=True,
    )
