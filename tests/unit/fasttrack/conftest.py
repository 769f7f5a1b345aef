"""Shared fixtures for the fasting tracker tests."""

import pytest

from fakes import EngineHarness, RecordingCollaborator


@pytest.fixture
def recorder() -> RecordingCollaborator:
    return RecordingCollaborator()


@pytest.fixture
def harness(recorder: RecordingCollaborator) -> EngineHarness:
    return EngineHarness(recorder=recorder)
