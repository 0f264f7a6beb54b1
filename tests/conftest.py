"""
Shared fixtures for the writing assessment test suite.
"""

import os

import pytest

from writing_assessment.config_logging import reset_config
from writing_assessment.models import TaskPoint, WritingTask
from writing_assessment.proofing import reset_client
from writing_assessment.tasks import reset_catalog


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate every test from WA_* variables and cached singletons."""
    for key in list(os.environ):
        if key.startswith('WA_'):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    reset_catalog()
    reset_client()
    yield
    reset_client()
    reset_catalog()
    reset_config()


@pytest.fixture
def letter_task() -> WritingTask:
    """A short letter task with three required points."""
    return WritingTask(
        id='test_letter',
        label='Test Letter',
        category='letter',
        instruction='Write a formal letter about a schedule change.',
        min_words=20,
        points=(
            TaskPoint('p1', 'Inform about the schedule change'),
            TaskPoint('p2', 'Apologise for the inconvenience'),
            TaskPoint('p3', 'Ask for confirmation'),
        ),
    )


@pytest.fixture
def covering_letter() -> str:
    """Three-paragraph letter that covers every point of ``letter_task``."""
    return (
        "Dear Sir or Madam,\n"
        "\n"
        "I am writing to inform you that the schedule of our visit has moved.\n"
        "\n"
        "However, we apologise for any inconvenience this may cause. "
        "Therefore, please send a confirmation of the new date.\n"
        "\n"
        "Yours faithfully,\n"
        "John Smith"
    )
