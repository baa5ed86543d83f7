"""Pytest configuration shared by the whole test suite."""

from tests.fixtures import *  # noqa: F401,F403
