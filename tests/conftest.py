"""Shared fixtures for DeepFake Defense tests.

Pygame runs with the dummy video and audio drivers so no display or sound
device is needed.
"""

import os
import random
from unittest.mock import Mock

os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import pygame
import pytest

from models import MediaType
from deepfake_defense.config import GameSettings
from deepfake_defense.game.entities import MediaItem
from deepfake_defense.game.orchestrator import DeepFakeDefense
from deepfake_defense.services.media_provider import MediaLibrary


@pytest.fixture(scope='session')
def pygame_init():
    """Initialize pygame once; entity fonts are cached across tests."""
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def surface(pygame_init):
    """Off-screen surface for render smoke tests."""
    return pygame.Surface((800, 600))


@pytest.fixture
def settings():
    """Small field with default timings."""
    return GameSettings(width=800, height=600)


@pytest.fixture
def make_item():
    """Factory for MediaItems at a given position."""
    def _make(x=400.0, y=100.0, is_fake=True, media_type=MediaType.IMAGE,
              content='Synthetic image', speed=1.0):
        return MediaItem(x, y, media_type, content, is_fake, speed=speed)
    return _make


@pytest.fixture
def audio():
    return Mock()


@pytest.fixture
def ui():
    return Mock()


@pytest.fixture
def media_factory(make_item):
    """Always produces a fake image; position is set by the spawner."""
    return Mock(side_effect=lambda: make_item(x=0.0, y=-100.0))


@pytest.fixture
def game(media_factory, audio, ui, settings):
    """Orchestrator wired to mocks, still in the MENU state."""
    return DeepFakeDefense(
        media_factory=media_factory,
        audio=audio,
        ui=ui,
        request_explanation=Mock(),
        settings=settings,
        rng=random.Random(42),
        clock=lambda: 0.0,
    )


@pytest.fixture
def playing_game(game, ui, audio):
    """Orchestrator in the PLAYING state with collaborator mocks reset."""
    game.start()
    ui.reset_mock()
    audio.reset_mock()
    return game


@pytest.fixture
def library():
    """Library over the built-in dataset with a seeded random source."""
    return MediaLibrary(rng=random.Random(7))
