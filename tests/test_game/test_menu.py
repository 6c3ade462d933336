"""
Unit tests for the menu system.

Tests menu navigation, name entry on the game over screen, and the
ScreenManager notifications the game and engine send.
"""

from datetime import datetime, timezone

import pygame
import pytest

from models import ExplanationResult, FinalStats, LeaderboardEntry, MediaSnapshot
from deepfake_defense.game.menu import (
    DoubtOverlay,
    GameOverMenu,
    LeaderboardMenu,
    MenuAction,
    PauseMenu,
    ScreenManager,
    StartMenu,
)


def key(k, unicode=''):
    return pygame.event.Event(pygame.KEYDOWN, key=k, unicode=unicode, mod=0)


def typed(text):
    return [key(ord(ch.lower()), unicode=ch) for ch in text]


@pytest.fixture
def stats():
    return FinalStats(score=420, level=3, time_ms=75_000, accuracy=0.8, max_combo=6)


class TestStartMenu:
    """Test main menu navigation."""

    def test_items(self):
        menu = StartMenu(800, 600)
        assert [item.action for item in menu.items] == [
            MenuAction.START_GAME, MenuAction.SHOW_LEADERBOARD, MenuAction.QUIT_GAME,
        ]

    def test_enter_activates_selected(self):
        assert StartMenu(800, 600).handle_input([key(pygame.K_RETURN)]) == MenuAction.START_GAME

    def test_navigation_wraps(self):
        menu = StartMenu(800, 600)
        assert menu.handle_input([key(pygame.K_UP), key(pygame.K_RETURN)]) == MenuAction.QUIT_GAME

    def test_click_activates_item(self):
        menu = StartMenu(800, 600)
        target = menu.items[1].position
        click = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(target.x, target.y))
        assert menu.handle_input([click]) == MenuAction.SHOW_LEADERBOARD

    def test_render(self, surface):
        StartMenu(800, 600).render(surface)


class TestLeaderboardMenu:
    """Test leaderboard loading states."""

    def test_starts_loading(self):
        assert LeaderboardMenu(800, 600).status == "Loading..."

    def test_entries_clear_status(self, surface):
        menu = LeaderboardMenu(800, 600)
        menu.set_entries([LeaderboardEntry(id=1, player_name='ACE', score=1500, level=8,
                                           date=datetime(2024, 1, 1, tzinfo=timezone.utc))])
        assert menu.status is None
        menu.render(surface)

    def test_empty_board(self):
        menu = LeaderboardMenu(800, 600)
        menu.set_entries([])
        assert menu.status == "No scores yet"

    def test_escape_goes_back(self):
        assert LeaderboardMenu(800, 600).handle_input([key(pygame.K_ESCAPE)]) == MenuAction.MAIN_MENU


class TestPauseMenu:
    """Test the pause overlay."""

    def test_items(self):
        menu = PauseMenu(800, 600)
        assert [item.action for item in menu.items] == [
            MenuAction.RESUME, MenuAction.RESTART, MenuAction.MAIN_MENU,
        ]

    def test_render(self, surface):
        PauseMenu(800, 600).render(surface)


class TestDoubtOverlay:
    """Test the explanation overlay."""

    @pytest.fixture
    def overlay(self):
        return DoubtOverlay(800, 600, MediaSnapshot(type='quote', content='Fake words', is_fake=True))

    def test_waits_for_result(self, overlay, surface):
        assert overlay.result is None
        overlay.render(surface)

    def test_shows_result(self, overlay, surface):
        overlay.set_result(ExplanationResult(request_id=1, generation=1,
                                             text="Misattributed quote. " * 10, confidence=88))
        overlay.render(surface)

    def test_enter_dismisses(self, overlay):
        assert overlay.handle_input([key(pygame.K_RETURN)]) == MenuAction.DISMISS


class TestGameOverMenu:
    """Test name entry and submission states."""

    def test_typing_builds_name(self, stats):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("Ace"))
        assert menu.player_name == "Ace"

    def test_backspace(self, stats):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("Ace") + [key(pygame.K_BACKSPACE)])
        assert menu.player_name == "Ac"

    def test_name_limited_to_20_chars(self, stats):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("x" * 30))
        assert len(menu.player_name) == 20

    def test_letters_do_not_navigate(self, stats):
        """Test that typing 's' or 'w' edits the name instead of moving."""
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("sw"))
        assert menu.selected_index == 0
        assert menu.player_name == "sw"

    def test_submit_requires_name(self, stats):
        menu = GameOverMenu(800, 600, stats)
        assert menu.handle_input([key(pygame.K_RETURN)]) is None
        assert menu.status == "Please enter your name"

    def test_submit(self, stats):
        menu = GameOverMenu(800, 600, stats)
        action = menu.handle_input(typed("Ace") + [key(pygame.K_RETURN)])
        assert action == MenuAction.SUBMIT_SCORE
        assert menu.submitting

    def test_no_double_submit(self, stats):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("Ace") + [key(pygame.K_RETURN)])
        assert menu.handle_input([key(pygame.K_RETURN)]) is None

    def test_submit_succeeded(self, stats):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("Ace") + [key(pygame.K_RETURN)])
        menu.submit_succeeded(4)
        assert menu.submitted
        assert menu.status == "Score submitted! Rank #4"

    def test_submit_failed_allows_retry(self, stats):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("Ace") + [key(pygame.K_RETURN)])
        menu.submit_failed("Failed to submit score. Please try again.")
        assert menu.status == "Failed to submit score. Please try again."
        assert menu.handle_input([key(pygame.K_RETURN)]) == MenuAction.SUBMIT_SCORE

    def test_play_again(self, stats):
        menu = GameOverMenu(800, 600, stats)
        assert menu.handle_input([key(pygame.K_DOWN), key(pygame.K_RETURN)]) == MenuAction.RESTART

    def test_render(self, stats, surface):
        menu = GameOverMenu(800, 600, stats)
        menu.handle_input(typed("Ace"))
        menu.render(surface)


class TestScreenManager:
    """Test notifications switching the active screen."""

    def test_starts_on_main_menu(self):
        assert isinstance(ScreenManager(800, 600).screen, StartMenu)

    def test_pause_and_hide(self):
        manager = ScreenManager(800, 600)
        manager.show_pause()
        assert isinstance(manager.screen, PauseMenu)
        manager.hide_overlays()
        assert manager.screen is None
        assert manager.handle_input([key(pygame.K_RETURN)]) is None

    def test_explanation_reaches_overlay(self):
        manager = ScreenManager(800, 600)
        manager.show_doubt(MediaSnapshot(type='image', content='Face', is_fake=True))
        result = ExplanationResult(request_id=1, generation=1, text="Synthetic.")
        manager.show_explanation(result)
        assert manager.screen.result == result

    def test_explanation_ignored_without_overlay(self):
        manager = ScreenManager(800, 600)
        manager.show_explanation(ExplanationResult(request_id=1, generation=1, text="Late."))
        assert isinstance(manager.screen, StartMenu)

    def test_leaderboard_failure_message(self):
        manager = ScreenManager(800, 600)
        menu = manager.show_leaderboard()
        menu.request_id = 1
        manager.leaderboard_failed(1)
        assert menu.status == "Unable to load leaderboard"

    def test_leaderboard_result_for_other_request_ignored(self):
        manager = ScreenManager(800, 600)
        menu = manager.show_leaderboard()
        menu.request_id = 2
        manager.leaderboard_loaded(1, [])
        assert menu.status == "Loading..."

    def test_submit_result_routed_to_game_over(self, stats):
        manager = ScreenManager(800, 600)
        manager.show_game_over(stats)
        manager.screen.request_id = 5
        manager.submit_failed(5, "Player name must be a non-empty string")
        assert manager.screen.status == "Player name must be a non-empty string"

    def test_submit_result_for_earlier_screen_ignored(self, stats):
        manager = ScreenManager(800, 600)
        manager.show_game_over(stats)
        manager.screen.request_id = 1
        manager.show_game_over(stats)
        manager.submit_succeeded(1, 3)
        assert manager.screen.submitted is False
        assert manager.screen.status is None
