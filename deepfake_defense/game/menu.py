"""
Menu system for DeepFake Defense.

This module provides the screens drawn around gameplay: the start menu,
leaderboard, pause menu, doubt explanation overlay and game over screen
with score submission.

Classes:
    MenuScreen: Base class for menu screens
    StartMenu: Main menu
    LeaderboardMenu: Top scores fetched from the leaderboard API
    PauseMenu: Overlay with resume, restart and quit
    DoubtOverlay: Explanation for the doubted media item
    GameOverMenu: Final stats, name entry and restart option
    ScreenManager: Tracks which screen is showing; receives notifications
        from the game
"""

from enum import Enum
from typing import List, Optional

import pygame

from models import ExplanationResult, FinalStats, LeaderboardEntry, MediaSnapshot, Point2D
from models.leaderboard import MAX_PLAYER_NAME_LENGTH
from deepfake_defense.config import Colors, Fonts


class MenuAction(str, Enum):
    """Actions that can be triggered from menu selections."""
    START_GAME = "start_game"
    SHOW_LEADERBOARD = "show_leaderboard"
    QUIT_GAME = "quit_game"
    RESUME = "resume"
    RESTART = "restart"
    MAIN_MENU = "main_menu"
    SUBMIT_SCORE = "submit_score"
    DISMISS = "dismiss"
    NONE = "none"


def _font(size: int) -> pygame.font.Font:
    if not pygame.font.get_init():
        pygame.font.init()
    return pygame.font.Font(None, size)


def _blit_centered(screen, text: str, size: int, color, center) -> None:
    surface = _font(size).render(text, True, color)
    screen.blit(surface, surface.get_rect(center=center))


def _wrap(text: str, font: pygame.font.Font, max_width: int) -> List[str]:
    """Greedy word wrap to a pixel width."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if font.size(candidate)[0] <= max_width or not current:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


class MenuItem:
    """A selectable menu item."""

    def __init__(self, text: str, action: MenuAction, position: Point2D):
        self.text = text
        self.action = action
        self.position = position
        self.selected = False

    def contains(self, pos) -> bool:
        return (abs(pos[0] - self.position.x) < 200 and
                abs(pos[1] - self.position.y) < 30)

    def render(self, screen: pygame.Surface) -> None:
        color = Colors.UI_HIGHLIGHT if self.selected else Colors.UI_TEXT
        _blit_centered(screen, self.text, Fonts.LARGE, color,
                       (int(self.position.x), int(self.position.y)))


class MenuScreen:
    """Base class for menu screens.

    Provides rendering of a title and items, and keyboard/mouse selection.

    Attributes:
        items: List of menu items
        selected_index: Index of currently selected item
        title: Menu title text
    """

    nav_up = (pygame.K_UP, pygame.K_w)
    nav_down = (pygame.K_DOWN, pygame.K_s)
    activate = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE)

    def __init__(self, title: str, width: int, height: int):
        self.title = title
        self.width = width
        self.height = height
        self.items: List[MenuItem] = []
        self.selected_index = 0

    def add_item(self, text: str, action: MenuAction, y: float) -> MenuItem:
        item = MenuItem(text, action, Point2D(x=self.width / 2, y=y))
        self.items.append(item)
        if len(self.items) == 1:
            item.selected = True
        return item

    def handle_input(self, events: List[pygame.event.Event]) -> Optional[MenuAction]:
        """Handle navigation events.

        Returns:
            MenuAction if an item was activated, None otherwise
        """
        for event in events:
            if event.type == pygame.KEYDOWN:
                if event.key in self.nav_up:
                    self._select_item((self.selected_index - 1) % len(self.items))
                elif event.key in self.nav_down:
                    self._select_item((self.selected_index + 1) % len(self.items))
                elif event.key in self.activate:
                    return self._activate_selected()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                for i, item in enumerate(self.items):
                    if item.contains(event.pos):
                        self._select_item(i)
                        return self._activate_selected()
            elif event.type == pygame.MOUSEMOTION:
                for i, item in enumerate(self.items):
                    if item.contains(event.pos):
                        self._select_item(i)
                        break
        return None

    def _select_item(self, index: int) -> None:
        if 0 <= index < len(self.items):
            if 0 <= self.selected_index < len(self.items):
                self.items[self.selected_index].selected = False
            self.selected_index = index
            self.items[index].selected = True

    def _activate_selected(self) -> MenuAction:
        if 0 <= self.selected_index < len(self.items):
            return self.items[self.selected_index].action
        return MenuAction.NONE

    def _render_overlay(self, screen: pygame.Surface, alpha: int = 180) -> None:
        overlay = pygame.Surface((self.width, self.height))
        overlay.set_alpha(alpha)
        overlay.fill(Colors.BLACK)
        screen.blit(overlay, (0, 0))

    def render(self, screen: pygame.Surface) -> None:
        screen.fill(Colors.BACKGROUND)
        _blit_centered(screen, self.title, Fonts.HUGE, Colors.CYAN, (self.width // 2, 150))
        for item in self.items:
            item.render(screen)


class StartMenu(MenuScreen):
    """Main menu."""

    def __init__(self, width: int, height: int):
        super().__init__("DEEPFAKE DEFENSE", width, height)
        base_y = height // 2 - 40
        self.add_item("Start Game", MenuAction.START_GAME, base_y)
        self.add_item("Leaderboard", MenuAction.SHOW_LEADERBOARD, base_y + 70)
        self.add_item("Quit", MenuAction.QUIT_GAME, base_y + 140)

    def render(self, screen: pygame.Surface) -> None:
        super().render(screen)
        instructions = [
            "Shoot the fakes before they cross the red line. Spare the real ones.",
            "ARROWS / A D move   SPACE or click shoot   Q doubt   ESC pause   M mute",
        ]
        y = self.height - 110
        for line in instructions:
            _blit_centered(screen, line, Fonts.SMALL, Colors.LIGHT_GRAY, (self.width // 2, y))
            y += 30


class LeaderboardMenu(MenuScreen):
    """Top scores. Shows a loading or error line until entries arrive."""

    def __init__(self, width: int, height: int):
        super().__init__("LEADERBOARD", width, height)
        self.add_item("Back", MenuAction.MAIN_MENU, height - 80)
        self.entries: List[LeaderboardEntry] = []
        self.status: Optional[str] = "Loading..."
        self.request_id: Optional[int] = None

    def handle_input(self, events: List[pygame.event.Event]) -> Optional[MenuAction]:
        for event in events:
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return MenuAction.MAIN_MENU
        return super().handle_input(events)

    def set_entries(self, entries: List[LeaderboardEntry]) -> None:
        self.entries = list(entries)
        self.status = None if entries else "No scores yet"

    def set_error(self, message: str) -> None:
        self.entries = []
        self.status = message

    def render(self, screen: pygame.Surface) -> None:
        super().render(screen)
        if self.status:
            _blit_centered(screen, self.status, Fonts.MEDIUM, Colors.LIGHT_GRAY,
                           (self.width // 2, self.height // 2))
            return

        font = _font(Fonts.MEDIUM)
        y = 230
        for rank, entry in enumerate(self.entries, start=1):
            line = f"{rank:>2}. {entry.player_name:<20} {entry.score:>6}   L{entry.level}"
            color = Colors.YELLOW if rank == 1 else Colors.UI_TEXT
            surface = font.render(line, True, color)
            screen.blit(surface, surface.get_rect(midtop=(self.width // 2, y)))
            y += Fonts.MEDIUM


class PauseMenu(MenuScreen):
    """Pause overlay drawn on top of the frozen field."""

    def __init__(self, width: int, height: int):
        super().__init__("PAUSED", width, height)
        base_y = height // 2
        self.add_item("Resume (ESC)", MenuAction.RESUME, base_y)
        self.add_item("Restart", MenuAction.RESTART, base_y + 70)
        self.add_item("Quit to Menu", MenuAction.MAIN_MENU, base_y + 140)

    # ESC is handled by the input adapter as RESUME
    def render(self, screen: pygame.Surface) -> None:
        self._render_overlay(screen)
        _blit_centered(screen, self.title, Fonts.HUGE, Colors.UI_TEXT,
                       (self.width // 2, self.height // 2 - 120))
        for item in self.items:
            item.render(screen)


class DoubtOverlay(MenuScreen):
    """Explanation panel for a doubted item.

    Opens immediately with "Analyzing..." and fills in when the explanation
    is delivered.
    """

    def __init__(self, width: int, height: int, media: MediaSnapshot):
        super().__init__("AI ANALYSIS", width, height)
        self.media = media
        self.result: Optional[ExplanationResult] = None
        self.add_item("Continue", MenuAction.DISMISS, height - 120)

    def set_result(self, result: ExplanationResult) -> None:
        self.result = result

    def render(self, screen: pygame.Surface) -> None:
        self._render_overlay(screen, alpha=200)
        cx = self.width // 2
        _blit_centered(screen, self.title, Fonts.LARGE, Colors.CYAN, (cx, 120))

        verdict = "FAKE" if self.media.is_fake else "REAL"
        color = Colors.RED if self.media.is_fake else Colors.GREEN
        _blit_centered(screen, f"{self.media.type.value.upper()}: {self.media.content}",
                       Fonts.MEDIUM, Colors.UI_TEXT, (cx, 190))
        _blit_centered(screen, f"Verdict: {verdict}", Fonts.MEDIUM, color, (cx, 235))

        body_font = _font(Fonts.SMALL + 4)
        if self.result is None:
            lines = ["Analyzing..."]
        else:
            lines = _wrap(self.result.text, body_font, int(self.width * 0.7))
            if self.result.confidence is not None:
                lines.append("")
                lines.append(f"Confidence: {self.result.confidence}%")
        y = 300
        for line in lines:
            surface = body_font.render(line, True, Colors.LIGHT_GRAY)
            screen.blit(surface, surface.get_rect(midtop=(cx, y)))
            y += Fonts.SMALL + 6

        for item in self.items:
            item.render(screen)
        _blit_centered(screen, "Press ENTER to continue", Fonts.SMALL, Colors.GRAY,
                       (cx, self.height - 70))


class GameOverMenu(MenuScreen):
    """Final stats, player name entry and score submission.

    Printable keys edit the name, so only the arrow keys navigate and only
    Enter activates.
    """

    nav_up = (pygame.K_UP,)
    nav_down = (pygame.K_DOWN,)
    activate = (pygame.K_RETURN, pygame.K_KP_ENTER)

    def __init__(self, width: int, height: int, stats: FinalStats):
        super().__init__("GAME OVER", width, height)
        self.stats = stats
        self.player_name = ""
        self.submitted = False
        self.submitting = False
        self.status: Optional[str] = None
        self.request_id: Optional[int] = None

        base_y = height // 2 + 110
        self.submit_item = self.add_item("Submit Score", MenuAction.SUBMIT_SCORE, base_y)
        self.add_item("Play Again", MenuAction.RESTART, base_y + 60)
        self.add_item("Main Menu", MenuAction.MAIN_MENU, base_y + 120)

    def handle_input(self, events: List[pygame.event.Event]) -> Optional[MenuAction]:
        remaining = []
        for event in events:
            if event.type == pygame.KEYDOWN and not self.submitted:
                if event.key == pygame.K_BACKSPACE:
                    self.player_name = self.player_name[:-1]
                    continue
                if (event.key not in self.activate and event.unicode
                        and event.unicode.isprintable()):
                    if len(self.player_name) < MAX_PLAYER_NAME_LENGTH:
                        self.player_name += event.unicode
                    continue
            remaining.append(event)

        action = super().handle_input(remaining)
        if action == MenuAction.SUBMIT_SCORE:
            if self.submitted or self.submitting:
                return None
            if not self.player_name.strip():
                self.status = "Please enter your name"
                return None
            self.submitting = True
            self.status = "Submitting..."
        return action

    def submit_succeeded(self, position: int) -> None:
        self.submitting = False
        self.submitted = True
        self.status = f"Score submitted! Rank #{position}"
        self.submit_item.text = "Submitted"

    def submit_failed(self, message: str) -> None:
        self.submitting = False
        self.status = message

    def render(self, screen: pygame.Surface) -> None:
        self._render_overlay(screen, alpha=210)
        cx = self.width // 2
        _blit_centered(screen, self.title, Fonts.HUGE, Colors.RED, (cx, 110))

        lines = [
            (f"Final Score: {self.stats.score}", Colors.YELLOW),
            (f"Level: {self.stats.level}   Time: {self.stats.time}", Colors.UI_TEXT),
            (f"Accuracy: {self.stats.accuracy:.0%}   Best Combo: {self.stats.max_combo}x", Colors.CYAN),
        ]
        y = 190
        for text, color in lines:
            _blit_centered(screen, text, Fonts.MEDIUM, color, (cx, y))
            y += 45

        name = self.player_name + ("" if self.submitted else "_")
        _blit_centered(screen, f"Name: {name}", Fonts.MEDIUM, Colors.UI_TEXT, (cx, y + 20))
        if self.status:
            _blit_centered(screen, self.status, Fonts.SMALL, Colors.LIGHT_GRAY, (cx, y + 60))

        for item in self.items:
            item.render(screen)


class ScreenManager:
    """Holds the active menu or overlay.

    The game calls the ``show_*`` / ``hide_overlays`` notifications; the
    engine routes input to ``handle_input`` and draws with ``render``.

    Attributes:
        screen: The active MenuScreen, or None during plain gameplay
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.screen: Optional[MenuScreen] = StartMenu(width, height)

    # Notifications from the game
    def show_menu(self) -> None:
        self.screen = StartMenu(self.width, self.height)

    def show_pause(self) -> None:
        self.screen = PauseMenu(self.width, self.height)

    def show_doubt(self, media: MediaSnapshot) -> None:
        self.screen = DoubtOverlay(self.width, self.height, media)

    def show_explanation(self, result: ExplanationResult) -> None:
        if isinstance(self.screen, DoubtOverlay):
            self.screen.set_result(result)

    def hide_overlays(self) -> None:
        self.screen = None

    def show_game_over(self, stats: FinalStats) -> None:
        self.screen = GameOverMenu(self.width, self.height, stats)

    def _awaiting(self, screen_type, request_id: int):
        """The active screen if it is waiting for this request, else None."""
        if isinstance(self.screen, screen_type) and self.screen.request_id == request_id:
            return self.screen
        return None

    # Leaderboard screen
    def show_leaderboard(self) -> LeaderboardMenu:
        menu = LeaderboardMenu(self.width, self.height)
        self.screen = menu
        return menu

    def leaderboard_loaded(self, request_id: int, entries: List[LeaderboardEntry]) -> None:
        menu = self._awaiting(LeaderboardMenu, request_id)
        if menu is not None:
            menu.set_entries(entries)

    def leaderboard_failed(self, request_id: int, message: str = "Unable to load leaderboard") -> None:
        menu = self._awaiting(LeaderboardMenu, request_id)
        if menu is not None:
            menu.set_error(message)

    # Score submission
    def submit_succeeded(self, request_id: int, position: int) -> None:
        menu = self._awaiting(GameOverMenu, request_id)
        if menu is not None:
            menu.submit_succeeded(position)

    def submit_failed(self, request_id: int, message: str) -> None:
        menu = self._awaiting(GameOverMenu, request_id)
        if menu is not None:
            menu.submit_failed(message)

    def handle_input(self, events: List[pygame.event.Event]) -> Optional[MenuAction]:
        if self.screen is None:
            return None
        return self.screen.handle_input(events)

    def render(self, screen: pygame.Surface) -> None:
        if self.screen is not None:
            self.screen.render(screen)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
