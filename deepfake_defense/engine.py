"""
Main game engine for DeepFake Defense.

This module provides the pygame loop, wires the collaborators together and
routes input to the game and menus.
"""

import itertools
from typing import Optional

import pygame

from models import ExplanationRequest, ExplanationResult, GameAction, GameState
from deepfake_defense import config
from deepfake_defense.config import GameSettings
from deepfake_defense.game.menu import GameOverMenu, MenuAction, ScreenManager
from deepfake_defense.game.orchestrator import DeepFakeDefense
from deepfake_defense.input.adapter import InputAdapter
from deepfake_defense.input.input_event import InputEvent
from deepfake_defense.logging import close_all_sinks, create_sink, get_logger, register_sink
from deepfake_defense.services.ai import ExplanationProvider
from deepfake_defense.services.audio import AudioManager
from deepfake_defense.services.leaderboard_client import LeaderboardClient, LeaderboardError
from deepfake_defense.services.media_provider import MediaLibrary
from deepfake_defense.services.tasks import BackgroundRunner, TaskResult

log = get_logger('engine')

UNAVAILABLE_TEXT = "AI analysis temporarily unavailable."


class GameEngine:
    """Owns the window, clock and collaborators; runs the frame loop.

    Each frame:
        1. deliver finished background work (explanations, leaderboard)
        2. handle events (menus, game actions, held movement keys)
        3. update the game
        4. render the game and the active screen

    Examples:
        >>> engine = GameEngine()
        >>> engine.run()
    """

    def __init__(
        self,
        width: int = config.SCREEN_WIDTH,
        height: int = config.SCREEN_HEIGHT,
        fps: int = config.FPS,
        audio_enabled: bool = True,
        api_url: Optional[str] = None,
    ):
        pygame.init()
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption("DeepFake Defense")
        self.clock = pygame.time.Clock()
        self.fps = fps
        self.running = True

        self.runner = BackgroundRunner()
        self.runner.start()
        self._request_ids = itertools.count(1)

        self.library = MediaLibrary.from_directory()
        self.explainer = ExplanationProvider(library=self.library)
        self.leaderboard = LeaderboardClient(base_url=api_url or config.API_BASE_URL)
        self.audio = AudioManager(enabled=audio_enabled)
        self.ui = ScreenManager(width, height)
        self.input = InputAdapter()

        self.game = DeepFakeDefense(
            media_factory=self.library.get_random_media,
            audio=self.audio,
            ui=self.ui,
            request_explanation=self.request_explanation,
            settings=GameSettings(width=width, height=height),
        )

        register_sink('session', create_sink('session'))
        log.info("Engine ready (%dx%d @ %d fps)", width, height, fps)

    # ------------------------------------------------------------------
    # Background work
    # ------------------------------------------------------------------

    def request_explanation(self, request: ExplanationRequest) -> None:
        self.runner.submit('explanation', self.explainer.explain(request),
                           request_id=request.request_id, generation=request.generation)

    def process_results(self) -> None:
        """Route finished background tasks. Runs at the start of each frame."""
        for result in self.runner.drain():
            if result.kind == 'explanation':
                self._deliver_explanation(result)
            elif result.generation != self.game.generation:
                log.debug("Dropping stale %s result %d (generation %d)",
                          result.kind, result.request_id, result.generation)
            elif result.kind == 'leaderboard':
                if result.ok:
                    self.ui.leaderboard_loaded(result.request_id, result.value)
                else:
                    self.ui.leaderboard_failed(result.request_id)
            elif result.kind == 'submit':
                if result.ok:
                    self.ui.submit_succeeded(result.request_id, result.value.get('position', 0))
                elif isinstance(result.error, LeaderboardError):
                    self.ui.submit_failed(result.request_id, str(result.error))
                else:
                    self.ui.submit_failed(result.request_id, "Failed to submit score. Please try again.")

    def _submit_for_screen(self, kind: str, coro, screen) -> None:
        """Run a leaderboard request whose result belongs to ``screen``."""
        screen.request_id = next(self._request_ids)
        self.runner.submit(kind, coro, request_id=screen.request_id,
                           generation=self.game.generation)

    def _deliver_explanation(self, result: TaskResult) -> None:
        if result.ok:
            self.game.deliver_explanation(result.value)
            return
        self.game.deliver_explanation(ExplanationResult(
            request_id=result.request_id,
            generation=result.generation,
            text=UNAVAILABLE_TEXT,
            fallback=True,
        ))

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_events(self) -> None:
        events = pygame.event.get()

        for event in events:
            if event.type == pygame.QUIT:
                self.running = False
                return
            if event.type == pygame.VIDEORESIZE:
                self.resize(event.w, event.h)

        state = self.game.state
        menu_action = None
        if state != GameState.PLAYING:
            menu_action = self.ui.handle_input(events)

        # Typed characters on the game over screen belong to the name field
        if state != GameState.GAME_OVER:
            for action in self.input.translate(events, state, self.game.pause_reason):
                self.apply_action(action)

        if menu_action is not None:
            self.apply_menu_action(menu_action)

        self.game.set_movement(self.input.movement(pygame.key.get_pressed(), self.game.state))
        if self.input.pointer is not None:
            self.game.crosshair = (self.input.pointer.x, self.input.pointer.y)

    def apply_action(self, event: InputEvent) -> None:
        action = event.action
        if action == GameAction.SHOOT:
            self.game.shoot()
        elif action == GameAction.DOUBT:
            self.game.request_doubt()
        elif action == GameAction.PAUSE:
            self.game.pause()
        elif action == GameAction.RESUME:
            self.game.resume()
        elif action == GameAction.DISMISS:
            self.game.dismiss_doubt()
        elif action == GameAction.TOGGLE_MUTE:
            self.audio.toggle_mute()

    def apply_menu_action(self, action: MenuAction) -> None:
        if action == MenuAction.START_GAME:
            self.game.start()
        elif action == MenuAction.SHOW_LEADERBOARD:
            menu = self.ui.show_leaderboard()
            self._submit_for_screen('leaderboard', self.leaderboard.fetch(limit=10), menu)
        elif action == MenuAction.QUIT_GAME:
            self.running = False
        elif action == MenuAction.RESUME:
            self.game.resume()
        elif action == MenuAction.RESTART:
            self.game.restart()
        elif action == MenuAction.DISMISS:
            self.game.dismiss_doubt()
        elif action == MenuAction.MAIN_MENU:
            if self.game.state == GameState.MENU:
                self.ui.show_menu()
            else:
                self.game.quit()
        elif action == MenuAction.SUBMIT_SCORE:
            menu = self.ui.screen
            if isinstance(menu, GameOverMenu):
                self._submit_for_screen(
                    'submit', self.leaderboard.submit(menu.player_name.strip(), menu.stats), menu)

    def resize(self, width: int, height: int) -> None:
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.game.resize(width, height)
        self.ui.resize(width, height)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def render(self) -> None:
        if self.game.state == GameState.MENU:
            self.ui.render(self.screen)
        else:
            self.game.render(self.screen)
            self.ui.render(self.screen)
        pygame.display.flip()

    def run(self) -> None:
        """Run the main game loop until the window is closed."""
        try:
            while self.running:
                dt = self.clock.tick(self.fps) / 1000.0
                self.process_results()
                self.handle_events()
                self.game.update(dt)
                self.render()
        finally:
            self.quit()

    def quit(self) -> None:
        """Shut down background work, audio and pygame."""
        self.audio.stop_music()
        self.runner.stop()
        close_all_sinks()
        pygame.quit()
