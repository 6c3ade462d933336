"""
Game loop orchestrator for DeepFake Defense.

DeepFakeDefense owns the session state (score, lives, level, live entities)
and the state machine over MENU, PLAYING, PAUSED and GAME_OVER. The engine
calls ``update(dt)`` and ``render(screen)`` once per frame; the input adapter
and menus call the action methods.

Per-frame pipeline while PLAYING, in order:

    1. advance game time
    2. move the shooter
    3. timed spawn
    4. advance and cull media items (leaked fakes cost a life)
    5. advance and cull bullets
    6. advance and cull particles
    7. recompute difficulty
    8. resolve collisions

Game time counts only time spent PLAYING, so a pause does not trigger a
burst of spawns on resume.

Collaborators are injected:
    audio: ``play(cue)``, ``start_music()``, ``pause_music()``,
        ``resume_music()``, ``stop_music()``
    ui: ``show_menu()``, ``show_pause()``, ``show_doubt(snapshot)``,
        ``show_explanation(result)``, ``hide_overlays()``,
        ``show_game_over(stats)``
    media_factory: returns a new MediaItem (label and content)
    request_explanation: dispatches an ExplanationRequest asynchronously;
        the answer comes back through ``deliver_explanation``
"""

import functools
import random
import time
from typing import Callable, List, Optional

import pygame

from models import (
    AudioCue,
    ExplanationRequest,
    ExplanationResult,
    FinalStats,
    GameState,
    MediaSnapshot,
    PauseReason,
    format_time,
)
from deepfake_defense.config import (
    Colors,
    DOUBT_REFERENCE_OFFSET,
    EXIT_MARGIN,
    Fonts,
    GRID_SIZE,
    GameSettings,
)
from deepfake_defense.game.collision import Hit, resolve_collisions
from deepfake_defense.game.entities import (
    Bullet,
    DefenseLine,
    MediaItem,
    Particle,
    Shooter,
    make_explosion,
    make_score_popup,
)
from deepfake_defense.game.scoring import ScoreTracker
from deepfake_defense.game.spawner import DifficultyController, Spawner
from deepfake_defense.logging import emit_record, get_logger

log = get_logger('orchestrator')


def _action(method):
    """Defer an action requested while a frame update is running."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self._in_update:
            self._deferred.append(functools.partial(method, self, *args, **kwargs))
            return None
        return method(self, *args, **kwargs)
    return wrapper


class DeepFakeDefense:
    """Session state and per-frame simulation.

    Examples:
        >>> game = DeepFakeDefense(media_factory, audio, ui)
        >>> game.start()
        >>> game.update(1 / 60)
    """

    def __init__(
        self,
        media_factory: Callable[[], MediaItem],
        audio,
        ui,
        request_explanation: Optional[Callable[[ExplanationRequest], None]] = None,
        settings: Optional[GameSettings] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings or GameSettings()
        self.audio = audio
        self.ui = ui
        self.request_explanation = request_explanation
        self.rng = rng or random.Random()
        self.clock = clock

        self.width = self.settings.width
        self.height = self.settings.height

        self.difficulty = DifficultyController(self.settings)
        self.spawner = Spawner(media_factory, self.difficulty, self.width, rng=self.rng)
        self.defense_line = DefenseLine(self.width, self.height)
        self.shooter = Shooter(self.width, self.height, speed=self.settings.shooter_speed)

        self.state = GameState.MENU
        self.pause_reason: Optional[PauseReason] = None
        self.generation = 0

        self.media_items: List[MediaItem] = []
        self.bullets: List[Bullet] = []
        self.particles: List[Particle] = []
        self.tracker = ScoreTracker()
        self.lives = self.settings.initial_lives
        self.game_time_ms = 0.0

        self.move_direction = 0
        self.crosshair: Optional[tuple] = None

        self._next_request_id = 0
        self._pending_doubt: Optional[int] = None
        self.final_stats: Optional[FinalStats] = None

        self._in_update = False
        self._deferred: List[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def score(self) -> int:
        return self.tracker.score

    @property
    def combo(self) -> int:
        return self.tracker.combo

    @property
    def level(self) -> int:
        return self.difficulty.level

    @property
    def pending_doubt(self) -> Optional[int]:
        """Request id of the doubt lookup whose answer may still be shown."""
        return self._pending_doubt

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _reset_session(self) -> None:
        self.generation += 1
        self.media_items.clear()
        self.bullets.clear()
        self.particles.clear()
        self.tracker = ScoreTracker()
        self.lives = self.settings.initial_lives
        self.game_time_ms = 0.0
        self.difficulty.reset()
        self.spawner.reset()
        self.shooter.reset()
        self.move_direction = 0
        self._pending_doubt = None
        self.final_stats = None
        self.pause_reason = None

    @_action
    def start(self) -> None:
        """Begin a new session from the menu."""
        if self.state != GameState.MENU:
            return
        self._begin()

    @_action
    def restart(self) -> None:
        """Begin a new session after game over or from the pause menu."""
        if self.state not in (GameState.GAME_OVER, GameState.PAUSED):
            return
        self._begin()

    def _begin(self) -> None:
        self._reset_session()
        self.state = GameState.PLAYING
        self.ui.hide_overlays()
        self.audio.start_music()
        log.info("Session %d started", self.generation)

    @_action
    def pause(self) -> None:
        if self.state != GameState.PLAYING:
            return
        self._enter_pause(PauseReason.MENU)
        self.ui.show_pause()

    def _enter_pause(self, reason: PauseReason) -> None:
        self.state = GameState.PAUSED
        self.pause_reason = reason
        self.move_direction = 0
        self.audio.pause_music()
        log.debug("Paused (%s)", reason.value)

    @_action
    def resume(self) -> None:
        if self.state != GameState.PAUSED:
            return
        self.state = GameState.PLAYING
        self.pause_reason = None
        self._pending_doubt = None
        self.ui.hide_overlays()
        self.audio.resume_music()
        log.debug("Resumed")

    @_action
    def dismiss_doubt(self) -> None:
        """Close the doubt overlay and continue playing."""
        if self.state == GameState.PAUSED and self.pause_reason == PauseReason.DOUBT:
            self.resume()

    @_action
    def quit(self) -> None:
        """Abandon the session and return to the menu."""
        if self.state == GameState.MENU:
            return
        self._reset_session()
        self.state = GameState.MENU
        self.audio.stop_music()
        self.ui.show_menu()
        log.info("Returned to menu")

    @_action
    def shoot(self) -> None:
        if self.state != GameState.PLAYING:
            return
        x, y = self.shooter.muzzle
        self.bullets.append(Bullet(x, y, speed=self.settings.bullet_speed))
        self.tracker = self.tracker.record_shot()
        self.audio.play(AudioCue.SHOOT)
        self._apply_hits(resolve_collisions(self.bullets, self.media_items))

    @_action
    def request_doubt(self) -> Optional[int]:
        """Ask for an explanation of the item nearest the defense zone.

        Pauses the simulation and shows the doubt overlay right away; the
        explanation arrives later through ``deliver_explanation``.

        Returns:
            The request id, or None when nothing is on screen
        """
        if self.state != GameState.PLAYING:
            return None
        item = self.find_closest_media_item()
        if item is None:
            return None

        self._next_request_id += 1
        request = ExplanationRequest(
            request_id=self._next_request_id,
            generation=self.generation,
            media=MediaSnapshot(type=item.type, content=item.content, is_fake=item.is_fake),
        )
        self._pending_doubt = request.request_id
        self._enter_pause(PauseReason.DOUBT)
        self.ui.show_doubt(request.media)
        if self.request_explanation is not None:
            self.request_explanation(request)
        log.debug("Doubt request %d for %r", request.request_id, item)
        return request.request_id

    def deliver_explanation(self, result: ExplanationResult) -> bool:
        """Show an explanation if it answers the current doubt request.

        Answers from an earlier session or for a superseded or dismissed
        request are dropped.

        Returns:
            True when the explanation was shown
        """
        if result.generation != self.generation or result.request_id != self._pending_doubt:
            log.debug("Dropping stale explanation %d (generation %d)",
                      result.request_id, result.generation)
            return False
        self.ui.show_explanation(result)
        return True

    def set_movement(self, direction: int) -> None:
        """Continuous movement input: -1 left, 0 none, 1 right."""
        self.move_direction = max(-1, min(1, direction))

    def find_closest_media_item(self) -> Optional[MediaItem]:
        """Live item whose y is nearest ``height - 100``; first wins ties."""
        if not self.media_items:
            return None
        target = self.height - DOUBT_REFERENCE_OFFSET
        return min(self.media_items, key=lambda item: abs(item.y - target))

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.spawner.width = width
        self.defense_line.resize(width, height)
        self.shooter.resize(width, height)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        """Run one frame of the pipeline.

        Args:
            dt: Seconds since the previous frame
        """
        if self.state != GameState.PLAYING:
            return
        self._in_update = True
        try:
            self._step(dt)
        finally:
            self._in_update = False
        self._run_deferred()

    def _run_deferred(self) -> None:
        while self._deferred:
            self._deferred.pop(0)()

    def _step(self, dt: float) -> None:
        self.game_time_ms += dt * 1000.0

        self.shooter.move(self.move_direction)

        item = self.spawner.try_spawn(self.game_time_ms)
        if item is not None:
            self.media_items.append(item)

        if not self._update_media_items():
            return

        for bullet in self.bullets:
            bullet.update()
        self.bullets = [b for b in self.bullets if not b.is_off_screen]

        for particle in self.particles:
            particle.update()
        self.particles = [p for p in self.particles if not p.is_dead]

        self.difficulty.update(self.game_time_ms)

        self._apply_hits(resolve_collisions(self.bullets, self.media_items))

    def _update_media_items(self) -> bool:
        """Advance items and handle leaks. Returns False on game over."""
        now_s = self.clock()
        bottom = self.height + EXIT_MARGIN
        survivors = []
        for index, item in enumerate(self.media_items):
            item.update(now_s)
            if item.y <= bottom:
                survivors.append(item)
                continue
            if not item.is_fake:
                continue
            self.lives -= 1
            self.tracker = self.tracker.record_leak()
            self.audio.play(AudioCue.MISS)
            log.debug("Fake leaked, %d lives left", self.lives)
            if self.lives <= 0:
                # Items after the leak stay where they are for the final frame
                self.media_items = survivors + self.media_items[index + 1:]
                self._game_over()
                return False
        self.media_items = survivors
        return True

    def _apply_hits(self, hits: List[Hit]) -> None:
        for hit in hits:
            x, y = hit.bullet.x, hit.bullet.y
            self.particles.extend(make_explosion(x, y, rng=self.rng))
            if hit.item.is_fake:
                self.tracker = self.tracker.record_correct_hit()
                self.audio.play(AudioCue.HIT)
                self.particles.append(make_score_popup(x, y, "+10"))
            else:
                self.tracker = self.tracker.record_wrong_hit()
                self.audio.play(AudioCue.MISS)
                self.particles.append(make_score_popup(x, y, "-5"))

    def _game_over(self) -> None:
        self.state = GameState.GAME_OVER
        self.move_direction = 0
        self._pending_doubt = None
        self.audio.stop_music()
        self.audio.play(AudioCue.GAME_OVER)

        stats = self.tracker.get_stats()
        self.final_stats = FinalStats(
            score=stats.score,
            level=self.level,
            time_ms=int(self.game_time_ms),
            accuracy=stats.accuracy,
            max_combo=stats.max_combo,
        )
        log.info("Game over: score=%d level=%d time=%s",
                 stats.score, self.level, self.final_stats.time)
        emit_record('session', {
            'type': 'game_over',
            'generation': self.generation,
            **self.final_stats.model_dump(),
            'correct_hits': stats.correct_hits,
            'wrong_hits': stats.wrong_hits,
            'leaked_fakes': stats.leaked_fakes,
            'shots_fired': stats.shots_fired,
        })
        self.ui.show_game_over(self.final_stats)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, screen: pygame.Surface) -> None:
        """Draw the field and HUD. Does not modify game state."""
        screen.fill(Colors.BACKGROUND)
        self._render_grid(screen)
        self.defense_line.render(screen)
        for item in self.media_items:
            item.render(screen)
        for bullet in self.bullets:
            bullet.render(screen)
        for particle in self.particles:
            particle.render(screen)
        self.shooter.render(screen)
        self._render_crosshair(screen)
        self._render_hud(screen)

    def _render_grid(self, screen: pygame.Surface) -> None:
        for x in range(0, self.width, GRID_SIZE):
            pygame.draw.line(screen, Colors.GRID, (x, 0), (x, self.height))
        for y in range(0, self.height, GRID_SIZE):
            pygame.draw.line(screen, Colors.GRID, (0, y), (self.width, y))

    def _render_crosshair(self, screen: pygame.Surface) -> None:
        if self.crosshair is not None:
            cx, cy = self.crosshair
        else:
            cx, cy = self.shooter.x, self.shooter.y - 120
        cx, cy = int(cx), int(cy)
        pygame.draw.circle(screen, Colors.CYAN, (cx, cy), 12, 1)
        pygame.draw.line(screen, Colors.CYAN, (cx - 18, cy), (cx + 18, cy))
        pygame.draw.line(screen, Colors.CYAN, (cx, cy - 18), (cx, cy + 18))

    def _render_hud(self, screen: pygame.Surface) -> None:
        if not pygame.font.get_init():
            pygame.font.init()
        font = pygame.font.Font(None, Fonts.HUD)
        lines = [
            f"SCORE: {self.score}",
            f"COMBO: x{self.combo}",
            f"LEVEL: {self.level}",
            f"TIME: {format_time(self.game_time_ms)}",
        ]
        for i, line in enumerate(lines):
            surface = font.render(line, True, Colors.UI_TEXT)
            screen.blit(surface, (10, 10 + i * (Fonts.HUD + 2)))

        lives = font.render(f"LIVES: {max(0, self.lives)}", True, Colors.RED)
        screen.blit(lives, lives.get_rect(topright=(self.width - 10, 10)))
