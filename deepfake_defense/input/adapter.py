"""
Input adapter for DeepFake Defense.

Translates pygame events and held keys into game actions, gated by the
current game state:

    PLAYING:  arrows / A, D   continuous movement
              Space, left click, touch   SHOOT
              Q        DOUBT
              Escape   PAUSE
    PAUSED (menu):   Escape  RESUME
    PAUSED (doubt):  Enter, Space, Escape  DISMISS
    any state:       M  TOGGLE_MUTE

Menus handle their own navigation; this adapter only covers gameplay.
"""

import time
from typing import Callable, List, Optional, Sequence

import pygame

from models import GameAction, GameState, PauseReason, Point2D
from deepfake_defense.input.input_event import InputEvent

LEFT_KEYS = (pygame.K_LEFT, pygame.K_a)
RIGHT_KEYS = (pygame.K_RIGHT, pygame.K_d)
DISMISS_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE, pygame.K_ESCAPE)


class InputAdapter:
    """Maps raw input to InputEvents.

    Attributes:
        pointer: Last known pointer position, used for the crosshair

    Examples:
        >>> adapter = InputAdapter()
        >>> events = adapter.translate(pygame.event.get(), GameState.PLAYING)
        >>> direction = adapter.movement(pygame.key.get_pressed(), GameState.PLAYING)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self.pointer: Optional[Point2D] = None

    def _event(self, action: GameAction, position: Optional[Point2D] = None) -> InputEvent:
        return InputEvent(action=action, timestamp=self.clock(), position=position)

    def translate(
        self,
        events: Sequence[pygame.event.Event],
        state: GameState,
        pause_reason: Optional[PauseReason] = None,
    ) -> List[InputEvent]:
        """Actions for this frame's events, in order."""
        actions: List[InputEvent] = []
        for event in events:
            if event.type == pygame.MOUSEMOTION:
                self.pointer = Point2D(x=event.pos[0], y=event.pos[1])
                continue

            if event.type == pygame.KEYDOWN and event.key == pygame.K_m:
                actions.append(self._event(GameAction.TOGGLE_MUTE))
                continue

            if state == GameState.PLAYING:
                action = self._playing_action(event)
            elif state == GameState.PAUSED:
                action = self._paused_action(event, pause_reason)
            else:
                action = None
            if action is not None:
                actions.append(action)
        return actions

    def _playing_action(self, event: pygame.event.Event) -> Optional[InputEvent]:
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_SPACE:
                return self._event(GameAction.SHOOT)
            if event.key == pygame.K_q:
                return self._event(GameAction.DOUBT)
            if event.key == pygame.K_ESCAPE:
                return self._event(GameAction.PAUSE)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            # SDL mirrors every touch as a mouse click; FINGERDOWN already shot
            if getattr(event, 'touch', False):
                return None
            position = Point2D(x=event.pos[0], y=event.pos[1])
            self.pointer = position
            return self._event(GameAction.SHOOT, position)
        elif event.type == pygame.FINGERDOWN:
            return self._event(GameAction.SHOOT)
        return None

    def _paused_action(self, event: pygame.event.Event,
                       pause_reason: Optional[PauseReason]) -> Optional[InputEvent]:
        if event.type != pygame.KEYDOWN:
            return None
        if pause_reason == PauseReason.DOUBT:
            if event.key in DISMISS_KEYS:
                return self._event(GameAction.DISMISS)
        elif event.key == pygame.K_ESCAPE:
            return self._event(GameAction.RESUME)
        return None

    def movement(self, pressed, state: GameState) -> int:
        """Continuous movement from held keys: -1 left, 0 none, 1 right.

        Args:
            pressed: Indexable by key code, e.g. ``pygame.key.get_pressed()``
        """
        if state != GameState.PLAYING:
            return 0
        direction = 0
        if any(pressed[key] for key in LEFT_KEYS):
            direction -= 1
        if any(pressed[key] for key in RIGHT_KEYS):
            direction += 1
        return direction
