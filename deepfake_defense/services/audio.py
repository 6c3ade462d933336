"""
Audio feedback for DeepFake Defense.

Sounds are generated procedurally with numpy and turned into pygame sounds
through ``pygame.sndarray``, so the game ships no audio assets. Background
music is a short synthesized loop played on a dedicated channel.

Classes:
    AudioManager: Fire-and-forget cues, music control, volume and mute
"""

from typing import Dict, Optional

import numpy as np
import pygame

from models import AudioCue
from deepfake_defense import config
from deepfake_defense.logging import get_logger

log = get_logger('audio')

SAMPLE_RATE = 22050


def _envelope(num_samples: int, fade: float = 0.1) -> np.ndarray:
    """Linear fade in/out to avoid clicks."""
    envelope = np.ones(num_samples)
    fade_samples = max(1, int(num_samples * fade))
    envelope[:fade_samples] = np.linspace(0, 1, fade_samples)
    envelope[-fade_samples:] = np.linspace(1, 0, fade_samples)
    return envelope


def _sweep(freq_start: float, freq_end: float, duration: float,
           amplitude: float = 0.3, square: bool = False) -> np.ndarray:
    """Sine (or square) frequency sweep as a stereo int16 array."""
    num_samples = int(SAMPLE_RATE * duration)
    frequencies = np.linspace(freq_start, freq_end, num_samples)
    phase = np.cumsum(2.0 * np.pi * frequencies / SAMPLE_RATE)
    wave = np.sin(phase)
    if square:
        wave = np.sign(wave)
    wave *= _envelope(num_samples)
    wave = (wave * 32767 * amplitude).astype(np.int16)
    return np.column_stack((wave, wave))


def _music_loop() -> np.ndarray:
    """A slow four-note synth arpeggio, a few seconds long."""
    notes = [220.0, 261.63, 329.63, 261.63]  # A3 C4 E4 C4
    parts = [_sweep(f, f, 0.5, amplitude=0.15) for f in notes]
    return np.concatenate(parts)


class AudioManager:
    """Plays game cues and background music.

    All methods are safe to call when audio is disabled or the mixer failed
    to initialize; they become no-ops.

    Attributes:
        sound_volume: Cue volume in [0, 1]
        music_volume: Music volume in [0, 1]
        muted: Whether all output is silenced

    Examples:
        >>> audio = AudioManager(enabled=False)
        >>> audio.play(AudioCue.HIT)  # silently ignored
    """

    def __init__(
        self,
        enabled: bool = True,
        sound_volume: float = config.SOUND_VOLUME,
        music_volume: float = config.MUSIC_VOLUME,
        muted: bool = config.MUTED,
    ):
        self.enabled = enabled and config.AUDIO_ENABLED
        self.sound_volume = max(0.0, min(1.0, sound_volume))
        self.music_volume = max(0.0, min(1.0, music_volume))
        self.muted = muted
        self.sounds: Dict[AudioCue, pygame.mixer.Sound] = {}
        self.music: Optional[pygame.mixer.Sound] = None
        self._music_channel: Optional[pygame.mixer.Channel] = None

        if self.enabled:
            self._init_audio()

    def _init_audio(self) -> None:
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
            self.sounds = {
                AudioCue.SHOOT: pygame.sndarray.make_sound(_sweep(880.0, 440.0, 0.08, square=True, amplitude=0.15)),
                AudioCue.HIT: pygame.sndarray.make_sound(_sweep(523.25, 659.25, 0.15)),
                AudioCue.MISS: pygame.sndarray.make_sound(_sweep(392.0, 261.63, 0.2)),
                AudioCue.GAME_OVER: pygame.sndarray.make_sound(_sweep(440.0, 110.0, 0.8)),
            }
            self.music = pygame.sndarray.make_sound(_music_loop())
            self._apply_volumes()
        except pygame.error as e:
            log.warning("Audio initialization failed: %s", e)
            self.enabled = False
            self.sounds = {}
            self.music = None

    def _apply_volumes(self) -> None:
        sound_volume = 0.0 if self.muted else self.sound_volume
        music_volume = 0.0 if self.muted else self.music_volume
        for sound in self.sounds.values():
            sound.set_volume(sound_volume)
        if self.music is not None:
            self.music.set_volume(music_volume)

    def play(self, cue: AudioCue) -> None:
        """Play a cue without waiting for it to finish."""
        if not self.enabled or self.muted:
            return
        sound = self.sounds.get(cue)
        if sound is not None:
            sound.play()

    def start_music(self) -> None:
        """Start the music loop from the beginning. Muted music plays at volume 0."""
        if not self.enabled or self.music is None:
            return
        self.stop_music()
        self._music_channel = self.music.play(loops=-1)

    def pause_music(self) -> None:
        if self._music_channel is not None:
            self._music_channel.pause()

    def resume_music(self) -> None:
        if self._music_channel is not None:
            self._music_channel.unpause()

    def stop_music(self) -> None:
        if self._music_channel is not None:
            self._music_channel.stop()
            self._music_channel = None

    def set_sound_volume(self, volume: float) -> None:
        self.sound_volume = max(0.0, min(1.0, volume))
        self._apply_volumes()

    def set_music_volume(self, volume: float) -> None:
        self.music_volume = max(0.0, min(1.0, volume))
        self._apply_volumes()

    def toggle_mute(self) -> bool:
        """Flip mute. Returns the new muted state."""
        self.muted = not self.muted
        self._apply_volumes()
        log.info("Audio %s", "muted" if self.muted else "unmuted")
        return self.muted
