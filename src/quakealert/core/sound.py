"""Synthesized audio alerts and the shared output device handle."""

from dataclasses import dataclass
from types import ModuleType
from typing import Dict, Optional, Union

import numpy as np

from ..config.logging import get_logger
from .models import AlertSound

logger = get_logger(__name__)

PEAK_GAIN = 0.3
FLOOR_GAIN = 0.00001
ATTACK_SECONDS = 0.01
TONE_SECONDS = 0.5


@dataclass(frozen=True)
class ToneProfile:
    """Waveform and pitch contour of one alert sound."""

    waveform: str
    start_hz: float
    end_hz: float
    ramp_seconds: float = 0.0


SOUND_PROFILES: Dict[AlertSound, ToneProfile] = {
    AlertSound.BEEP: ToneProfile("sine", 880.0, 880.0),
    AlertSound.CHIME: ToneProfile("triangle", 1046.5, 1046.5),
    AlertSound.URGENT: ToneProfile("sawtooth", 1200.0, 1000.0, ramp_seconds=0.1),
}


def load_sounddevice() -> ModuleType:
    """Import the PortAudio binding. Raises OSError when PortAudio is missing."""
    import sounddevice

    return sounddevice


class AudioDevice:
    """
    Lazily opened audio output, created once and reused for the process lifetime.

    If the output cannot be opened the device is marked unavailable and every
    later ``play`` is a silent no-op.
    """

    def __init__(self, sample_rate: int = 44100):
        self.sample_rate = sample_rate
        self.device_name: Optional[str] = None
        self.logger = logger.bind(component="audio_device")
        self._backend: Optional[ModuleType] = None
        self._unavailable = False

    @property
    def is_open(self) -> bool:
        return self._backend is not None

    @property
    def unavailable(self) -> bool:
        return self._unavailable

    def _ensure_open(self) -> Optional[ModuleType]:
        if self._backend is not None or self._unavailable:
            return self._backend

        try:
            backend = load_sounddevice()
            info = backend.query_devices(kind="output")
        except Exception as e:  # PortAudio missing or no output device
            self._unavailable = True
            self.logger.warning("Audio output unavailable", error=str(e))
            return None

        self._backend = backend
        self.device_name = info.get("name") if isinstance(info, dict) else None
        self.logger.info(
            "Audio output opened",
            device=self.device_name,
            sample_rate=self.sample_rate,
        )
        return self._backend

    def play(self, samples: np.ndarray) -> bool:
        """Start non-blocking playback. Returns False when nothing was played."""
        backend = self._ensure_open()
        if backend is None:
            return False

        backend.play(samples, samplerate=self.sample_rate, blocking=False)
        return True

    def close(self) -> None:
        """Stop playback and release the handle."""
        if self._backend is None:
            return

        try:
            self._backend.stop()
        except Exception as e:
            self.logger.warning("Failed to stop audio playback", error=str(e))
        finally:
            self._backend = None
            self.logger.info("Audio output closed")


def _frequency_curve(profile: ToneProfile, t: np.ndarray) -> np.ndarray:
    if profile.ramp_seconds <= 0:
        return np.full_like(t, profile.start_hz)

    progress = np.clip(t / profile.ramp_seconds, 0.0, 1.0)
    return profile.start_hz + (profile.end_hz - profile.start_hz) * progress


def _oscillate(waveform: str, phase: np.ndarray) -> np.ndarray:
    # phase is in cycles; every shape starts at zero amplitude
    if waveform == "sine":
        return np.sin(2.0 * np.pi * phase)
    if waveform == "triangle":
        return 1.0 - 4.0 * np.abs(((phase + 0.25) % 1.0) - 0.5)
    if waveform == "sawtooth":
        return 2.0 * ((phase + 0.5) % 1.0) - 1.0
    raise ValueError(f"Unknown waveform: {waveform}")


def envelope(t: np.ndarray) -> np.ndarray:
    """Linear 10 ms attack to the peak, then exponential decay to the floor at 500 ms."""
    attack = PEAK_GAIN * t / ATTACK_SECONDS
    decay_progress = (t - ATTACK_SECONDS) / (TONE_SECONDS - ATTACK_SECONDS)
    decay = PEAK_GAIN * (FLOOR_GAIN / PEAK_GAIN) ** decay_progress
    return np.where(t < ATTACK_SECONDS, attack, decay)


def render_tone(profile: ToneProfile, sample_rate: int = 44100) -> np.ndarray:
    """Render a mono float32 buffer for ``profile``."""
    sample_count = int(round(sample_rate * TONE_SECONDS))
    t = np.arange(sample_count) / sample_rate

    frequency = _frequency_curve(profile, t)
    phase = np.concatenate(([0.0], np.cumsum(frequency[:-1]))) / sample_rate

    return (_oscillate(profile.waveform, phase) * envelope(t)).astype(np.float32)


class SoundSynthesizer:
    """Plays alert sounds on an injected AudioDevice. Never raises from ``play``."""

    def __init__(self, device: AudioDevice):
        self.device = device
        self.logger = logger.bind(component="sound")

    def render(self, sound: Union[AlertSound, str]) -> Optional[np.ndarray]:
        sound = AlertSound(sound)
        if sound == AlertSound.NONE:
            return None
        return render_tone(SOUND_PROFILES[sound], self.device.sample_rate)

    def play(self, sound: Union[AlertSound, str]) -> bool:
        """Play ``sound``; returns whether audio was actually started."""
        try:
            samples = self.render(sound)
            if samples is None:
                return False
            played = self.device.play(samples)
        except Exception as e:
            self.logger.warning("Alert sound playback failed", sound=str(sound), error=str(e))
            return False

        if played:
            self.logger.debug("Alert sound played", sound=AlertSound(sound).value)
        return played
