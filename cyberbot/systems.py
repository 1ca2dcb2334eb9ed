import sys
import logging
from pathlib import Path
from typing import Optional

import pyttsx3

from cyberbot.config import TTS_RATE, WELCOME_SPEECH

logger = logging.getLogger(__name__)


# -----------------------------
# Welcome Audio (optional)
# -----------------------------
class WelcomeAudio:
    """Best-effort greeting: the bundled WAV on Windows, otherwise a spoken line.

    `play` never raises. It returns a short notice for the user when nothing
    could be played, or None when audio started (or is disabled).
    """

    def __init__(self, rate: int = TTS_RATE, enabled: bool = True):
        self.rate = rate
        self.enabled = enabled
        self.tts = None
        self._tts_failed = False

    def _engine(self):
        if self.tts is None and not self._tts_failed:
            try:
                self.tts = pyttsx3.init()
                self.tts.setProperty('rate', self.rate)
            except Exception as e:  # driver errors vary by platform
                logger.info("pyttsx3 initialization failed, TTS will be disabled: %s", e)
                self._tts_failed = True
                self.tts = None
        return self.tts

    def speak(self, text: str) -> bool:
        engine = self._engine()
        if not engine:
            return False
        try:
            engine.say(text)
            engine.runAndWait()
            return True
        except Exception as e:
            logger.warning("Speech playback failed: %s", e)
            return False

    def play(self, wav_path) -> Optional[str]:
        if not self.enabled:
            return None
        path = Path(wav_path)
        try:
            if path.is_file() and sys.platform == 'win32':
                import winsound
                winsound.PlaySound(str(path), winsound.SND_FILENAME | winsound.SND_ASYNC)
                return None
            if self.speak(WELCOME_SPEECH):
                return None
            if path.is_file():
                return "Welcome! Audio playback is only supported on Windows."
            return "Welcome audio file not found. Continuing silently."
        except (RuntimeError, OSError) as e:
            logger.warning("Unable to play welcome audio: %s", e)
            return f"Unable to play welcome audio: {e}"
