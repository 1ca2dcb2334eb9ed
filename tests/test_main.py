import io
import json
import sys

import pytest

from cyberbot import main as app
from cyberbot.config import AppSettings, DEFAULT_RESPONSES, FALLBACK_LOGO, MAX_COMMAND_HISTORY
from cyberbot.systems import WelcomeAudio
from cyberbot.terminal import TerminalSession, TypingRenderer


class SilentAudio(WelcomeAudio):
    def __init__(self):
        super().__init__(enabled=True)
        self.played = []

    def play(self, wav_path):
        self.played.append(wav_path)
        return None


def start(settings, lines, rng, sleeper, audio=None):
    output = io.StringIO()
    terminal = TerminalSession(stream=output, stdin=io.StringIO(lines), interactive=False)
    renderer = TypingRenderer(terminal, rng=rng, sleep=sleeper)
    code = app.run(settings, terminal, renderer, audio=audio or SilentAudio(), rng=rng)
    return code, output.getvalue()


def test_first_run_creates_responses_and_completes_session(settings, rng, sleeper):
    audio = SilentAudio()
    code, text = start(settings, "Alice\nhow are you\nexit\n", rng, sleeper, audio)

    assert code == 0
    assert json.loads(settings.responses_path.read_text(encoding="utf-8")) == DEFAULT_RESPONSES
    assert "Error: responses.json file not found. Creating a default file..." in text
    assert FALLBACK_LOGO in text
    assert audio.played == [settings.audio_path]
    assert "Welcome to Cybersecurity Awareness, Alice!" in text
    assert DEFAULT_RESPONSES["how are you"] in text
    assert text.rstrip().endswith("Stay safe online, Alice! Logging out...")


def test_logo_file_is_used_when_present(settings, write_json, rng, sleeper):
    write_json("responses.json", DEFAULT_RESPONSES)
    settings.logo_path.write_text("== CUSTOM LOGO ==", encoding="utf-8")

    code, text = start(settings, "Bo\nexit\n", rng, sleeper)
    assert code == 0
    assert "== CUSTOM LOGO ==" in text
    assert FALLBACK_LOGO not in text


def test_exit_code_is_one_when_content_cannot_be_created(tmp_path, rng, sleeper):
    settings = AppSettings(data_dir=tmp_path / "missing", audio=False)
    code, text = start(settings, "Alice\nexit\n", rng, sleeper)

    assert code == 1
    assert "Unable to initialize the chatbot" in text
    assert "Welcome to Cybersecurity Awareness" not in text


def test_unexpected_startup_error_is_reported_and_logged(settings, rng, sleeper, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(app, "load_content", explode)
    code, text = start(settings, "", rng, sleeper)

    assert code == 1
    assert "Unexpected error initializing chatbot: boom" in text
    assert "Traceback" not in text
    crash_log = (settings.data_dir / "crash.log").read_text(encoding="utf-8")
    assert "RuntimeError: boom" in crash_log
    assert "--- END OF LOG ---" in crash_log


def test_handle_crash_appends(settings):
    for message in ("first", "second"):
        try:
            raise ValueError(message)
        except ValueError as e:
            app.handle_crash(e, settings)

    crash_log = (settings.data_dir / "crash.log").read_text(encoding="utf-8")
    assert crash_log.count("--- CRASH LOG:") == 2
    assert "ValueError: second" in crash_log


def test_main_exit_code(tmp_path, monkeypatch):
    monkeypatch.setenv("CYBERBOT_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CYBERBOT_NO_ANIMATION", "1")
    monkeypatch.setenv("CYBERBOT_NO_AUDIO", "1")
    monkeypatch.setattr(sys, "stdin", io.StringIO("Eve\njoke\nexit\n"))
    monkeypatch.setattr(sys, "stdout", io.StringIO())
    monkeypatch.setattr(app, "setup_logging", lambda settings: None)

    assert app.main() == 0
    assert (tmp_path / "responses.json").is_file()
    assert "Stay safe online, Eve!" in sys.stdout.getvalue()


def test_settings_from_env(tmp_path):
    settings = AppSettings.from_env({
        "CYBERBOT_DATA_DIR": str(tmp_path),
        "CYBERBOT_MAX_HISTORY": "5",
        "CYBERBOT_NO_ANIMATION": "true",
    })
    assert settings.data_dir == tmp_path
    assert settings.responses_path == tmp_path / "responses.json"
    assert settings.max_command_history == 5
    assert not settings.animate
    assert settings.audio


def test_settings_defaults():
    settings = AppSettings.from_env({"CYBERBOT_MAX_HISTORY": "lots"})
    assert settings.max_command_history == MAX_COMMAND_HISTORY
    assert settings.default_user_name == "Defender"
    assert settings.fallback_logo == FALLBACK_LOGO


def test_disabled_audio_is_silent(tmp_path):
    assert WelcomeAudio(enabled=False).play(tmp_path / "greeting.wav") is None


def test_audio_notice_when_file_missing_and_no_speech(tmp_path, monkeypatch):
    audio = WelcomeAudio()
    monkeypatch.setattr(audio, "speak", lambda text: False)
    assert audio.play(tmp_path / "greeting.wav") == "Welcome audio file not found. Continuing silently."


@pytest.mark.skipif(sys.platform == 'win32', reason="the WAV file is played on Windows")
def test_audio_notice_off_windows(tmp_path, monkeypatch):
    wav = tmp_path / "greeting.wav"
    wav.write_bytes(b"RIFF")
    audio = WelcomeAudio()
    monkeypatch.setattr(audio, "speak", lambda text: False)
    assert audio.play(wav) == "Welcome! Audio playback is only supported on Windows."


def test_speech_is_used_when_available(tmp_path, monkeypatch):
    spoken = []
    audio = WelcomeAudio()
    monkeypatch.setattr(audio, "speak", lambda text: spoken.append(text) or True)
    assert audio.play(tmp_path / "missing.wav") is None
    assert spoken


def test_tts_init_failure_disables_speech(monkeypatch):
    def broken_init():
        raise RuntimeError("no driver")

    monkeypatch.setattr("cyberbot.systems.pyttsx3.init", broken_init)
    audio = WelcomeAudio()
    assert audio.speak("hello") is False
    assert audio.speak("again") is False
