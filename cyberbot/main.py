import sys
import random
import logging
import traceback
from datetime import datetime
from typing import Optional

from cyberbot.config import AppSettings, APP_TITLE, CRASH_LOG_FILE, SPEED_DIAGNOSTIC, SPEED_NOTICE
from cyberbot.content import ContentStore, load_content
from cyberbot.dialogue import DialogueManager
from cyberbot.persistence import ContentError
from cyberbot.reader import InputReader
from cyberbot.session import SessionLoop, featured_topics, prompt_for_user_name, show_welcome
from cyberbot.systems import WelcomeAudio
from cyberbot.terminal import TerminalError, TerminalSession, TypingRenderer

logger = logging.getLogger("cyberbot")


def setup_logging(settings: AppSettings):
    """File log for diagnostics, stderr only for warnings and worse."""
    root = logging.getLogger("cyberbot")
    root.setLevel(logging.INFO)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter("Warning: %(message)s"))
    root.addHandler(console)

    try:
        file_handler = logging.FileHandler(settings.path(settings.log_file), encoding="utf-8")
    except OSError as e:
        root.warning("Could not open log file: %s", e)
        return
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def handle_crash(e: BaseException, settings: AppSettings):
    """Appends the traceback to the crash log."""
    logger.critical("FATAL ERROR: %s", e)
    log_message = f"--- CRASH LOG: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} ---\n"
    log_message += "".join(traceback.format_exception(type(e), e, e.__traceback__))
    log_message += "\n--- END OF LOG ---\n"
    try:
        with open(settings.path(CRASH_LOG_FILE), "a", encoding="utf-8") as f:
            f.write(log_message)
    except OSError as log_error:
        logger.error("Could not write crash log: %s", log_error)


def display_logo(renderer: TypingRenderer, settings: AppSettings):
    logo_path = settings.logo_path
    try:
        if logo_path.is_file():
            renderer.write(logo_path.read_text(encoding="utf-8"))
        else:
            logger.info("ASCII logo file not found: %s", logo_path)
            renderer.write(settings.fallback_logo)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Error displaying ASCII logo: %s", e)
        renderer.render(f"Error displaying ASCII logo: {e}", *SPEED_DIAGNOSTIC, color='red')
        renderer.write(settings.fallback_logo)


def initialize_content(settings: AppSettings, renderer: TypingRenderer,
                       rng: Optional[random.Random] = None) -> ContentStore:
    return load_content(
        settings,
        notify=lambda message: renderer.render(message, *SPEED_DIAGNOSTIC, color='yellow'),
        rng=rng,
    )


def run(settings: AppSettings, terminal: TerminalSession, renderer: TypingRenderer,
        audio: Optional[WelcomeAudio] = None, rng: Optional[random.Random] = None) -> int:
    """Startup sequence and session. Returns the process exit code."""
    try:
        terminal.set_title(APP_TITLE)
    except TerminalError as e:
        logger.debug("Console title not set: %s", e)

    try:
        content = initialize_content(settings, renderer, rng)
    except ContentError as e:
        logger.error("Content initialization failed: %s", e)
        renderer.render(f"Unable to initialize the chatbot: {e}", *SPEED_DIAGNOSTIC, color='red')
        return 1
    except Exception as e:
        handle_crash(e, settings)
        renderer.render(f"Unexpected error initializing chatbot: {e}", *SPEED_DIAGNOSTIC, color='red')
        return 1

    display_logo(renderer, settings)

    audio = audio or WelcomeAudio(enabled=settings.audio)
    notice = audio.play(settings.audio_path)
    if notice:
        renderer.render(notice, *SPEED_NOTICE)

    user_name = prompt_for_user_name(renderer, terminal, settings.default_user_name)
    show_welcome(renderer, user_name, featured_topics(content))

    reader = InputReader(terminal, capacity=settings.max_command_history)
    session = SessionLoop(DialogueManager(content), renderer, reader, user_name)
    return session.run()


def main() -> int:
    settings = AppSettings.from_env()
    setup_logging(settings)

    with TerminalSession() as terminal:
        renderer = TypingRenderer(terminal, animate=settings.animate)
        try:
            return run(settings, terminal, renderer)
        except KeyboardInterrupt:
            renderer.write()
            renderer.write("Session interrupted. Stay safe online!", color='yellow')
            return 130
        except Exception as e:
            handle_crash(e, settings)
            renderer.render("Oh no, something went wrong. A crash report was saved to 'crash.log'.",
                            *SPEED_DIAGNOSTIC, color='red')
            return 1


if __name__ == "__main__":
    sys.exit(main())
