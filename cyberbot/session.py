import logging
from typing import Iterable, List

from cyberbot.config import (
    BULLET, COMMANDS, COMMAND_DESCRIPTIONS, FEATURED_TOPICS, HELP_EXAMPLES, MAX_NAME_ATTEMPTS,
    FAREWELL_MESSAGE, CHALLENGE_HINT,
    SPEED_NOTICE, SPEED_LIST, SPEED_HEADER, SPEED_NORMAL, SPEED_BANNER, SPEED_JOKE,
)
from cyberbot.content import ContentStore
from cyberbot.dialogue import DialogueManager, Reply, ReplyKind
from cyberbot.reader import InputReader
from cyberbot.terminal import TerminalSession, TypingRenderer

logger = logging.getLogger(__name__)


# -----------------------------
# Screens
# -----------------------------
def featured_topics(content: ContentStore) -> List[str]:
    """Topics advertised on the welcome banner: the classic three when available."""
    topics = [t for t in FEATURED_TOPICS if content.is_known_topic(t)]
    return topics or content.topics()[:len(FEATURED_TOPICS)]


def show_welcome(renderer: TypingRenderer, user_name: str, topics: Iterable[str]):
    border = "=" * 60
    renderer.write(border)
    renderer.render(f"Welcome to Cybersecurity Awareness, {user_name}!", *SPEED_BANNER, color='green')
    renderer.render("I'm here to help you stay safe in the digital world.", *SPEED_BANNER)
    renderer.write(border)

    renderer.write()
    renderer.render("Available topics:", *SPEED_NORMAL, color='cyan')
    renderer.pause(300)
    for topic in topics:
        renderer.render(f"{BULLET} {topic} - Get tips on {topic}", 15, 30)

    renderer.write()
    renderer.render("Type 'joke' for a humor break!", *SPEED_NORMAL)
    renderer.render("Type 'challenge' for a cybersecurity mini-challenge!", *SPEED_NORMAL)
    renderer.render("Type 'help' to see available commands", *SPEED_NORMAL)
    renderer.render("Type 'exit' to quit", *SPEED_NORMAL)
    renderer.write()


def show_help(renderer: TypingRenderer, topics: Iterable[str]):
    border = "-" * 50
    renderer.write("\n" + border)
    renderer.render("AVAILABLE COMMANDS:", *SPEED_HEADER, color='cyan')
    renderer.write(border)
    for topic in topics:
        renderer.render(f"{BULLET} {topic} - Get tips on {topic}", *SPEED_LIST)
    for command in COMMANDS:
        description = COMMAND_DESCRIPTIONS.get(command, "Command")
        renderer.render(f"{BULLET} {command} - {description}", *SPEED_LIST)
    renderer.write(border)
    renderer.render("You can also ask me questions like:", *SPEED_HEADER, color='cyan')
    for example in HELP_EXAMPLES:
        renderer.render(f"{BULLET} {example}", *SPEED_LIST)
    renderer.write(border)


def prompt_for_user_name(renderer: TypingRenderer, terminal: TerminalSession, default_name: str,
                         max_attempts: int = MAX_NAME_ATTEMPTS) -> str:
    user_name = ""
    attempts = 0
    while not user_name and attempts < max_attempts:
        attempts += 1
        renderer.render("What's your name, cyber defender? ", *SPEED_NORMAL, newline=False)
        try:
            user_name = terminal.readline().strip()
        except EOFError:
            renderer.write()
            break
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error reading username input: %s", e)
            user_name = ""

        if not user_name and attempts < max_attempts:
            renderer.render("I didn't catch that. Let's try again.", *SPEED_NORMAL, color='yellow')

    if not user_name:
        renderer.render(f"I'll call you {default_name}.", *SPEED_NORMAL, color='yellow')
        user_name = default_name
    return user_name


# -----------------------------
# Session Loop
# -----------------------------
class SessionLoop:
    """Prompt, read, classify, render; repeat until the user types 'exit'."""

    def __init__(self, dialogue: DialogueManager, renderer: TypingRenderer, reader: InputReader, user_name: str):
        self.dialogue = dialogue
        self.renderer = renderer
        self.reader = reader
        self.user_name = user_name
        self.running = False
        self._handlers = {
            ReplyKind.EMPTY: self._show_empty,
            ReplyKind.EXIT: self._show_exit,
            ReplyKind.HELP: self._show_help,
            ReplyKind.JOKE: self._show_joke,
            ReplyKind.CHALLENGE: self._show_challenge,
            ReplyKind.TIPS: self._show_tips,
            ReplyKind.RESPONSE: self._show_response,
            ReplyKind.UNKNOWN: self._show_unknown,
        }

    @property
    def content(self) -> ContentStore:
        return self.dialogue.content

    def run(self) -> int:
        self.running = True
        while self.running:
            try:
                raw = self.reader.read_line(self.user_name)
            except EOFError:
                # End of input behaves like 'exit'
                self.renderer.write()
                self.handle("exit")
                break
            self.handle(raw)
        return 0

    def handle(self, raw_text: str) -> Reply:
        reply = self.dialogue.respond(raw_text)
        logger.debug("Input %r classified as %s", reply.query, reply.kind)
        self._handlers[reply.kind](reply)
        return reply

    # --- Reply rendering ---
    def _show_empty(self, reply: Reply):
        self.renderer.render(reply.text, *SPEED_NOTICE)

    def _show_exit(self, reply: Reply):
        self.renderer.render(FAREWELL_MESSAGE.format(user_name=self.user_name), *SPEED_NORMAL, color='green')
        self.running = False

    def _show_help(self, reply: Reply):
        show_help(self.renderer, self.content.topics())

    def _show_joke(self, reply: Reply):
        self.renderer.write()
        self.renderer.render("Cybersecurity Joke Time!", *SPEED_BANNER, color='magenta')
        self.renderer.pause(500)
        self.renderer.render(reply.text, *SPEED_JOKE)

    def _show_challenge(self, reply: Reply):
        self.renderer.write()
        self.renderer.render("Cybersecurity Challenge!", *SPEED_BANNER, color='magenta')
        self.renderer.pause(500)
        self.renderer.render(reply.text, *SPEED_BANNER)
        self.renderer.render(CHALLENGE_HINT, *SPEED_NORMAL)

    def _show_tips(self, reply: Reply):
        if not reply.lines:
            self.renderer.render(reply.text, *SPEED_NORMAL, color='yellow')
            return
        self.renderer.write()
        self.renderer.render(reply.title, *SPEED_BANNER, color='cyan')
        for line in reply.lines:
            self.renderer.render(line, *SPEED_NORMAL)
            self.renderer.pause(200)

    def _show_response(self, reply: Reply):
        self.renderer.render(reply.text, *SPEED_NORMAL)

    def _show_unknown(self, reply: Reply):
        self.renderer.render(reply.text, *SPEED_NORMAL, color='yellow')
