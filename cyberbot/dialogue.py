from dataclasses import dataclass, field
from typing import List

from cyberbot.config import BULLET, COMMANDS, EMPTY_INPUT_MESSAGE, NO_TIPS_MESSAGE, UNKNOWN_INPUT_MESSAGE
from cyberbot.content import ContentStore
from cyberbot.utils import normalize


class ReplyKind:
    EMPTY = 'empty'
    EXIT = 'exit'
    HELP = 'help'
    JOKE = 'joke'
    CHALLENGE = 'challenge'
    TIPS = 'tips'
    RESPONSE = 'response'
    UNKNOWN = 'unknown'


@dataclass
class Reply:
    kind: str
    text: str = ""
    title: str = ""
    lines: List[str] = field(default_factory=list)
    query: str = ""


# -----------------------------
# Dialogue (response resolution)
# -----------------------------
class DialogueManager:
    def __init__(self, content: ContentStore):
        self.content = content

    def respond(self, raw_text: str) -> Reply:
        """Classifies user input and resolves what to say back.

        Order is fixed and the first match wins: reserved commands, then
        topics, then stored responses, then the not-understood message.
        Matching is exact after trimming and case-folding.
        """
        text = normalize(raw_text)
        if not text:
            return Reply(ReplyKind.EMPTY, text=EMPTY_INPUT_MESSAGE)

        if text in COMMANDS:
            return self._command(text)

        if self.content.is_known_topic(text):
            tips = self.content.tips_for(text)
            if not tips:
                return Reply(ReplyKind.TIPS, text=NO_TIPS_MESSAGE.format(topic=text), query=text)
            emoji = self.content.random_emoji()
            return Reply(
                ReplyKind.TIPS,
                title=f"{emoji} {text.upper()} TIPS:",
                lines=[f"{BULLET} {tip}" for tip in tips],
                query=text,
            )

        if self.content.has_response(text):
            return Reply(ReplyKind.RESPONSE, text=self.content.response_for(text), query=text)

        return Reply(ReplyKind.UNKNOWN, text=UNKNOWN_INPUT_MESSAGE.format(text=text), query=text)

    def _command(self, command: str) -> Reply:
        if command == 'joke':
            return Reply(ReplyKind.JOKE, text=self.content.random_joke(), query=command)
        if command == 'challenge':
            return Reply(ReplyKind.CHALLENGE, text=self.content.random_challenge(), query=command)
        if command == 'help':
            return Reply(ReplyKind.HELP, query=command)
        return Reply(ReplyKind.EXIT, query=command)
