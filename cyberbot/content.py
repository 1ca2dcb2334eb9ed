import random
import logging
from typing import Callable, Dict, List, Optional, Tuple

from cyberbot.config import (
    AppSettings, DEFAULT_TIPS, DEFAULT_JOKES, DEFAULT_CHALLENGES, EMOJIS,
    NO_QUERY_MESSAGE, NO_RESPONSE_MESSAGE, NO_JOKES_MESSAGE, NO_CHALLENGES_MESSAGE, NO_EMOJI,
)
from cyberbot.persistence import (
    PathLike, ResponsesNotFoundError, ResponsesFormatError,
    load_responses, load_optional, parse_tips, parse_string_list,
    optional_source, create_default_responses_file,
)
from cyberbot.utils import normalize, is_blank

logger = logging.getLogger(__name__)


# -----------------------------
# Content Store
# -----------------------------
class ContentStore:
    """Topic tips, canned responses, jokes, challenges and emojis.

    Built-in defaults are in place from construction; `load` applies the
    responses file and any optional overrides. After loading the tables are
    treated as read-only.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._tips: Dict[str, List[str]] = self._keyed(DEFAULT_TIPS)
        self._responses: Dict[str, str] = {}
        self._jokes: List[str] = list(DEFAULT_JOKES)
        self._challenges: List[str] = list(DEFAULT_CHALLENGES)
        self._emojis: List[str] = list(EMOJIS)

    @staticmethod
    def _keyed(mapping: Dict[str, object]) -> Dict:
        keyed = {}
        for key, value in mapping.items():
            norm = normalize(key)
            if norm:
                keyed[norm] = list(value) if isinstance(value, list) else value
        return keyed

    def load(
        self,
        responses_source: PathLike,
        tips_source: Optional[PathLike] = None,
        jokes_source: Optional[PathLike] = None,
        challenges_source: Optional[PathLike] = None,
    ) -> "ContentStore":
        # Optional overrides first: their failures are never fatal.
        custom_tips = load_optional(tips_source, parse_tips, "tips")
        if custom_tips is not None:
            self._tips = self._keyed(custom_tips)
            logger.info("Loaded %d custom topics from %s", len(self._tips), tips_source)

        custom_jokes = load_optional(jokes_source, parse_string_list, "jokes")
        if custom_jokes:
            self._jokes = custom_jokes

        custom_challenges = load_optional(challenges_source, parse_string_list, "challenges")
        if custom_challenges:
            self._challenges = custom_challenges

        # Responses are required; errors propagate to the caller.
        self._responses = self._keyed(load_responses(responses_source))
        logger.info("Loaded %d responses from %s", len(self._responses), responses_source)
        return self

    # --- Topics ---
    def topics(self) -> List[str]:
        return list(self._tips.keys())

    def is_known_topic(self, text: str) -> bool:
        if is_blank(text):
            return False
        return normalize(text) in self._tips

    def tips_for(self, text: str) -> List[str]:
        if is_blank(text):
            return []
        return list(self._tips.get(normalize(text), []))

    # --- Responses ---
    def has_response(self, text: str) -> bool:
        if is_blank(text):
            return False
        return normalize(text) in self._responses

    def response_for(self, text: str) -> str:
        if is_blank(text):
            return NO_QUERY_MESSAGE
        return self._responses.get(normalize(text), NO_RESPONSE_MESSAGE)

    # --- Random picks ---
    @property
    def jokes(self) -> Tuple[str, ...]:
        return tuple(self._jokes)

    @property
    def challenges(self) -> Tuple[str, ...]:
        return tuple(self._challenges)

    def random_joke(self) -> str:
        if not self._jokes:
            return NO_JOKES_MESSAGE
        return self.rng.choice(self._jokes)

    def random_challenge(self) -> str:
        if not self._challenges:
            return NO_CHALLENGES_MESSAGE
        return self.rng.choice(self._challenges)

    def random_emoji(self) -> str:
        if not self._emojis:
            return NO_EMOJI
        return self.rng.choice(self._emojis)


def load_content(
    settings: AppSettings,
    notify: Optional[Callable[[str], None]] = None,
    rng: Optional[random.Random] = None,
) -> ContentStore:
    """Builds the content store, recovering once from a missing or broken responses file.

    `notify` receives user-facing status lines. Raises ContentInitError if the
    default responses file cannot be written.
    """
    notify = notify or (lambda message: None)
    sources = dict(
        tips_source=optional_source(settings.tips_path),
        jokes_source=optional_source(settings.jokes_path),
        challenges_source=optional_source(settings.challenges_path),
    )
    responses_path = settings.responses_path

    try:
        return ContentStore(rng).load(responses_path, **sources)
    except ResponsesNotFoundError:
        logger.warning("%s not found, creating a default file", responses_path)
        notify(f"Error: {responses_path.name} file not found. Creating a default file...")
    except ResponsesFormatError as e:
        logger.warning("Could not parse %s: %s", responses_path, e)
        notify(f"Error parsing {responses_path.name}: {e}")
        notify("Creating a default responses file...")

    create_default_responses_file(responses_path)
    return ContentStore(rng).load(responses_path, **sources)
