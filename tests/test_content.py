import json
import random
from collections import Counter

import pytest

from cyberbot.config import (
    DEFAULT_TIPS, DEFAULT_JOKES, DEFAULT_CHALLENGES, DEFAULT_RESPONSES,
    NO_QUERY_MESSAGE, NO_RESPONSE_MESSAGE, NO_JOKES_MESSAGE, NO_CHALLENGES_MESSAGE, NO_EMOJI,
)
from cyberbot.content import ContentStore, load_content
from cyberbot.persistence import (
    ContentInitError, ResponsesFormatError, ResponsesNotFoundError,
    create_default_responses_file, load_responses,
)


@pytest.fixture
def responses_file(write_json):
    return write_json("responses.json", {"How Are You ": "All good!", "what is a vpn": "An encrypted tunnel."})


@pytest.fixture
def store(responses_file, rng):
    return ContentStore(rng).load(responses_file)


@pytest.mark.parametrize("topic", sorted(DEFAULT_TIPS))
def test_default_topics_match_case_insensitively_and_trimmed(store, topic):
    variant = f"  {topic.upper()}\t"
    assert store.is_known_topic(variant)
    assert store.tips_for(variant) == DEFAULT_TIPS[topic]
    assert store.tips_for(variant)


def test_unknown_topic_has_no_tips(store):
    assert not store.is_known_topic("quantum cryptography")
    assert store.tips_for("quantum cryptography") == []
    assert not store.is_known_topic("   ")
    assert store.tips_for("") == []


def test_tips_for_returns_a_copy(store):
    store.tips_for("phishing").append("mutated")
    assert store.tips_for("phishing") == DEFAULT_TIPS["phishing"]


def test_response_keys_are_normalised(store):
    assert store.has_response("how are you")
    assert store.has_response("  HOW ARE YOU")
    assert store.response_for("How are you") == "All good!"


def test_response_fallbacks(store):
    assert not store.has_response("what is the weather")
    assert store.response_for("what is the weather") == NO_RESPONSE_MESSAGE
    assert store.response_for("   ") == NO_QUERY_MESSAGE
    assert not store.has_response("")


def test_tips_override_replaces_the_whole_mapping(responses_file, write_json):
    tips = write_json("cybertips.json", {"Cloud Security": ["Use MFA on the console", "Audit bucket policies"]})
    store = ContentStore().load(responses_file, tips_source=tips)

    assert store.topics() == ["cloud security"]
    assert store.tips_for("cloud security") == ["Use MFA on the console", "Audit bucket policies"]
    assert not store.is_known_topic("password safety")


def test_empty_tips_override_still_replaces(responses_file, write_json):
    tips = write_json("cybertips.json", {})
    store = ContentStore().load(responses_file, tips_source=tips)
    assert store.topics() == []


@pytest.mark.parametrize("payload", ["{not json", {"phishing": "not a list"}, ["a", "b"], {"x": [1, 2]}])
def test_bad_tips_override_keeps_defaults(responses_file, write_json, caplog, payload):
    tips = write_json("cybertips.json", payload)
    store = ContentStore().load(responses_file, tips_source=tips)

    assert store.tips_for("password safety") == DEFAULT_TIPS["password safety"]
    assert "Failed to load custom tips" in caplog.text


def test_jokes_and_challenges_overrides(responses_file, write_json):
    jokes = write_json("jokes.json", ["Only joke"])
    challenges = write_json("challenges.json", ["Only challenge"])
    store = ContentStore().load(responses_file, jokes_source=jokes, challenges_source=challenges)

    assert store.jokes == ("Only joke",)
    assert store.challenges == ("Only challenge",)
    assert store.random_joke() == "Only joke"
    assert store.random_challenge() == "Only challenge"


@pytest.mark.parametrize("payload", [[], "[broken", {"a": "b"}, ["ok", 3]])
def test_empty_or_invalid_list_overrides_keep_defaults(responses_file, write_json, payload):
    jokes = write_json("jokes.json", payload)
    challenges = write_json("challenges.json", payload)
    store = ContentStore().load(responses_file, jokes_source=jokes, challenges_source=challenges)

    assert store.jokes == tuple(DEFAULT_JOKES)
    assert store.challenges == tuple(DEFAULT_CHALLENGES)


def test_missing_optional_source_is_ignored(responses_file, tmp_path):
    store = ContentStore().load(responses_file, tips_source=tmp_path / "nope.json")
    assert store.is_known_topic("phishing")


def test_empty_lists_give_fixed_messages(store):
    store._jokes = []
    store._challenges = []
    store._emojis = []
    assert store.random_joke() == NO_JOKES_MESSAGE
    assert store.random_challenge() == NO_CHALLENGES_MESSAGE
    assert store.random_emoji() == NO_EMOJI


def test_joke_selection_is_uniform(responses_file):
    store = ContentStore(random.Random(42)).load(responses_file)
    trials = 5000
    counts = Counter(store.random_joke() for _ in range(trials))

    assert set(counts) == set(DEFAULT_JOKES)
    expected = trials / len(DEFAULT_JOKES)
    for joke in DEFAULT_JOKES:
        assert abs(counts[joke] - expected) < expected * 0.15


def test_missing_responses_file_raises(tmp_path):
    with pytest.raises(ResponsesNotFoundError):
        ContentStore().load(tmp_path / "responses.json")


@pytest.mark.parametrize("payload", ["{oops", ["how are you"], {"how are you": 42}])
def test_malformed_responses_file_raises(write_json, payload):
    path = write_json("responses.json", payload)
    with pytest.raises(ResponsesFormatError):
        ContentStore().load(path)


def test_default_responses_round_trip(tmp_path):
    path = tmp_path / "responses.json"
    create_default_responses_file(path)

    loaded = load_responses(path)
    assert loaded == DEFAULT_RESPONSES
    store = ContentStore().load(path)
    for question, answer in DEFAULT_RESPONSES.items():
        assert store.response_for(question) == answer


def test_load_content_creates_missing_responses_file(settings):
    messages = []
    store = load_content(settings, notify=messages.append)

    assert settings.responses_path.is_file()
    assert json.loads(settings.responses_path.read_text(encoding="utf-8")) == DEFAULT_RESPONSES
    assert store.has_response("what's your purpose")
    assert messages == ["Error: responses.json file not found. Creating a default file..."]


def test_load_content_recovers_from_malformed_file_and_keeps_backup(settings, write_json):
    write_json("responses.json", "{ this is not json")
    messages = []
    store = load_content(settings, notify=messages.append)

    assert store.has_response("how are you")
    assert messages[0].startswith("Error parsing responses.json:")
    assert messages[1] == "Creating a default responses file..."
    backup = settings.responses_path.with_name("responses.json.bak")
    assert backup.read_text(encoding="utf-8") == "{ this is not json"


def test_load_content_applies_optional_files_that_exist(settings, write_json):
    write_json("responses.json", {"hi": "hello"})
    write_json("jokes.json", ["Custom joke"])
    store = load_content(settings)

    assert store.jokes == ("Custom joke",)
    assert store.is_known_topic("password safety")


def test_load_content_fails_when_default_cannot_be_written(tmp_path):
    from cyberbot.config import AppSettings

    settings = AppSettings(data_dir=tmp_path / "does-not-exist")
    with pytest.raises(ContentInitError):
        load_content(settings)


def test_default_jokes_keep_their_typography(store):
    assert "My friend’s password was ‘incorrect’… now even his laptop roasts him daily!" in store.jokes
    assert "Why do hackers love dating apps? It’s the easiest way to steal your heart—and your data!" in store.jokes
