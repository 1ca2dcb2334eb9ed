import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

# -----------------------------
# Config & Constants
# -----------------------------
APP_TITLE = "Cybersecurity Awareness Bot"
RESPONSES_FILE = "responses.json"
TIPS_FILE = "cybertips.json"            # optional
JOKES_FILE = "jokes.json"               # optional
CHALLENGES_FILE = "challenges.json"     # optional
ASCII_LOGO_FILE = "ascii_logo.txt"      # optional
WELCOME_AUDIO_FILE = "CybersecurityBotGreeting.wav"
LOG_FILE = "cyberbot.log"
CRASH_LOG_FILE = "crash.log"

MAX_COMMAND_HISTORY = 20
DEFAULT_USER_NAME = "Defender"
MAX_NAME_ATTEMPTS = 3
TTS_RATE = 150

BULLET = "•"
COMMANDS = ("help", "joke", "challenge", "exit")
COMMAND_DESCRIPTIONS = {
    "joke": "Hear a cybersecurity-themed joke",
    "challenge": "Take a cybersecurity mini-challenge",
    "help": "Show this help menu",
    "exit": "Close the bot",
}
FEATURED_TOPICS = ("password safety", "phishing", "safe browsing")
HELP_EXAMPLES = ("How are you?", "What's your purpose?", "What can I ask you about?")

# Typing speed presets: (min_delay_ms, max_delay_ms)
SPEED_DIAGNOSTIC = (5, 15)
SPEED_NOTICE = (10, 30)
SPEED_LIST = (10, 25)
SPEED_HEADER = (15, 30)
SPEED_NORMAL = (15, 40)
SPEED_BANNER = (20, 50)
SPEED_JOKE = (25, 60)
SENTENCE_PAUSE_MS = (150, 300)
CLAUSE_PAUSE_MS = (50, 150)
SENTENCE_ENDINGS = ".!?"
CLAUSE_SEPARATORS = ",;:"

# -----------------------------
# Messages
# -----------------------------
EMPTY_INPUT_MESSAGE = "Please enter a command or question. Type 'help' for options."
UNKNOWN_INPUT_MESSAGE = "I didn't quite understand '{text}'. Could you rephrase or type 'help' for available commands?"
NO_QUERY_MESSAGE = "I didn't receive a query. Please ask me something about cybersecurity."
NO_TIPS_MESSAGE = "Sorry, I couldn't find tips for {topic}."
NO_RESPONSE_MESSAGE = (
    "I don't have a specific response for that. Try asking about cybersecurity topics like "
    "'password safety', 'phishing', 'safe browsing', 'data protection', 'mobile device security', "
    "or 'identity protection'."
)
NO_JOKES_MESSAGE = "Sorry, I don't have any jokes available at the moment."
NO_CHALLENGES_MESSAGE = "Sorry, I don't have any challenges available at the moment."
NO_EMOJI = "🤔"
FAREWELL_MESSAGE = "Stay safe online, {user_name}! Logging out..."
CHALLENGE_HINT = "\n(Hint: Think carefully about online safety!)"
WELCOME_SPEECH = "Hello! Welcome to the Cybersecurity Awareness Bot. I'm here to help you stay safe online."

# -----------------------------
# Default content
# -----------------------------
DEFAULT_RESPONSES: Dict[str, str] = {
    "how are you": "I'm functioning optimally and ready to help with cybersecurity awareness!",
    "what's your purpose": "I'm designed to raise cybersecurity awareness and provide helpful tips to keep you safe online.",
    "what can i ask you about": "You can ask me about password safety, phishing, safe browsing, or try commands like 'joke', 'challenge', and 'help'.",
}

DEFAULT_TIPS: Dict[str, List[str]] = {
    "password safety": [
        "Create strong passwords: Use 12+ characters with complexity",
        "Mix uppercase, lowercase, numbers & symbols in passwords",
        "Never reuse passwords across different websites",
        "Use a reputable password manager to generate and store passwords",
        "Enable two-factor authentication for critical accounts",
    ],
    "phishing": [
        "Be extremely cautious of urgent or threatening messages",
        "Always carefully examine sender email addresses",
        "Hover over links to preview the actual destination before clicking",
        "Never share personal or financial information via email",
        "Independently verify requests through official contact channels",
    ],
    "safe browsing": [
        "Always ensure websites use HTTPS before entering sensitive information",
        "Keep browsers, operating systems, and software consistently updated",
        "Avoid conducting sensitive tasks on public or unsecured WiFi networks",
        "Use a reliable VPN when accessing the internet from public networks",
        "Install and regularly update comprehensive antivirus software",
    ],
    "data protection": [
        "Regularly backup important data to multiple locations",
        "Use encryption for sensitive files and communications",
        "Securely delete files you no longer need using specialized tools",
        "Be careful when sharing files online and check permission settings",
        "Use secure cloud storage solutions with strong authentication",
    ],
    "social media security": [
        "Review privacy settings regularly on all platforms",
        "Be selective about accepting connection requests from unknown individuals",
        "Avoid oversharing personal information that could be used for identity theft",
        "Be cautious about third-party applications requesting access to your accounts",
        "Use unique, strong passwords for each social media platform",
    ],
    "mobile device security": [
        "Keep your device and apps updated with the latest security patches",
        "Only download apps from official stores like Google Play or Apple App Store",
        "Review app permissions carefully and limit unnecessary access",
        "Enable remote tracking and wiping features in case your device is lost",
        "Use biometric authentication or strong PIN codes rather than simple patterns",
    ],
    "public wifi safety": [
        "Avoid accessing sensitive accounts or performing financial transactions on public WiFi",
        "Use a VPN when connecting to public networks to encrypt your traffic",
        "Verify network names before connecting to avoid evil twin attacks",
        "Turn off automatic WiFi connection to prevent connecting to rogue networks",
        "Disable file sharing when on public networks to prevent unauthorized access",
    ],
    "malware prevention": [
        "Keep antivirus and anti-malware software updated and run regular scans",
        "Scan email attachments before opening, even if they appear to be from trusted sources",
        "Be cautious about downloading free software, especially from unofficial sources",
        "Watch for signs of infection such as system slowness or unexpected pop-ups",
        "Use specific protection against ransomware, such as frequent backups and restricted permissions",
    ],
    "identity protection": [
        "Monitor your credit reports and financial statements regularly for suspicious activity",
        "Be careful about sharing personal identifiers like SSN, birth date, or address online",
        "Shred sensitive physical documents before disposing of them",
        "Consider using credit freezes or fraud alerts for additional protection",
        "Be alert for signs of identity theft such as unexpected bills or collection notices",
    ],
    "remote work security": [
        "Secure your home network with WPA3 encryption and a strong, unique password",
        "Use your company's VPN when accessing work resources remotely",
        "Keep work and personal activities on separate devices when possible",
        "Follow company security policies, even when working from home",
        "Be extra vigilant about phishing attempts targeting remote workers",
    ],
    "iot device security": [
        "Change default passwords on all smart devices immediately after setup",
        "Keep firmware and software updated on all connected devices",
        "Segment IoT devices on a separate network from your main home network",
        "Disable unnecessary features, services, and connectivity options",
        "Research security features and update policies before purchasing new smart devices",
    ],
}

DEFAULT_JOKES: List[str] = [
    "My friend’s password was ‘incorrect’… now even his laptop roasts him daily!",
    "My antivirus caught a virus… now it needs therapy for trust issues!",
    "Why do cybersecurity experts make great detectives? They're always looking for suspicious activity!",
    "I told my WiFi we need to break up… but it begged me to stay connected!",
    "Why do hackers love dating apps? It’s the easiest way to steal your heart—and your data!",
]

DEFAULT_CHALLENGES: List[str] = [
    "Create a password that's at least 16 characters long!",
    "Spot the potential phishing email in a mock scenario.",
    "Identify three signs of an unsecure website.",
    "List two ways to protect your personal information online.",
    "Explain what two-factor authentication is.",
]

EMOJIS: List[str] = ["🛡️", "🔒", "⚠️", "💻", "🌐", "🔍", "🛡️", "🚫", "🤖", "🔐"]

FALLBACK_LOGO = r"""
  _____      _                                      _ _
 / ____|    | |                                    (_) |
| |    _   _| |__   ___ _ __ ___  ___  ___ _   _ _ __ _| |_ _   _
| |   | | | | '_ \ / _ \ '__/ __|/ _ \/ __| | | | '__| | __| | | |
| |___| |_| | |_) |  __/ |  \__ \  __/ (__| |_| | |  | | |_| |_| |
 \_____\__, |_.__/ \___|_|  |___/\___|\___|\__,_|_|  |_|\__|\__, |
        __/ |                                                __/ |
       |___/     A W A R E N E S S   B O T                  |___/
"""


@dataclass
class AppSettings:
    data_dir: Path = field(default_factory=Path.cwd)
    max_command_history: int = MAX_COMMAND_HISTORY
    default_user_name: str = DEFAULT_USER_NAME
    fallback_logo: str = FALLBACK_LOGO
    animate: bool = True
    audio: bool = True
    log_file: str = LOG_FILE

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AppSettings":
        env = os.environ if environ is None else environ
        settings = cls()
        if env.get("CYBERBOT_DATA_DIR"):
            settings.data_dir = Path(env["CYBERBOT_DATA_DIR"])
        if env.get("CYBERBOT_MAX_HISTORY"):
            try:
                settings.max_command_history = max(1, int(env["CYBERBOT_MAX_HISTORY"]))
            except ValueError:
                pass  # keep the default capacity
        settings.animate = not _flag(env.get("CYBERBOT_NO_ANIMATION"))
        settings.audio = not _flag(env.get("CYBERBOT_NO_AUDIO"))
        return settings

    def path(self, name: str) -> Path:
        return Path(self.data_dir) / name

    @property
    def responses_path(self) -> Path:
        return self.path(RESPONSES_FILE)

    @property
    def tips_path(self) -> Path:
        return self.path(TIPS_FILE)

    @property
    def jokes_path(self) -> Path:
        return self.path(JOKES_FILE)

    @property
    def challenges_path(self) -> Path:
        return self.path(CHALLENGES_FILE)

    @property
    def logo_path(self) -> Path:
        return self.path(ASCII_LOGO_FILE)

    @property
    def audio_path(self) -> Path:
        return self.path(WELCOME_AUDIO_FILE)


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}
