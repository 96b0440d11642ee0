"""Topic definitions for absurdio CLI help system."""

from .absurd import ABSURD
from .help_topic import HELP
from .overview import OVERVIEW
from .settings import SETTINGS
from .supervise import SUPERVISE

TOPICS: dict[str, str] = {
    "help": HELP,
    "overview": OVERVIEW,
    "absurd": ABSURD,
    "supervise": SUPERVISE,
    "settings": SETTINGS,
}

__all__ = ["TOPICS"]
