"""Configuration constants and built-in defaults."""

from typing import Any

# Maximum configuration file size (10 MB)
MAX_CONFIG_SIZE_BYTES = 10 * 1024 * 1024

DEFAULT_CONFIG_FILENAME = "pipepair.yaml"

ENV_PREFIX = "PIPEPAIR_"

# Values used when neither the YAML file nor the environment sets them.
# Pacing delays are seconds slept by a unit after each value it handles.
DEFAULTS: dict[str, Any] = {
    "logging": {
        "level": "info",
        "location": 0,
        "micros": False,
        "colors": True,
    },
    "basic": {
        "lo": 1,
        "hi": 6,
        "pacing": {"producer": 0.03, "consumer": 0.02},
    },
    "pairs": {
        "count": 2,
        "span": 5,
        "start": 1,
        "pacing": {"producer": 0.025, "consumer": 0.02},
    },
}
