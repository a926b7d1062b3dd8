"""Model name helpers used when matching free-form model strings to pricing keys.

Vendors spell the same model differently::

    us.anthropic.claude-3-5-haiku-20241022-v1:0   (Bedrock, regional)
    anthropic.claude-3-5-haiku-20241022-v1:0      (Bedrock)
    claude-3-5-haiku-20241022                     (Anthropic API)
    Claude 3.5 Haiku                              (display name)
"""

REGION_PREFIXES = ("us.", "eu.", "apac.")
PROVIDER_PREFIX = "anthropic."

# Separators dropped by normalize_name
_NAME_SEPARATORS = str.maketrans("", "", "-_.:/ ")

# Model aliases tried before any prefix stripping
MODEL_ALIASES = {
    "gpt-5-codex": "gpt-5",
}


def normalize_name(name: str) -> str:
    """Lower-case a model name and drop ``- _ . : /`` and spaces."""
    return name.lower().translate(_NAME_SEPARATORS)


def strip_region_prefix(name: str) -> str:
    """Remove a cross-region inference prefix (``us.``, ``eu.``, ``apac.``)."""
    lowered = name.lower()
    for prefix in REGION_PREFIXES:
        if lowered.startswith(prefix):
            return name[len(prefix):]
    return name


def strip_provider_prefix(name: str) -> str:
    """Remove the ``anthropic.`` provider prefix."""
    if name.startswith(PROVIDER_PREFIX):
        return name[len(PROVIDER_PREFIX):]
    return name
