"""caniuse-bot: chat webhook relay for caniuse browser-support lookups."""

__version__ = "0.1.0"
