from __future__ import annotations


class ConfigError(ValueError):
    """Raised at startup when the environment describes an unusable configuration."""


class PromptRequiredError(ValueError):
    def __init__(self, message: str = "Prompt is required") -> None:
        super().__init__(message)
        self.message = message
