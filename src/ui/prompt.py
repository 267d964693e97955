"""Operator prompts. Operations take ``obtain_secret`` as a callable so tests can stub it."""
import getpass

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class PromptContext:
    label: str = "Password"
    hint: str = ""

    def text(self) -> str:
        if self.hint:
            return f"{self.label} ({self.hint}): "
        return f"{self.label}: "


SecretSource = Callable[[PromptContext], str]


def obtain_secret(ctx: PromptContext) -> str:
    while True:
        secret = getpass.getpass(ctx.text())
        if secret:
            return secret


def obtain_hint() -> str:
    return input("Hint: ").strip()


def fixed_secret(secret: str) -> SecretSource:
    """Secret source for --passphrase: answers every prompt with the same value."""
    def _source(_ctx: PromptContext) -> str:
        return secret
    return _source
