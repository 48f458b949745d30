"""The possession walkthrough: reading a key you own is not enough.

Replays the classic keyring experiment against an in-memory store:

1. A key added to the user keyring (``@u``) cannot be read from the session
   keyring (``@s``) by its own owner, and cannot be located by name from ``@s``.
2. Linking ``@u`` into ``@s`` makes every key in ``@u`` possessed.
3. Keys added before the link become readable and locatable too.

Each step records what was expected and what happened, so callers (the CLI,
tests) can check that the model behaves like a real keyring.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from keyreach.api import KeyringService, Result
from keyreach.exceptions import ErrorKind

DEFAULT_DEMO_UID = 1000


@dataclass(frozen=True)
class DemoStep:
    """One observed operation of the walkthrough.

    Attributes:
        title: Short description of the operation.
        expected: ``"ok"`` or the ``ErrorKind`` value the step should produce.
        outcome: ``"ok"`` or the ``ErrorKind`` value actually produced.
        detail: Returned value rendered as text, or the error message.
    """

    title: str
    expected: str
    outcome: str
    detail: str

    @property
    def passed(self) -> bool:
        return self.expected == self.outcome

    def as_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "expected": self.expected,
            "outcome": self.outcome,
            "detail": self.detail,
            "passed": self.passed,
        }


def _step(title: str, result: Result, expected: ErrorKind | None = None) -> DemoStep:
    if result.ok:
        value = result.value
        detail = value.decode("utf-8", errors="replace") if isinstance(value, bytes) else str(value)
        outcome = "ok"
    else:
        detail = str(result.error)
        outcome = result.kind.value  # type: ignore[union-attr]
    return DemoStep(
        title=title,
        expected=expected.value if expected is not None else "ok",
        outcome=outcome,
        detail=detail,
    )


def run_possession_demo(uid: Hashable = DEFAULT_DEMO_UID) -> list[DemoStep]:
    """Run the walkthrough for ``uid`` on a fresh store and return its steps."""
    service = KeyringService()
    anchors = service.session(uid)
    user_root, session_root = anchors.user_root, anchors.session_root
    steps: list[DemoStep] = []

    added = service.add(uid, "test-no-link", b"secret1", user_root)
    steps.append(_step("add 'test-no-link' to @u", added))
    first = added.unwrap()
    steps.append(_step(
        "read 'test-no-link' from @s before linking",
        service.read(uid, session_root, first),
        ErrorKind.DENIED,
    ))
    steps.append(_step(
        "locate 'test-no-link' from @s before linking",
        service.locate(uid, "test-no-link", anchor=session_root),
        ErrorKind.NOT_FOUND,
    ))

    steps.append(_step("link @u into @s", service.link(user_root, session_root)))

    added = service.add(uid, "test-with-link", b"secret2", user_root)
    steps.append(_step("add 'test-with-link' to @u", added))
    second = added.unwrap()
    steps.append(_step(
        "read 'test-with-link' from @s", service.read(uid, session_root, second)
    ))
    steps.append(_step(
        "locate 'test-with-link' from @s",
        service.locate(uid, "test-with-link", anchor=session_root),
    ))

    steps.append(_step(
        "read 'test-no-link' from @s after linking", service.read(uid, session_root, first)
    ))
    steps.append(_step(
        "locate 'test-no-link' from @s after linking",
        service.locate(uid, "test-no-link", anchor=session_root),
    ))
    return steps
