"""Upload hooks fired after each successful import.

Callbacks are registered on the importer before it runs and are invoked
synchronously, in registration order, with `(media_id, metadata)`. A
failing callback is logged and recorded but never stops the remaining
callbacks or the import.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Mapping
from typing import Any

from .models import MediaId

logger = logging.getLogger(__name__)

UploadHook = Callable[[MediaId, dict[str, str]], Any]


class HookDispatcher:
    """Ordered list of upload callbacks."""

    def __init__(self, hooks: list[UploadHook] | None = None) -> None:
        self._hooks: list[UploadHook] = list(hooks or [])

    def __len__(self) -> int:
        return len(self._hooks)

    def register(self, hook: UploadHook) -> None:
        """Append a callback.

        Raises:
            TypeError: If `hook` is not callable.
        """
        if not callable(hook):
            raise TypeError(f"Upload hook must be callable, got {type(hook).__name__}")
        self._hooks.append(hook)

    def dispatch(
        self,
        media_id: MediaId,
        metadata: Mapping[str, str],
        *,
        url: str | None = None,
    ) -> tuple[str, ...]:
        """Invoke every callback with the new media id and the row metadata.

        Each callback receives its own copy of the metadata. `url` is the
        source the media came from and only appears in failure logs.

        Returns:
            One message per callback that raised, in call order.
        """
        errors: list[str] = []
        for hook in self._hooks:
            name = _hook_name(hook)
            try:
                hook(media_id, dict(metadata))
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    "Upload hook %s failed for media %s from URL: %s", name, media_id, url
                )
                errors.append(f"{name}: {exc}")
        return tuple(errors)


def _hook_name(hook: UploadHook) -> str:
    return getattr(hook, "__qualname__", None) or repr(hook)


def load_hook(reference: str) -> UploadHook:
    """Resolve a `package.module:function` reference to a callable.

    Args:
        reference: Import path and attribute, separated by a colon.

    Returns:
        The referenced callable.

    Raises:
        ValueError: If the reference is malformed or does not name a callable.
        ImportError: If the module cannot be imported.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Hook reference must look like 'package.module:function', got {reference!r}")

    target: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise ValueError(f"{module_name!r} has no attribute {attr_path!r}") from exc

    if not callable(target):
        raise ValueError(f"Hook reference {reference!r} is not callable")
    return target
