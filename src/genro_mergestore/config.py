# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Store configuration."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

ENV_PREFIX = 'MERGESTORE_'


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {'1', 'true', 'yes', 'y', 'on'}:
        return True
    if normalized in {'0', 'false', 'no', 'n', 'off'}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class StoreOptions:
    """Behaviour switches of a MergeStore.

    Attributes:
        raise_on_error: If True, identifier errors, adopt conflicts and
            attach conflicts raise their MergeStoreError subclass instead of
            being logged and reported through the return value.
        show_empty_objects: If True, select() and report() include payloads
            whose is_empty() is True.
    """

    raise_on_error: bool = False
    show_empty_objects: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> StoreOptions:
        """Create options from ``MERGESTORE_*`` environment variables.

        Reads ``MERGESTORE_RAISE_ON_ERROR`` and
        ``MERGESTORE_SHOW_EMPTY_OBJECTS``. Keyword arguments win over the
        environment.
        """
        values: dict[str, Any] = {
            'raise_on_error': _env_bool(
                os.environ.get(f'{ENV_PREFIX}RAISE_ON_ERROR'), False
            ),
            'show_empty_objects': _env_bool(
                os.environ.get(f'{ENV_PREFIX}SHOW_EMPTY_OBJECTS'), False
            ),
        }
        values.update(overrides)
        return cls(**values)
