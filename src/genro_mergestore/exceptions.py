# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MergeStore exceptions.

None of these escape the public store API unless the store was built with
``raise_on_error=True``; by default they are logged and turned into a
``None``/``False``/empty-string result.
"""

from __future__ import annotations


class MergeStoreError(Exception):
    """Base exception for MergeStore errors."""

    pass


class MalformedIdentifierError(MergeStoreError):
    """Raised when an identifier does not start with the path separator."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(
            f"identifier {identifier} is malformed (should start with /)"
        )


class IndexOutOfRangeError(MergeStoreError, IndexError):
    """Raised when a key level beyond the identifier depth is requested."""

    def __init__(self, identifier: str, index: int, nkeys: int) -> None:
        self.identifier = identifier
        self.index = index
        self.nkeys = nkeys
        super().__init__(
            f"Requiring index {index} of identifier {identifier} "
            f"which only have {nkeys}"
        )


class NotFoundError(MergeStoreError, KeyError):
    """Raised when a key path or object is absent."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"No object at {identifier}")


class AdoptConflictError(MergeStoreError):
    """Raised when an object cannot be adopted (null or duplicate name)."""

    pass


class NotMergeableError(AdoptConflictError, TypeError):
    """Raised when adopting an object without the mergeable capability."""

    pass


class TypeMismatchError(MergeStoreError, TypeError):
    """Raised when merging payloads of different concrete types."""

    def __init__(self, base_tag: str, other_tag: str) -> None:
        self.base_tag = base_tag
        self.other_tag = other_tag
        super().__init__(f"Cannot add {other_tag} to {base_tag}")


class IncompatiblePayloadError(MergeStoreError, ValueError):
    """Raised by a payload whose state cannot absorb another same-typed one."""

    pass


class AttachConflictError(MergeStoreError):
    """Raised when attaching over an existing key path without pruning."""

    pass
