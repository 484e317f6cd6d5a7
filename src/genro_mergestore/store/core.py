# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""MergeStore - A keyed store of mergeable statistical objects.

This module provides the MergeStore class, the owning container of the
genro-mergestore library. For each key tuple (key1, key2, ..., keyN) the store
keeps a collection of named mergeable payloads. Partial stores built by
independent producers are folded together with merge(), and the result is
queried by exact identifiers, key listings and patterns.

Key Features:
    - **Keyed storage**: Canonical key-paths ``/key1/key2/`` map to ordered
      collections of uniquely named payloads
    - **Ownership**: adopt() transfers a payload to the store; merge() and
      project() store clones, never the caller's objects
    - **Merging**: Left fold of any number of stores, combining same-named
      payloads through their merge_in_place() capability
    - **Queries**: Key and name listings, wildcard selection, OR-pattern sums
    - **Traversal**: Restartable two-level iterator and key-path proxies

Identifier Syntax:
    - Key-path: '/key1/key2/' (separators added if missing)
    - Full identifier: '/key1/key2/objectName'
    - Root object: 'objectName' or '/objectName'
    - Derived view: '/key1/objectName:px' (see get_view)

Example:
    Basic usage::

        store = MergeStore('stats')
        store.adopt('/DET/', Counter('hits', 5))
        store.get('/DET/hits').value  # 5

        other = MergeStore('stats')
        other.adopt('/DET/', Counter('hits', 7))
        store.merge([other])
        store.get('/DET/hits').value  # 12
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

from ..config import StoreOptions
from ..diagnostics import PendingMessages
from ..entry import PathEntry
from ..exceptions import (
    AdoptConflictError,
    AttachConflictError,
    MalformedIdentifierError,
    MergeStoreError,
    NotFoundError,
    NotMergeableError,
)
from ..paths import (
    ROOT,
    SEPARATOR,
    canonicalize,
    key_path_of,
    migrate_legacy_key,
    normalize_name,
    object_name_of,
)
from ..payloads import MergeablePayload
from .iterator import StoreIterator
from .maintenance import MaintenanceMixin
from .merging import merge_stores
from .proxy import StoreProxy
from .query import QueryMixin

_logger = logging.getLogger(__name__)

_NOTSET: Any = object()


class MergeStore(QueryMixin, MaintenanceMixin):
    """An owning store of mergeable payloads indexed by key-paths.

    MergeStore provides:
    - adopt(key_path, payload): Insert a payload, taking ownership
    - get(identifier) / store[identifier]: Exact lookups
    - merge(sources): Fold other stores into this one
    - get_sum(pattern), list_keys(level), select(pattern): Queries
    - create_iterator(), create_proxy(key_path): Traversal
    - prune(prefix), project(key_path), attach(...): Maintenance

    Failures are recoverable: they are logged and reported through the
    return value (None/False), and not-found lookups are counted in the
    pending messages. Set ``StoreOptions(raise_on_error=True)`` to have
    adopt, attach and identifier errors raised instead.

    Attributes:
        name: Store name, used to build derived-view names.
        title: Free text description.
        options: The StoreOptions in effect.

    Example:
        >>> store = MergeStore('stats')
        >>> store.adopt('DET', Counter('h', 1))
        True
        >>> store.adopt('/DET/', Counter('h', 2))
        False
        >>> store.get('/DET/h').value
        1
    """

    __slots__ = ('name', 'title', 'options', '_entries', '_messages', '_show_empty')

    def __init__(
        self,
        name: str = '',
        title: str = '',
        source: Mapping | list | MergeStore | None = None,
        options: StoreOptions | None = None,
        legacy_keys: bool = False,
    ) -> None:
        """Initialize a MergeStore.

        Args:
            name: Store name.
            title: Store description.
            source: Optional initial content. Can be:
                - dict: key-path -> payloads (a dict by name or any iterable)
                - list: (key_path, payload) tuples
                - MergeStore: every payload of the other store is cloned
            options: Behaviour switches, StoreOptions() if omitted.
            legacy_keys: If True, source keys are converted from the legacy
                format (``./`` fragments) once, while loading.

        Example:
            >>> MergeStore('s', source={'/A/': [Counter('c', 5)]})
            >>> MergeStore('s', source=[('/A/', Counter('c', 5))])
            >>> MergeStore('copy', source=other_store)
        """
        self.name = name
        self.title = title
        self.options = options if options is not None else StoreOptions()
        self._entries: dict[str, PathEntry] = {}
        self._messages = PendingMessages()
        self._show_empty = self.options.show_empty_objects

        if source is not None:
            self._load_source(source, legacy_keys)

    def _load_source(
        self, source: Mapping | list | MergeStore, legacy_keys: bool
    ) -> None:
        """Load payloads from source into this store.

        Raises:
            TypeError: If source is not a dict, list, or MergeStore.
            ValueError: If a list item is not a (key_path, payload) pair.
        """
        convert = migrate_legacy_key if legacy_keys else canonicalize

        if isinstance(source, MergeStore):
            for entry in source._entries.values():
                target = self._ensure_entry(entry.key_path)
                for payload in entry:
                    target.add(payload.clone())
        elif isinstance(source, Mapping):
            for key, payloads in source.items():
                key_path = convert(key)
                self._ensure_entry(key_path)
                if isinstance(payloads, Mapping):
                    payloads = payloads.values()
                for payload in payloads:
                    self._adopt(key_path, payload)
        elif isinstance(source, list):
            for item in source:
                if not isinstance(item, tuple) or len(item) != 2:
                    raise ValueError(
                        f"source items must be (key_path, payload) tuples, not {item!r}"
                    )
                key, payload = item
                self._adopt(convert(key), payload)
        else:
            raise TypeError(
                f"source must be dict, list, or MergeStore, not {type(source).__name__}"
            )

    # ==================== Special Methods ====================

    def __repr__(self) -> str:
        return (
            f"MergeStore({self.name!r}: {self.number_of_keys()} keys, "
            f"{self.number_of_objects()} objects)"
        )

    def __len__(self) -> int:
        """Return the number of payloads held by the store."""
        return self.number_of_objects()

    def __iter__(self) -> Iterator[MergeablePayload]:
        """Iterate over payloads in the store's traversal order."""
        return self.iter_objects()

    def __contains__(self, identifier: str) -> bool:
        """Check if a full identifier names a stored payload.

        Unlike get(), a miss is not recorded in the pending messages.
        """
        parts = self._split_identifier(identifier, quiet=True)
        if parts is None:
            return False
        return self._lookup(*parts) is not None

    def __getitem__(self, identifier: str) -> MergeablePayload:
        """Get a payload by full identifier.

        Raises:
            NotFoundError: If nothing is stored under identifier.
        """
        payload = self.get(identifier)
        if payload is None:
            raise NotFoundError(identifier)
        return payload

    # ==================== Internals ====================

    def _report(self, exc: MergeStoreError, level: int = logging.ERROR) -> None:
        """Log a recoverable error, or raise it if the options ask to."""
        if self.options.raise_on_error:
            raise exc
        _logger.log(level, '%s', exc)

    def _not_found(self, message: str) -> None:
        self._messages.record(message)
        _logger.debug('%s', message)

    def _ensure_entry(self, key_path: str) -> PathEntry:
        entry = self._entries.get(key_path)
        if entry is None:
            entry = PathEntry(key_path)
            self._entries[key_path] = entry
        return entry

    def _lookup(self, key_path: str, name: str) -> MergeablePayload | None:
        """Find a payload by canonical key-path and name, silently."""
        entry = self._entries.get(key_path)
        if entry is None:
            return None
        return entry.get(name)

    def _split_identifier(
        self, identifier: str, quiet: bool = False
    ) -> tuple[str, str] | None:
        """Split a full identifier into (key_path, object_name).

        Returns None for a malformed identifier, after reporting it unless
        quiet is set.
        """
        if SEPARATOR not in identifier:
            return ROOT, identifier
        if not identifier.startswith(SEPARATOR):
            if not quiet:
                self._report(MalformedIdentifierError(identifier))
            return None
        return key_path_of(identifier), object_name_of(identifier)

    def _adopt(self, key_path: str, payload: Any) -> bool:
        if payload is None:
            self._report(AdoptConflictError('Cannot adopt a null object'))
            return False
        if not isinstance(payload, MergeablePayload):
            self._report(NotMergeableError(
                f'Cannot adopt an object which is not mergeable: '
                f'{type(payload).__name__}'
            ))
            return False

        entry = self._ensure_entry(key_path)
        if payload.name in entry:
            self._report(AdoptConflictError(
                f'Cannot adopt an already existing object : '
                f'{key_path} -> {payload.name}'
            ))
            return False

        entry.add(payload)
        return True

    def _view(
        self, payload: MergeablePayload | None, identifier: str, action: str
    ) -> MergeablePayload | None:
        """Apply a named transform to payload, falling back to payload."""
        if payload is None or not action:
            return payload
        view = payload.transform(action, normalize_name(self.name, identifier, action))
        if view is None:
            _logger.warning(
                '%s (%s) has no %s view', payload.name, payload.type_tag, action
            )
            return payload
        return view

    # ==================== Core API ====================

    def adopt(self, key_path: Any, payload: Any = _NOTSET) -> bool:
        """Adopt a payload at key_path, or at the root if only one argument.

        The store owns the payload on success; the caller must not keep
        mutating it through another handle.

        Args:
            key_path: Key-path such as '/key1/key2/' (canonicalized), or the
                payload itself to adopt it at the root.
            payload: The payload to adopt.

        Returns:
            True if adopted. False if payload is None, not mergeable, or an
            object with the same name already exists at key_path (nothing is
            modified in that case).

        Example:
            >>> store.adopt(Counter('total'))          # root level
            >>> store.adopt('/DET/', Counter('hits'))  # keyed
        """
        if payload is _NOTSET:
            key_path, payload = ROOT, key_path
        return self._adopt(canonicalize(key_path), payload)

    def get(
        self, identifier: str, name: str | None = None
    ) -> MergeablePayload | None:
        """Get a payload by full identifier, or by (key_path, name).

        A miss is recorded in the pending messages and gives None.

        Example:
            >>> store.get('/DET/hits')
            >>> store.get('DET', 'hits')
        """
        if name is None:
            parts = self._split_identifier(identifier)
            if parts is None:
                return None
            key_path, name = parts
        else:
            key_path = canonicalize(identifier)

        entry = self._entries.get(key_path)
        if entry is None:
            self._not_found(f'Did not find key path {key_path} in store {self.name}')
            return None
        payload = entry.get(name)
        if payload is None:
            self._not_found(f'Did not find objectName={name} in {key_path}')
        return payload

    def get_as(self, identifier: str, cls: type) -> Any:
        """Get a payload only if it is an instance of cls, else None."""
        payload = self.get(identifier)
        if isinstance(payload, cls):
            return payload
        return None

    def get_view(self, identifier: str) -> MergeablePayload | None:
        """Get a payload, or a derived view of it.

        The identifier may end with ``:action``; the action (case
        insensitive) is passed to the payload's transform(). For a
        Histogram2D the actions px, py, pfx and pfy give projections and
        profiles. Unsupported actions give the payload itself.

        Example:
            >>> store.get_view('/DET/charge2d:px')
        """
        path, _, action = identifier.partition(':')
        return self._view(self.get(path), path, action.upper())

    def remove(self, identifier: str) -> MergeablePayload | None:
        """Remove a payload and hand it back to the caller.

        The key-path entry is kept even when it becomes empty; use prune()
        to drop entries.

        Returns:
            The removed payload, or None if not found.
        """
        parts = self._split_identifier(identifier)
        if parts is None:
            return None
        key_path, name = parts

        entry = self._entries.get(key_path)
        if entry is None:
            _logger.warning('Could not get entry for key=%s', key_path)
            return None
        if name not in entry:
            _logger.error('Could not find object %s', identifier)
            return None
        return entry.pop(name)

    def attach(
        self,
        other: MergeStore,
        at_path: str,
        prune_if_exists: bool = False,
    ) -> bool:
        """Graft every entry of other under at_path, taking ownership.

        Entries are moved, not copied: other is empty afterwards. The
        operation is all or nothing.

        Args:
            other: The store to drain.
            at_path: Key-path prefix for the grafted entries.
            prune_if_exists: If True, entries under at_path are pruned
                first; otherwise an existing target is a conflict.

        Returns:
            True if attached, False on conflict (nothing moved).
        """
        target = canonicalize(at_path)
        if other is self:
            self._report(AttachConflictError('Cannot attach a store to itself'))
            return False

        grafted = {
            canonicalize(target + key_path): entry
            for key_path, entry in other._entries.items()
        }
        taken = [path for path in (target, *grafted) if path in self._entries]
        if taken:
            if not prune_if_exists:
                self._report(AttachConflictError(
                    f'{target} already exist. Will not overwrite it.'
                ))
                return False
            if not self.prune(target):
                self._report(AttachConflictError(
                    f'Could not prune pre-existing {target}'
                ))
                return False

        for key_path, entry in grafted.items():
            entry.key_path = key_path
            self._entries[key_path] = entry
        other._entries.clear()
        return True

    def merge(self, sources: Iterable[Any] | None) -> int:
        """Fold sources into this store (see merging.merge_stores).

        Returns:
            Number of stores merged, this one included.
        """
        return merge_stores(self, sources)

    # ==================== Traversal ====================

    def create_iterator(self, reverse: bool = False) -> StoreIterator:
        """Create a restartable iterator over (key_path, payload) pairs."""
        return StoreIterator(self, reverse=reverse)

    def iter_items(self, reverse: bool = False) -> Iterator[tuple[str, MergeablePayload]]:
        """Yield (key_path, payload) pairs in traversal order."""
        yield from StoreIterator(self, reverse=reverse)

    def iter_objects(self, reverse: bool = False) -> Iterator[MergeablePayload]:
        """Yield payloads in traversal order."""
        for _, payload in StoreIterator(self, reverse=reverse):
            yield payload

    def create_proxy(
        self, key_path: str, create_if_needed: bool = False
    ) -> StoreProxy | None:
        """Create a proxy rooted at key_path.

        Args:
            key_path: The key-path the proxy works under.
            create_if_needed: If True, a missing key-path entry is created
                and a proxy is always returned.

        Returns:
            StoreProxy, or None if key_path is absent and not created.
        """
        key_path = canonicalize(key_path)
        entry = self._entries.get(key_path)
        if entry is None:
            if not create_if_needed:
                return None
            entry = self._ensure_entry(key_path)
        return StoreProxy(self, entry)

    # ==================== Counting ====================

    def number_of_keys(self) -> int:
        """Return the number of key-path entries, empty ones included."""
        return len(self._entries)

    def number_of_objects(self) -> int:
        """Return the number of payloads (counted by full traversal)."""
        return sum(1 for _ in self.create_iterator())

    # ==================== Copy and lookup ====================

    def clone(self, name: str | None = None) -> MergeStore:
        """Return a deep copy with cloned payloads.

        Pending messages are not copied.
        """
        duplicate = MergeStore(
            self.name if name is None else name,
            self.title,
            source=self,
            options=self.options,
        )
        duplicate._show_empty = self._show_empty
        return duplicate

    def clear(self) -> None:
        """Drop every key-path entry and the payloads it holds."""
        self._entries.clear()

    def find(self, payload: Any) -> MergeablePayload | None:
        """Return the first stored payload equal to payload, or None."""
        _logger.warning(
            'find() scans the whole store; prefer get() with an identifier'
        )
        for stored in self.iter_objects():
            if stored == payload:
                return stored
        return None

    # ==================== Pending messages ====================

    @property
    def messages(self) -> dict[str, int]:
        """Copy of the pending messages (text -> occurrence count)."""
        return self._messages.as_dict()

    def clear_messages(self) -> None:
        self._messages.clear()

    def log_messages(self, prefix: str = '') -> None:
        """Log every pending message with its count at INFO level."""
        self._messages.log(prefix)

    def show_empty_objects(self, show: bool = True) -> None:
        """Turn on (or off) empty payloads in select() and report()."""
        self._show_empty = show
