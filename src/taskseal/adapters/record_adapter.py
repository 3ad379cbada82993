"""Record-level encryption for task content.

Applies the field codec to the sensitive attributes of a task and decides
which identifier the key is derived from:

* shared task with a family group id -> group key, so every member can read it
* shared task without a group id     -> plaintext, with a warning
* private task                       -> owner key

When the sharing flag of a stored task changes, fields still encrypted for
the previous audience are decrypted and re-encrypted for the new one.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from taskseal.models import Task, TaskCreate, TaskUpdate
from taskseal.models.crypto import (
    DerivedKey,
    decode_field,
    derive_key,
    derive_key_cached,
    encode_field,
    is_encrypted,
    try_decode_field,
)
from taskseal.utils.logger import get_logger


class _KeyRing:
    """Keys derived lazily for the duration of one adapter call."""

    def __init__(self, cache_keys: bool):
        self._derive = derive_key_cached if cache_keys else derive_key
        self._keys: dict[str, DerivedKey] = {}

    def get(self, identifier: str | None) -> DerivedKey:
        if identifier not in self._keys:
            # derive_key raises MissingKeyIdentifier for an empty identifier
            key = self._derive(identifier)
            self._keys[identifier] = key
        return self._keys[identifier]


class RecordAdapter:
    """Encrypts and decrypts the sensitive fields of task records."""

    def __init__(self, fail_closed: bool = False, cache_keys: bool = False):
        """
        Args:
            fail_closed: Raise EncodeFailure instead of storing plaintext when
                the cipher fails
            cache_keys: Memoise derived keys in process memory
        """
        self.fail_closed = fail_closed
        self.cache_keys = cache_keys
        self._log = get_logger().getChild("adapter")

    @classmethod
    def from_config(cls, config) -> RecordAdapter:
        """Build an adapter from the ``encryption`` section of a Config."""
        return cls(
            fail_closed=config.encryption.fail_closed,
            cache_keys=config.encryption.cache_derived_keys,
        )

    @staticmethod
    def select_key_id(
        shared: bool, owner_key_id: str | None, group_key_id: str | None
    ) -> str | None:
        """Return the identifier to encrypt with, or None for plaintext storage."""
        if shared:
            return group_key_id or None
        return owner_key_id

    @staticmethod
    def _fallback_ids(
        shared: bool, owner_key_id: str | None, group_key_id: str | None
    ) -> list[str]:
        """Identifiers a field may still be encrypted under from its previous audience."""
        other = owner_key_id if shared else group_key_id
        return [other] if other else []

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def _seal_value(
        self,
        value: str | None,
        target_id: str | None,
        fallback_ids: list[str],
        keys: _KeyRing,
    ) -> str | None:
        if not value or not value.strip():
            return value

        if is_encrypted(value):
            if target_id and try_decode_field(value, keys.get(target_id)) is not None:
                return value
            for identifier in fallback_ids:
                decoded = try_decode_field(value, keys.get(identifier))
                if decoded is not None:
                    value = decoded
                    break
            else:
                # Readable by no key we hold; keep the opaque value
                return value

        if target_id is None:
            return value
        return encode_field(value, keys.get(target_id), fail_closed=self.fail_closed)

    def _seal_fields(
        self,
        values: dict[str, Any],
        shared: bool,
        owner_key_id: str | None,
        group_key_id: str | None,
    ) -> dict[str, Any]:
        keys = _KeyRing(self.cache_keys)
        target_id = self.select_key_id(shared, owner_key_id, group_key_id)

        fallback_ids = self._fallback_ids(shared, owner_key_id, group_key_id)

        if shared and target_id is None:
            if any(v and v.strip() for v in values.values()):
                self._log.warning(
                    "Shared task has no family group key, storing content unencrypted"
                )

        return {
            name: self._seal_value(value, target_id, fallback_ids, keys)
            for name, value in values.items()
        }

    def to_storage(
        self, task: Task, owner_key_id: str | None, group_key_id: str | None = None
    ) -> Task:
        """Return a copy of the task with sensitive fields ready for storage.

        Raises:
            MissingKeyIdentifier: If a key is needed but its identifier is empty
            EncodeFailure: If the cipher fails and the adapter is fail-closed
        """
        values = {name: getattr(task, name) for name in Task.SENSITIVE_FIELDS}
        sealed = self._seal_fields(
            values, task.shared_with_family, owner_key_id, group_key_id
        )
        return task.model_copy(update=sealed)

    def to_storage_create(
        self,
        task_data: TaskCreate,
        owner_key_id: str | None,
        group_key_id: str | None = None,
    ) -> TaskCreate:
        """Encrypt the sensitive fields of a new task."""
        values = {name: getattr(task_data, name) for name in TaskCreate.SENSITIVE_FIELDS}
        sealed = self._seal_fields(
            values, task_data.shared_with_family, owner_key_id, group_key_id
        )
        return task_data.model_copy(update=sealed)

    def to_storage_update(
        self,
        updates: TaskUpdate,
        current: Task,
        owner_key_id: str | None,
        group_key_id: str | None = None,
    ) -> dict[str, Any]:
        """Build the store payload for a partial update.

        When the update flips the sharing flag, sensitive fields that the
        update leaves alone are re-keyed from the stored record as well.

        Returns:
            Field dict containing only what has to be written
        """
        fields = updates.to_fields()
        shared = fields.get("shared_with_family")
        if shared is None:
            shared = current.shared_with_family
        audience_changed = shared != current.shared_with_family

        values: dict[str, Any] = {}
        for name in TaskUpdate.SENSITIVE_FIELDS:
            if name in fields:
                values[name] = fields[name]
            elif audience_changed:
                values[name] = getattr(current, name)

        fields.update(self._seal_fields(values, shared, owner_key_id, group_key_id))
        return fields

    # ------------------------------------------------------------------
    # Read path
    # ------------------------------------------------------------------

    def from_storage(
        self, task: Task, owner_key_id: str | None, group_key_id: str | None = None
    ) -> Task:
        """Return a copy of the task with sensitive fields decrypted.

        A field that the selected key cannot open is tried with the key of the
        task's other audience, which covers tasks encrypted before their
        sharing flag last changed. Fields no key can open keep their encoded
        value.

        Raises:
            MissingKeyIdentifier: If a key is needed but its identifier is empty
        """
        keys = _KeyRing(self.cache_keys)
        shared = task.shared_with_family
        key_id = self.select_key_id(shared, owner_key_id, group_key_id)
        if key_id is None:
            key_id = owner_key_id
        fallback_ids = [
            identifier
            for identifier in self._fallback_ids(shared, owner_key_id, group_key_id)
            if identifier != key_id
        ]

        opened = {}
        for name in Task.SENSITIVE_FIELDS:
            value = getattr(task, name)
            if is_encrypted(value):
                opened[name] = self._open_value(value, key_id, fallback_ids, keys)
        return task.model_copy(update=opened)

    def _open_value(
        self, value: str, key_id: str | None, fallback_ids: list[str], keys: _KeyRing
    ) -> str:
        key = keys.get(key_id)
        if fallback_ids:
            for candidate in [key, *(keys.get(i) for i in fallback_ids)]:
                decoded = try_decode_field(value, candidate)
                if decoded is not None:
                    return decoded
        # Logs the failure and hands back the encoded value
        return decode_field(value, key)

    def from_storage_many(
        self,
        tasks: Iterable[Task],
        owner_key_id: str | None,
        group_key_id: str | None = None,
    ) -> list[Task]:
        return [self.from_storage(t, owner_key_id, group_key_id) for t in tasks]
