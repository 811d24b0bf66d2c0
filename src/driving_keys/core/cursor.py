"""
KeyCursor - walks the keys of one job run and tracks its checkpoint.
"""

import logging
from typing import Any, Iterator, Mapping, Optional, Union

from .generator import KeyGenerator
from .key import Checkpoint, Key

logger = logging.getLogger(__name__)


class KeyCursor:
    """
    Iterates the keys of a KeyGenerator for a single job run.

    A fresh run (no checkpoint, or an empty one) loads keys with
    retrieve_keys(); a restart loads them with restore_keys(). After each key
    is handed out, ``checkpoint`` reflects it, so the job can persist
    ``cursor.checkpoint.to_dict()`` once the key has been processed.

    Example:
        >>> saved = load_checkpoint()  # None on the first run
        >>> cursor = KeyCursor(generator, checkpoint=saved)
        >>> for key in cursor:
        ...     process(key)
        ...     save_checkpoint(cursor.checkpoint.to_dict())
    """

    def __init__(
        self,
        generator: KeyGenerator,
        checkpoint: Optional[Union[Checkpoint, Mapping[str, Any]]] = None,
    ):
        self.generator = generator
        self.start = Checkpoint.from_dict(checkpoint)
        self._keys: Optional[list[Key]] = None
        self._position = 0
        self._last: Optional[Key] = None

    @property
    def is_restart(self) -> bool:
        """True when the cursor resumes from a non-empty checkpoint."""
        return not self.start.is_empty

    def open(self) -> "KeyCursor":
        """
        Load the key list, replacing any previously loaded one.

        Returns:
            This cursor, for chaining
        """
        if self.is_restart:
            self._keys = self.generator.restore_keys(self.start)
        else:
            self._keys = self.generator.retrieve_keys()

        self._position = 0
        self._last = None
        logger.info(
            f"Opened key cursor ({'restart' if self.is_restart else 'fresh run'}) "
            f"with {len(self._keys)} keys"
        )
        return self

    @property
    def checkpoint(self) -> Checkpoint:
        """Checkpoint of the last key handed out, or the starting checkpoint."""
        if self._last is None:
            return self.start
        return self.generator.checkpoint_for(self._last)

    @property
    def remaining(self) -> int:
        """Number of loaded keys not yet handed out."""
        if self._keys is None:
            return 0
        return len(self._keys) - self._position

    def __iter__(self) -> Iterator[Key]:
        if self._keys is None:
            self.open()
        return self

    def __next__(self) -> Key:
        if self._keys is None:
            self.open()
        if self._position >= len(self._keys):
            raise StopIteration
        key = self._keys[self._position]
        self._position += 1
        self._last = key
        return key

    def __repr__(self) -> str:
        return (
            f"KeyCursor(generator={self.generator.name!r}, "
            f"restart={self.is_restart}, "
            f"remaining={self.remaining})"
        )
