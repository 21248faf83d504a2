"""Interface to the external store that persists tokens and their counters."""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Tuple

from .exceptions import TokenNotFound
from .token import Token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersistentToken:
    """
    A token saved in a store, with the identifier the store assigned to it.
    Equality and hashing use the identifier only.
    """

    identifier: str
    token: Token = field(compare=False)


class TokenStore(Protocol):
    def add(self, token: Token) -> PersistentToken: ...

    def get(self, identifier: str) -> Optional[PersistentToken]: ...

    def update(self, persistent_token: PersistentToken, token: Token) -> PersistentToken: ...

    def delete(self, persistent_token: PersistentToken) -> None: ...

    def all(self) -> List[PersistentToken]: ...


class MemoryTokenStore:
    """
    In-process TokenStore. Suitable for tests and for callers that keep
    tokens in memory. Each method holds a lock, so single reads and writes
    are thread-safe; use ``advance()`` when several threads generate codes
    from the same counter token.
    """

    def __init__(self) -> None:
        self._tokens: Dict[str, Token] = {}
        self._lock = threading.Lock()

    def add(self, token: Token) -> PersistentToken:
        identifier = uuid.uuid4().hex
        with self._lock:
            self._tokens[identifier] = token
        logger.debug("Stored token %s", identifier)
        return PersistentToken(identifier, token)

    def get(self, identifier: str) -> Optional[PersistentToken]:
        with self._lock:
            token = self._tokens.get(identifier)
        return PersistentToken(identifier, token) if token is not None else None

    def update(self, persistent_token: PersistentToken, token: Token) -> PersistentToken:
        with self._lock:
            if persistent_token.identifier not in self._tokens:
                raise TokenNotFound("no token stored as {}".format(persistent_token.identifier))
            self._tokens[persistent_token.identifier] = token
        logger.debug("Updated token %s", persistent_token.identifier)
        return PersistentToken(persistent_token.identifier, token)

    def delete(self, persistent_token: PersistentToken) -> None:
        with self._lock:
            if self._tokens.pop(persistent_token.identifier, None) is None:
                raise TokenNotFound("no token stored as {}".format(persistent_token.identifier))
        logger.debug("Deleted token %s", persistent_token.identifier)

    def all(self) -> List[PersistentToken]:
        with self._lock:
            return [PersistentToken(identifier, token) for identifier, token in self._tokens.items()]

    def advance(self, identifier: str, now: Optional[float] = None) -> Tuple[str, PersistentToken]:
        """
        Generates the next code for a stored token and stores the advanced
        counter in one locked step, so concurrent callers never share a code.
        """
        with self._lock:
            token = self._tokens.get(identifier)
            if token is None:
                raise TokenNotFound("no token stored as {}".format(identifier))
            code, advanced = token.generate_and_advance(now)
            self._tokens[identifier] = advanced
        if advanced is not token:
            logger.debug("Advanced token %s", identifier)
        return code, PersistentToken(identifier, advanced)


def next_code(
    store: TokenStore, persistent_token: PersistentToken, now: Optional[float] = None
) -> Tuple[str, PersistentToken]:
    """
    Generates a code from the token currently held by the store, persisting
    the advanced counter before returning the code.

    The read and the write are separate store calls; callers sharing a
    counter token between threads must serialize calls themselves, or use
    the store's own atomic operation such as ``MemoryTokenStore.advance``.

    :returns: the code and the stored token to continue with
    :raises TokenNotFound: the token is no longer in the store
    """
    current = store.get(persistent_token.identifier)
    if current is None:
        raise TokenNotFound("no token stored as {}".format(persistent_token.identifier))
    code, advanced = current.token.generate_and_advance(now)
    if advanced is current.token:
        return code, current
    return code, store.update(current, advanced)
