"""bcrypt password hashing, strength rules and the unknown-user dummy hash."""

import re
import secrets

import bcrypt

from techlearn_auth.exceptions import WeakPasswordError


class PasswordHashingService:
    """Hashes and checks passwords at a fixed bcrypt work factor.

    One instance per work factor is enough; the dummy hash it builds is
    reused for every unknown-user login.

    Examples
    --------
    >>> hasher = PasswordHashingService(rounds=4)
    >>> stored = hasher.hash("Passw0rd!")
    >>> hasher.verify("Passw0rd!", stored)
    True
    >>> hasher.verify("passw0rd!", stored)
    False
    """

    # Password requirements
    MIN_LENGTH = 8
    MAX_BYTES = 72  # bcrypt ignores (or rejects) anything beyond 72 bytes

    DEFAULT_ROUNDS = 10

    _UPPERCASE = re.compile(r"[A-Z]")
    _LOWERCASE = re.compile(r"[a-z]")
    _DIGIT = re.compile(r"\d")

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """
        Parameters
        ----------
        rounds
            bcrypt cost (log2 of the key-expansion rounds). Each step doubles
            the time per hash.
        """
        self._rounds = rounds
        self._dummy_hash: str | None = None

    @property
    def rounds(self) -> int:
        return self._rounds

    @property
    def dummy_hash(self) -> str:
        """A hash of a random secret, computed once with the same work factor.

        Comparing against it costs exactly as much as comparing against a
        real user's hash, and never succeeds.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._hash_unchecked(secrets.token_urlsafe(32))
        return self._dummy_hash

    def hash(self, password: str) -> str:
        """Salt and hash ``password`` after checking the strength rules.

        Raises
        ------
        WeakPasswordError
            If the password breaks a strength rule
        """
        self.validate_strength(password)
        return self._hash_unchecked(password)

    def rehash(self, password: str) -> str:
        """Hash an already verified password at the current work factor.

        Strength rules are not applied: the password predates them.
        """
        return self._hash_unchecked(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Check ``password`` against a stored bcrypt hash.

        A corrupt hash or an over-long password counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except (ValueError, TypeError):
            return False

    def verify_dummy(self, password: str) -> bool:
        """Run a full comparison against the dummy hash. Always False."""
        self.verify(password, self.dummy_hash)
        return False

    def validate_strength(self, password: str) -> None:
        """Reject passwords that are empty, shorter than 8 characters,
        longer than 72 UTF-8 bytes, or missing an uppercase letter, a
        lowercase letter or a digit.

        Raises
        ------
        WeakPasswordError
            Naming the first rule that failed
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password.encode("utf-8")) > self.MAX_BYTES:
            msg = f"Password cannot exceed {self.MAX_BYTES} bytes"
            raise WeakPasswordError(msg)

        if not (
            self._UPPERCASE.search(password)
            and self._LOWERCASE.search(password)
            and self._DIGIT.search(password)
        ):
            msg = (
                "Password must contain at least one uppercase letter, "
                "one lowercase letter and one digit"
            )
            raise WeakPasswordError(msg)

    def needs_rehash(self, password_hash: str) -> bool:
        """True when ``password_hash`` was made at another cost (or is unreadable)."""
        try:
            # $2b$<cost>$<salt+digest>
            cost = int(password_hash.split("$")[2])
        except (ValueError, IndexError):
            return True
        return cost != self._rounds

    def _hash_unchecked(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
