"""
Mathematical Foundation:
- Polynomial hash: h(s, a, m) = sum(s[i] * a^(len - i - 1)) mod m
- Double hashing: index(k, i) = (h_a(k) + i * (h_b(k) + 1)) mod m
- h_a uses base 151 mod m, h_b uses base 177 mod (m - 1), so the step
  h_b + 1 lies in [1, m - 1]. With m prime, gcd(step, m) == 1 and the
  attempts 0..m-1 visit every bucket exactly once.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

FLAG_EMPTY = 0
FLAG_OCCUPIED = 1
FLAG_TOMBSTONE = 2

HASH_PRIME_1 = 151
HASH_PRIME_2 = 177

Key = Union[str, bytes, bytearray]
Value = Union[str, bytes]


class CapacityExceededError(RuntimeError):
    """Raised when an insert finds no Empty or Tombstone slot."""


def is_prime(n: int) -> bool:
    """Check primality with 6k +/- 1 trial division."""
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    i = 5
    w = 2
    while i * i <= n:
        if n % i == 0:
            return False
        i += w
        w = 6 - w  # alternate steps of 2 and 4 (5, 7, 11, 13, ...)
    return True


def next_prime(n: int) -> int:
    """Smallest prime >= n."""
    if n < 2:
        return 2
    if n % 2 == 0 and n != 2:
        n += 1
    while not is_prime(n):
        n += 2
    return n


def encode_key(key: Key) -> bytes:
    if isinstance(key, str):
        # surrogatepass keeps every str encodable, lone surrogates included
        return key.encode("utf-8", "surrogatepass")
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    raise TypeError(f"key must be str or bytes, got {type(key).__name__}")


def poly_hash(data: bytes, a: int, m: int) -> int:
    """
    Polynomial hash of a byte string.

    Computes sum(data[i] * a^(len - i - 1)) mod m with Horner's rule,
    reducing at every step so the accumulator stays below a * m + 256.

    Args:
        data: Bytes to hash (str is UTF-8 encoded first)
        a: Base, a prime larger than the alphabet (151 or 177)
        m: Modulus, normally the number of buckets

    Returns:
        Hash value in [0, m)
    """
    if isinstance(data, str):
        data = encode_key(data)
    if m <= 0:
        raise ValueError("Modulus must be positive")

    h = 0
    for b in data:
        h = (h * a + b) % m
    return h


def _two_hashes(data: bytes, num_buckets: int):
    hash_a = poly_hash(data, HASH_PRIME_1, num_buckets)
    # mod (m - 1) keeps the step in [1, m - 1]
    hash_b = poly_hash(data, HASH_PRIME_2, max(1, num_buckets - 1))
    return hash_a, hash_b


def probe_index(key: Key, num_buckets: int, attempt: int) -> int:
    """
    Bucket index for the given probe attempt using double hashing.

    The secondary hash is taken mod (num_buckets - 1) rather than mod
    num_buckets, so the step hash_b + 1 is never a multiple of a prime
    num_buckets. For "cat" in 53 buckets this gives 5, 6, 7, ... where a
    mod-num_buckets secondary hash would give 5, 24, 43, ...

    Args:
        key: Key to place (str or bytes)
        num_buckets: Number of buckets in the table
        attempt: Probe attempt, starting at 0

    Returns:
        Bucket index in [0, num_buckets)
    """
    hash_a, hash_b = _two_hashes(encode_key(key), num_buckets)
    return (hash_a + attempt * (hash_b + 1)) % num_buckets


def probe_sequence(key: Key, num_buckets: int) -> List[int]:
    """All bucket indices visited for attempts 0..num_buckets-1."""
    hash_a, hash_b = _two_hashes(encode_key(key), num_buckets)
    step = hash_b + 1
    return [(hash_a + i * step) % num_buckets for i in range(num_buckets)]


@dataclass(frozen=True)
class Slot:
    """
    One bucket of the table.

    Attributes:
        flag: FLAG_EMPTY, FLAG_OCCUPIED or FLAG_TOMBSTONE
        key_bytes: Encoded key used for matching (occupied only)
        key: Key as it was inserted (occupied only)
        value: Stored value (occupied only)
    """

    flag: int
    key_bytes: bytes = b""
    key: Optional[Value] = None
    value: Optional[Value] = None

    @classmethod
    def empty(cls) -> "Slot":
        return cls(FLAG_EMPTY)

    @classmethod
    def tombstone(cls) -> "Slot":
        return cls(FLAG_TOMBSTONE)

    @classmethod
    def occupied(cls, key_bytes: bytes, key: Value, value: Value) -> "Slot":
        return cls(FLAG_OCCUPIED, key_bytes, key, value)

    @property
    def is_empty(self) -> bool:
        return self.flag == FLAG_EMPTY

    @property
    def is_tombstone(self) -> bool:
        return self.flag == FLAG_TOMBSTONE

    @property
    def is_occupied(self) -> bool:
        return self.flag == FLAG_OCCUPIED


@dataclass
class LookupResult:
    """
    Result of a lookup.

    Attributes:
        found: Whether the key was found
        index: Bucket index if found, -1 otherwise
        probes: Number of probe attempts performed
        value: Stored value if found, None otherwise
    """

    found: bool
    index: int
    probes: int
    value: Optional[Value] = None


class FixedHashTable:
    """
    String-to-string hash table with a fixed number of buckets.

    Open addressing with double hashing and tombstone deletion. The bucket
    count never changes; once every bucket holds a live entry further
    inserts of new keys raise CapacityExceededError.
    """

    DEFAULT_SIZE = 53

    def __init__(self, size: int = DEFAULT_SIZE):
        """
        Initialize an empty table.

        Args:
            size: Number of buckets, must be prime so that every probe
                  sequence covers the whole table
        """
        if not isinstance(size, int) or size < 2:
            raise ValueError("Size must be an integer >= 2")
        if not is_prime(size):
            raise ValueError(
                f"Size must be prime; nearest larger prime is {next_prime(size)}"
            )

        self.size = size
        self.count = 0
        self._slots: List[Slot] = [Slot.empty()] * size
        self._closed = False

        # Statistics
        self.total_probes = 0
        self.total_operations = 0
        self.failed_inserts = 0

    def _check_open(self):
        if self._closed:
            raise ValueError("Cannot operate on closed FixedHashTable")

    def _freeze_value(self, value: Value) -> Value:
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        raise TypeError(f"value must be str or bytes, got {type(value).__name__}")

    def _probe(self, key_bytes: bytes) -> Iterator[int]:
        hash_a, hash_b = _two_hashes(key_bytes, self.size)
        step = hash_b + 1
        for attempt in range(self.size):
            yield (hash_a + attempt * step) % self.size

    def _find(self, key_bytes: bytes):
        """Return (index, probes) of the occupied slot holding key, or (-1, probes)."""
        probes = 0
        for idx in self._probe(key_bytes):
            probes += 1
            slot = self._slots[idx]
            if slot.is_empty:
                break
            if slot.is_occupied and slot.key_bytes == key_bytes:
                return idx, probes
        return -1, probes

    def _record(self, probes: int):
        self.total_probes += probes
        self.total_operations += 1

    def insert(self, key: Key, value: Value) -> None:
        """
        Insert or update a key.

        An existing key has its value replaced in place. A new key takes the
        first tombstone on its probe path, or the empty slot ending it.

        Args:
            key: Key to insert (str or bytes)
            value: Value to store (str or bytes)

        Raises:
            CapacityExceededError: If no free slot is reachable
        """
        self._check_open()
        key_bytes = encode_key(key)
        stored_key = key if isinstance(key, str) else key_bytes
        new_slot = Slot.occupied(key_bytes, stored_key, self._freeze_value(value))

        candidate = -1
        probes = 0
        for idx in self._probe(key_bytes):
            probes += 1
            slot = self._slots[idx]
            if slot.is_occupied:
                if slot.key_bytes == key_bytes:
                    self._slots[idx] = new_slot
                    self._record(probes)
                    return
            elif slot.is_tombstone:
                if candidate < 0:
                    candidate = idx
            else:
                if candidate < 0:
                    candidate = idx
                break

        self._record(probes)
        if candidate < 0:
            self.failed_inserts += 1
            raise CapacityExceededError(
                f"Hash table is full ({self.count}/{self.size} slots occupied); "
                f"cannot insert {key!r}"
            )

        self._slots[candidate] = new_slot
        self.count += 1

    def search(self, key: Key) -> Optional[Value]:
        """
        Look up the value stored for key.

        Returns:
            The stored value, or None if the key is absent
        """
        return self.lookup(key).value

    def lookup(self, key: Key) -> LookupResult:
        """
        Look up a key and report where and how far the probe went.

        Args:
            key: Key to find

        Returns:
            A LookupResult with the bucket index and probe count
        """
        self._check_open()
        key_bytes = encode_key(key)
        idx, probes = self._find(key_bytes)
        self._record(probes)
        if idx < 0:
            return LookupResult(found=False, index=-1, probes=probes)
        return LookupResult(
            found=True, index=idx, probes=probes, value=self._slots[idx].value
        )

    def delete(self, key: Key) -> bool:
        """
        Remove a key, leaving a tombstone in its bucket.

        Returns:
            True if the key was removed, False if it was not present
        """
        self._check_open()
        key_bytes = encode_key(key)
        idx, probes = self._find(key_bytes)
        self._record(probes)
        if idx < 0:
            return False

        self._slots[idx] = Slot.tombstone()
        self.count -= 1
        return True

    def slot(self, index: int) -> Slot:
        """Return the slot at a bucket index."""
        self._check_open()
        return self._slots[index]

    @property
    def tombstone_count(self) -> int:
        self._check_open()
        return sum(1 for s in self._slots if s.is_tombstone)

    @property
    def load_factor(self) -> float:
        self._check_open()
        return self.count / self.size

    def get_stats(self) -> dict:
        """
        Get statistics about the table.

        Returns:
            Dictionary with table statistics
        """
        self._check_open()
        tombstones = self.tombstone_count
        return {
            "size": self.size,
            "count": self.count,
            "tombstones": tombstones,
            "empty": self.size - self.count - tombstones,
            "load_factor": self.load_factor,
            "total_operations": self.total_operations,
            "total_probes": self.total_probes,
            "avg_probes_per_operation": self.total_probes / self.total_operations
            if self.total_operations > 0
            else 0.0,
            "failed_inserts": self.failed_inserts,
        }

    def reset_statistics(self) -> None:
        """Reset probe statistics."""
        self.total_probes = 0
        self.total_operations = 0
        self.failed_inserts = 0

    def close(self):
        """Release every slot. Closing twice is a no-op."""
        if self._closed:
            return

        self._closed = True
        self._slots = []
        self.count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        self._check_open()
        return self.count

    def __contains__(self, key: Key) -> bool:
        """Support 'in' operator."""
        return self.lookup(key).found

    def __getitem__(self, key: Key) -> Value:
        result = self.lookup(key)
        if not result.found:
            raise KeyError(key)
        return result.value

    def __setitem__(self, key: Key, value: Value) -> None:
        self.insert(key, value)

    def __delitem__(self, key: Key) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"count={self.count}"
        return f"FixedHashTable(size={self.size}, {state})"


def create(size: int = FixedHashTable.DEFAULT_SIZE) -> FixedHashTable:
    return FixedHashTable(size)


def insert(table: FixedHashTable, key: Key, value: Value) -> None:
    table.insert(key, value)


def search(table: FixedHashTable, key: Key) -> Optional[Value]:
    return table.search(key)


def delete(table: FixedHashTable, key: Key) -> bool:
    return table.delete(key)


def destroy(table: FixedHashTable) -> None:
    table.close()


if __name__ == "__main__":
    with create() as ht:
        insert(ht, "cat", "mammal")
        insert(ht, "dog", "mammal")
        insert(ht, "eagle", "bird")

        print(f"'cat' -> {search(ht, 'cat')!r}")
        print(f"Deleted 'cat': {delete(ht, 'cat')}")
        print(f"'cat' -> {search(ht, 'cat')!r}")
        print(f"'dog' -> {search(ht, 'dog')!r}")

        stats = ht.get_stats()
        print("\nTable Statistics:")
        print(f"  Entries: {stats['count']}/{stats['size']}")
        print(f"  Tombstones: {stats['tombstones']}")
        print(f"  Load factor: {stats['load_factor']:.4f}")
        print(f"  Avg probes per operation: {stats['avg_probes_per_operation']:.2f}")
