import time
from typing import Iterator, Optional, Tuple

from mimesis import Person
from mimesis.locales import Locale


class KeyValueGenerator:
    """Generates username keys and email values using mimesis."""

    def __init__(self, locale: Locale = Locale.EN, seed: Optional[int] = None):
        self.person = Person(locale=locale, seed=seed)
        self.basic = ["C", "c", "U", "u", "L", "l", "D", "d", ""]
        self.connectors = [".", "_", "-", ""]
        # mimesis username masks need at least one of these
        required_chars = {"C", "U", "l"}
        patterns_set = set()
        for first in self.basic:
            for second in self.basic:
                for connector in self.connectors:
                    pattern = f"{first}{connector}{second}"
                    if pattern and any(char in pattern for char in required_chars):
                        patterns_set.add(pattern)
        self.patterns = sorted(patterns_set)
        self.p_idx = 0

    def generate_key(self) -> str:
        """Generate a single username key."""
        pattern = self.patterns[self.p_idx]
        self.p_idx = (self.p_idx + 1) % len(self.patterns)
        return self.person.username(mask=pattern, drange=(0, 9999))[:20]

    def generate_value(self) -> str:
        return self.person.email()

    def generate_pairs(self, count: int) -> Iterator[Tuple[str, str]]:
        """Generate count pairs with distinct keys."""
        seen = set()
        while len(seen) < count:
            key = self.generate_key()
            if key in seen:
                continue
            seen.add(key)
            yield key, self.generate_value()

    def generate_missing_keys(self, count: int, present) -> Iterator[str]:
        """Generate count distinct keys that are not in present."""
        seen = set()
        while len(seen) < count:
            key = self.generate_key()
            if key in present or key in seen:
                continue
            seen.add(key)
            yield key


def main():
    """Fill a default-sized table with generated pairs and report occupancy."""
    from src.data_structures.fixed_hash_table import CapacityExceededError, create

    SEED = 42

    generator = KeyValueGenerator(locale=Locale.EN, seed=SEED)
    table = create()
    start_time = time.time()

    inserted = 0
    try:
        for key, value in generator.generate_pairs(table.size + 1):
            table.insert(key, value)
            inserted += 1
    except CapacityExceededError as e:
        print(f"Stopped after {inserted} inserts: {e}")
    finally:
        elapsed = time.time() - start_time
        stats = table.get_stats()
        print(f"Inserted {inserted} pairs in {elapsed * 1000:.2f}ms")
        print(f"Load factor: {stats['load_factor']:.4f}")
        print(f"Avg probes per operation: {stats['avg_probes_per_operation']:.2f}")
        table.close()


if __name__ == "__main__":
    main()
