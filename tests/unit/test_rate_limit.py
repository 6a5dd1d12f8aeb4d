from datetime import UTC, datetime, timedelta

from linkshelf.utils.rate_limit import RateLimiter, login_throttle_key


class FakeTime:
    def __init__(self):
        self.current = datetime(2024, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


def test_attempts_accumulate_until_ceiling():
    clock = FakeTime()
    limiter = RateLimiter(60, time_port=clock)

    for expected in range(1, 6):
        assert not limiter.too_many_attempts("key", 5)
        assert limiter.hit("key") == expected

    assert limiter.too_many_attempts("key", 5)


def test_available_in_counts_down_from_oldest_attempt():
    clock = FakeTime()
    limiter = RateLimiter(60, time_port=clock)
    limiter.hit("key")
    clock.advance(15)
    limiter.hit("key")

    assert limiter.available_in("key") == 45


def test_attempts_expire_after_decay():
    clock = FakeTime()
    limiter = RateLimiter(60, time_port=clock)
    for _ in range(5):
        limiter.hit("key")

    clock.advance(61)

    assert limiter.attempts("key") == 0
    assert not limiter.too_many_attempts("key", 5)
    assert limiter.available_in("key") == 0


def test_clear_and_reset():
    limiter = RateLimiter(60, time_port=FakeTime())
    limiter.hit("a")
    limiter.hit("b")

    limiter.clear("a")
    assert limiter.attempts("a") == 0
    assert limiter.attempts("b") == 1

    limiter.reset()
    assert limiter.attempts("b") == 0


def test_keys_are_independent():
    limiter = RateLimiter(60, time_port=FakeTime())
    limiter.hit("a")

    assert limiter.attempts("b") == 0


def test_login_throttle_key_ignores_case():
    assert login_throttle_key("Jane@Example.com", "10.0.0.1") == "jane@example.com|10.0.0.1"
    assert login_throttle_key("jane@example.com", None) == "jane@example.com|"


def test_hit_drops_keys_that_were_never_retried():
    clock = FakeTime()
    limiter = RateLimiter(60, time_port=clock)
    limiter.hit("a")
    limiter.hit("b")
    clock.advance(30)
    limiter.hit("c")

    clock.advance(31)
    limiter.hit("d")

    assert set(limiter._history) == {"c", "d"}
