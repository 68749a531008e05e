from cityweather.cache import EXPIRY_MS, MAX_CITIES, WeatherCache


def fill(cache, n, now=0):
    for i in range(n):
        cache.put(f"city{i}", {"i": i}, now + i)


def test_size_never_exceeds_capacity():
    cache = WeatherCache()
    for i in range(3 * MAX_CITIES):
        cache.put(f"city{i}", {"i": i}, i)
        assert cache.size() <= MAX_CITIES
    assert cache.size() == MAX_CITIES
    # the ten newest survive, in insertion order
    assert cache.cities() == [f"city{i}" for i in range(20, 30)]


def test_new_key_evicts_oldest():
    cache = WeatherCache()
    fill(cache, MAX_CITIES)

    cache.put("extra", {}, 100)

    assert "city0" not in cache
    assert "extra" in cache
    assert len(cache) == MAX_CITIES


def test_update_touches_and_does_not_evict():
    cache = WeatherCache()
    fill(cache, MAX_CITIES)

    cache.put("city0", {"i": "fresh"}, 100)
    assert cache.size() == MAX_CITIES
    assert cache.cities()[-1] == "city0"

    # city1 is now the least recently touched
    cache.put("extra", {}, 101)
    assert "city0" in cache
    assert "city1" not in cache


def test_update_replaces_entry():
    cache = WeatherCache()
    first = cache.put("London", {"v": 1}, 10)
    second = cache.put("London", {"v": 2}, 20)

    assert cache.get("London") is second
    assert first.record == {"v": 1}
    assert second.fetched_at_ms == 20


def test_get_does_not_reorder():
    cache = WeatherCache()
    fill(cache, MAX_CITIES)

    assert cache.get("city0").record == {"i": 0}
    cache.put("extra", {}, 100)
    assert cache.get("city0") is None


def test_clear():
    cache = WeatherCache()
    fill(cache, 4)
    cache.clear()
    assert cache.size() == 0
    assert cache.cities() == []


def test_is_expired_boundary():
    cache = WeatherCache()
    entry = cache.put("London", {}, 1_000)

    assert not cache.is_expired(entry, 1_000)
    assert not cache.is_expired(entry, 1_000 + EXPIRY_MS)
    assert cache.is_expired(entry, 1_000 + EXPIRY_MS + 1)
