from eventstream import Emitter, VirtualClock, from_iterable, interval, set_default_timers

# Drive every timer in this walkthrough by hand.
clock = VirtualClock()
set_default_timers(clock)

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Defining a stream")
print("-" * 100)
print()

# A stream is only a description: nothing runs until someone subscribes.
readings = from_iterable([2, 5, 9, 14])
deltas = readings.diff(0, lambda previous, current: current - previous)

deltas.subscribe(lambda delta: print(f"Delta: {delta}"))

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Transforming and accumulating")
print("-" * 100)
print()

clicks = Emitter("clicks")

# Count clicks, but only report every second one, and stop after three reports.
click_count = clicks.stream.scan(0, lambda count, _: count + 1)
click_count.filter(lambda count: count % 2 == 0).take(3).subscribe(
    lambda count: print(f"Clicks so far: {count}"),
    lambda: print("Done counting"),
)

for _ in range(8):
    clicks.emit("click")

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Handling errors")
print("-" * 100)
print()

# A failing transform only loses the tick it failed on.
parsed = from_iterable(["1", "two", "3"]).map(int)
parsed.subscribe(
    lambda number: print(f"Parsed: {number}"),
    on_error=lambda error: print(f"Skipped: {error}"),
)

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Combining streams over time")
print("-" * 100)
print()

fast = interval(10).map(lambda n: f"fast #{n}")
slow = interval(15).map(lambda n: f"slow #{n}")

# The | operator merges, + pairs up the latest values.
merged = (fast | slow).subscribe(lambda label: print(f"t={clock.now():>3}: {label}"))
clock.advance(45)
merged()

print()

paired = (fast + slow).subscribe(lambda pair: print(f"t={clock.now():>3}: {pair}"))
clock.advance(30)
paired()

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Switching between streams")
print("-" * 100)
print()

searches = Emitter("searches")


# Each query starts a slow lookup; a newer query cancels the pending one.
def lookup(query):
    return interval(5).take(1).map(lambda _: f"results for {query!r}")


searches.stream.flat_map_latest(lookup).subscribe(print)

searches.emit("py")
clock.advance(3)
searches.emit("python")  # the lookup for "py" is cancelled
clock.advance(5)
