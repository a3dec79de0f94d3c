# conkit

Concurrency building blocks for Python, and a small caching "hello" HTTP
server that uses several of them.

## What is inside

- `conkit.adt` defines the abstract interfaces `ConcurrentMap` (`lookup`,
  `insert`, `delete`) and `ConcurrentSet` (`contains`, `insert`, `remove`).
  It also provides `SetAsMap`, which wraps any `ConcurrentSet` as a map
  whose values are all `()`. Its `delete` raises `KeyError` when the key is
  absent.
- `conkit.thread_pool.ThreadPool(size)` is a fixed pool of worker threads.
  - `execute(f)` queues a job.
  - `join()` waits until every queued job has finished.
  - `close()`, also called when a `with` block ends, stops and joins the
    workers and then re-raises the first exception a job raised.
  - A size of zero or less raises `ValueError`.
- `conkit.cache.Cache` is a thread-safe cache. `get_or_insert_with(key, f)`
  calls `f(key)` at most once per key, and concurrent callers asking for the
  same key wait for that single call. Callers that use different keys never
  block each other. If `f` raises, the exception is passed on and the key
  stays uncached.
- `conkit.tcp.CancellableTcpListener((host, port))` listens for TCP
  connections. `incoming()` yields accepted sockets until `cancel()` is
  called. `cancel()` wakes a blocked accept by connecting to the listener
  itself. The listener can be used as a context manager.
- `conkit.handler.Handler(compute=expensive_computation)` answers
  `GET /<key> HTTP/1.1` requests.
  - `handle_conn(request_id, stream)` reads the request and sends an HTML
    page with the cached result, or a 404 page if no key is found. It then
    closes the stream and returns a `Report`.
  - The default `expensive_computation` sleeps three seconds and returns the
    key followed by 🐕.
- `conkit.statistics` provides `Report(id, key)` and `Statistics`.
  `Statistics.hits` is a `Counter` of requests per key, and `None` counts
  invalid requests.
- `conkit.server` provides `serve(listener, pool, handler)`. It handles
  connections until the listener is cancelled and returns the `Statistics`.
  `main()` is the command-line entry point.
- `conkit.boc` implements behaviour-oriented concurrency.
  - `CownPtr(value)` wraps a value that only behaviours may touch.
  - `run_when(cowns, f)` schedules `f` once it owns every cown. `f` receives
    a list of cells, and each cell exposes `.value` for reading and
    assigning.
  - `when(*cowns)` is a decorator form of the same. The decorated function
    receives one cell per cown and is scheduled immediately.
  - Each behaviour runs on its own thread.
- `conkit.arc.Arc(data)` is an explicitly reference-counted shared value.
  - `clone`, `drop`, `count` and `ptr_eq` manage the handles, and `value`
    reads the shared value.
  - `get_mut` returns an `ArcMut` view only when this is the sole handle,
    and `None` otherwise.
  - `make_mut` copies a shared value first (copy on write).
  - `try_unwrap` returns the value if this is the sole handle, and
    otherwise raises `ArcNotUnique`.
- `conkit.growable_array` provides the following.
  - `AtomicRef` is a cell with `load`, `store` and an identity-based
    `compare_exchange`.
  - `GrowableArray` returns an `AtomicRef` slot for any non-negative index
    through `get(index)`. It allocates segments of 1024 slots lazily and
    keeps slot identity as it grows.
- `conkit.elim_stack` provides `TreiberStack` and `ElimStack`.
  `ElimStack` is built on a `TreiberStack` by default and, under
  contention, pairs pushes with pops through a 16-slot side array. Both
  offer `push`, `pop` and `is_empty`. `pop` raises `IndexError` on an empty
  stack. The single-attempt `try_push` and `try_pop` raise `Contended` when
  they lose a race.
- `conkit.hazard` and `conkit.retire` implement hazard pointers and
  deferred reclamation.
  - `HazardBag` is a bag of recycled slots, and `all_hazards()` returns the
    `id`s of protected objects. `HAZARDS` is the default global bag.
  - `Shield` offers `set`, `clear`, `protect`, `try_protect` and the static
    `validate`. It can be used as a context manager, and `release` gives the
    slot back to the bag.
  - `RetiredSet` offers `retire(pointer, free)`, `collect()` and `drain()`.
    Collection runs automatically once 64 objects are waiting.
  - The module-level `retire` and `collect` use a per-thread set.

## Install

```
pip install .
```

## Running the hello server

```
conkit-hello-server [--host HOST] [--port PORT]
```

The server listens on `localhost:7878` by default and uses a pool of 7
workers. Query a key with `curl http://localhost:7878/KEY`. The first
request for a key takes a few seconds, and later requests are answered from
the cache. Press Ctrl-C to stop accepting connections. The server then
finishes the pending requests, prints each report and the per-key
statistics, and exits.

## Examples

```python
from conkit.cache import Cache
from conkit.thread_pool import ThreadPool

cache = Cache()
with ThreadPool(4) as pool:
    for _ in range(8):
        pool.execute(lambda: cache.get_or_insert_with("k", str.upper))
    pool.join()
```

```python
from conkit.boc import CownPtr, when

a = CownPtr(0)
b = CownPtr(0)

@when(a, b)
def bump(x, y):
    x.value += 1
    y.value += 1
```

```python
from conkit.elim_stack import ElimStack

stack = ElimStack()
stack.push(1)
assert stack.pop() == 1
```

## What it does not do

- `ConcurrentMap` and `ConcurrentSet` are interfaces only. No concrete
  concurrent map, hash table or list-based set is provided.
- The hello server understands only `GET /<key>` requests where the key is
  made of word characters. It keeps its cache in memory only.

## Tests

```
pip install .[test]
pytest
```