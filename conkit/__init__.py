"""Concurrency building blocks: thread pool, cache, cancellable listener, concurrent owners,
reference counting, lock-free stacks, hazard pointers, and a small caching hello server."""

__version__ = "0.1.0"