"""A bounded blocking queue, a fixed-size thread pool built on it, and self-checks for both."""

__version__ = "0.1.0"
__all__ = ["blocking_queue", "thread_pool", "selfcheck"]