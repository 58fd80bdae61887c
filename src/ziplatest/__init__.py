"""ziplatest: zip two asynchronous sequences by their latest values.

Pairs each new value from one side with the most recent value of the other,
so a fast feed never waits on a slow one::

    from ziplatest import zip_latest
    from ziplatest.testing import drain

    drain(zip_latest([0, 1, 2], [0, 1]))
    # [(0, 0), (1, 1), (2, 1)]

Async feeds::

    from ziplatest import open_zip_latest

    async with open_zip_latest(price_ticks(), fx_rates()) as pairs:
        async for price, rate in pairs:
            ...
"""

__version__ = "0.1.0-dev"
__all__ = [
    "DONE",
    "PENDING",
    "Channel",
    "ChannelClosedError",
    "ConfigurationError",
    "Context",
    "Done",
    "Failed",
    "Fuse",
    "IterSource",
    "Pending",
    "Ready",
    "Stream",
    "Waker",
    "ZipConfig",
    "ZipLatest",
    "ZipLatestError",
    "fuse",
    "iterate",
    "open_zip_latest",
    "zip_latest",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "DONE": "ziplatest.poll",
    "PENDING": "ziplatest.poll",
    "Done": "ziplatest.poll",
    "Failed": "ziplatest.poll",
    "Pending": "ziplatest.poll",
    "Ready": "ziplatest.poll",
    "Context": "ziplatest.context",
    "Waker": "ziplatest.context",
    "Fuse": "ziplatest.stream",
    "Stream": "ziplatest.stream",
    "fuse": "ziplatest.stream",
    "Channel": "ziplatest.sources",
    "IterSource": "ziplatest.sources",
    "ZipLatest": "ziplatest.zip_latest",
    "zip_latest": "ziplatest.zip_latest",
    "iterate": "ziplatest.aio",
    "open_zip_latest": "ziplatest.aio",
    "ZipConfig": "ziplatest.config",
    "ChannelClosedError": "ziplatest.errors",
    "ConfigurationError": "ziplatest.errors",
    "ZipLatestError": "ziplatest.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import ziplatest`` free of anyio until the async layer is used.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
