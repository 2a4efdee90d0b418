"""
Usage statistics.

Counts how often each public facade operation is called, together with a
snapshot of the runtime environment. Counts live in memory and are logged
at DEBUG level only.
"""

from __future__ import annotations

import functools
import inspect
import logging
import platform
import sys
from collections import Counter

from . import __version__

log = logging.getLogger(__name__)


def environment_info():
    return {
        "version": __version__,
        "python": platform.python_version(),
        "implementation": platform.python_implementation(),
        "platform": sys.platform,
    }


class UsageStats:
    def __init__(self, version=__version__):
        self.version = version
        self.env = environment_info()
        self.counts = Counter()

    def record(self, name):
        self.counts[name] += 1
        log.debug("jsdoc2md: %s called (%d)", name, self.counts[name])

    def report(self):
        return {"version": self.version, "env": dict(self.env), "counts": dict(self.counts)}


def tracked(method):
    """Record a call to ``method`` on ``self.stats`` before running it."""
    name = method.__name__

    if inspect.iscoroutinefunction(method):

        @functools.wraps(method)
        async def async_wrapper(self, *args, **kwargs):
            if self.stats is not None:
                self.stats.record(name)
            return await method(self, *args, **kwargs)

        return async_wrapper

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.stats is not None:
            self.stats.record(name)
        return method(self, *args, **kwargs)

    return wrapper
