"""Bounded polling loop that aggregates diffs across iterations.

Submodules:
    driver -- PollDriver state machine, option clamping and the sentinel output.
"""

from kubewatchdiff.watch.driver import (
    NO_CHANGES_MESSAGE,
    DriverState,
    PollDriver,
    WatchOptions,
)

__all__ = ["NO_CHANGES_MESSAGE", "DriverState", "PollDriver", "WatchOptions"]
