"""Statistical checks on simulation output."""

from .hypothesis import WinCountTest, win_count_test

__all__ = ["WinCountTest", "win_count_test"]
