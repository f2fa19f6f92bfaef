"""Shared fixtures for the island simulation tests."""

from __future__ import annotations

import numpy as np
import pytest


class ScriptedRng:
    """Stand-in for numpy's Generator that returns fixed values.

    *random* may be a single float (returned forever) or a list consumed in
    order; running out of scripted values raises, which lets tests assert
    that no draw happened.
    """

    def __init__(self, random=None, lognormal=None, integers=0):
        self._random = random
        self._lognormal = lognormal
        self._integers = integers
        self.random_calls = 0

    def random(self):
        self.random_calls += 1
        if isinstance(self._random, list):
            if not self._random:
                raise AssertionError("unexpected random draw")
            return self._random.pop(0)
        if self._random is None:
            raise AssertionError("unexpected random draw")
        return self._random

    def lognormal(self, mean, sigma):
        if self._lognormal is None:
            return float(np.exp(mean))
        return self._lognormal

    def integers(self, high):
        return self._integers

    def shuffle(self, values):
        pass


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def scripted():
    """Factory for ScriptedRng instances."""
    return ScriptedRng
