"""Time system for the simulation: one tick is one year."""


class SimClock:
    """Manages simulation time."""

    def __init__(self) -> None:
        self.year: int = 0

    def advance(self) -> None:
        """Advance the clock by one year."""
        self.year += 1

    def reset(self) -> None:
        self.year = 0
