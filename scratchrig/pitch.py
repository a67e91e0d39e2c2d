"""Alpha-beta filter that estimates playback pitch from position changes."""

from __future__ import annotations

# Filter gains, concluded experimentally.
ALPHA = 1.0 / 512
BETA = ALPHA / 256


class PitchFilter:
    """Estimate velocity from observations made every ``dt`` seconds."""

    def __init__(self, dt: float) -> None:
        if dt <= 0:
            raise ValueError("dt must be positive")
        self.dt = dt
        self.x = 0.0
        self.v = 0.0

    def observe(self, dx: float) -> None:
        """Record that the position moved by ``dx`` in the last ``dt`` seconds."""
        predicted_x = self.x + self.v * self.dt
        predicted_v = self.v
        residual_x = dx - predicted_x

        self.x = predicted_x + residual_x * ALPHA
        self.v = predicted_v + residual_x * BETA / self.dt

        self.x -= dx  # relative to previous

    def current(self) -> float:
        """Return the filtered pitch."""
        return self.v