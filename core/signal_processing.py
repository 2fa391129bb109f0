import numpy as np


class WindowSizeError(ValueError):
    """Raised when a smoothing window does not fit the series."""


def central_moving_average(values: np.ndarray, window_size: int) -> np.ndarray:
    """
    Smooths a series with a centered moving average without edge padding.

    With h = window_size // 2, every center index i in [h, n - h) averages the h
    samples to its left [i - h, i) and the h samples from the center onward
    [i, i + h), divided by window_size. The output therefore shrinks by 2h samples
    (one full window for even sizes) and lines up with the tail of the input.

    Args:
        values (np.ndarray): The raw channel series.
        window_size (int): Number of samples per window.

    Returns:
        np.ndarray: Float averages of length n - 2 * (window_size // 2).

    Raises:
        WindowSizeError: If window_size < 1 or the series is not longer than the window.
    """
    data = np.asarray(values, dtype=np.float64)
    n = len(data)

    if window_size < 1 or n <= window_size:
        raise WindowSizeError(
            f"Window size too large ({window_size}) to compute central MA for data of length {n}"
        )

    half = window_size // 2

    # Running sums give every 2h-wide span in one pass
    cumulative = np.concatenate(([0.0], np.cumsum(data)))
    span_sums = cumulative[2 * half :] - cumulative[: n + 1 - 2 * half]

    return span_sums[: n - 2 * half] / window_size
