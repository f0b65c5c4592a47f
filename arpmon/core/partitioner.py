"""
Splits the host range into one contiguous segment per scan worker.
"""

from typing import List

from .data_models import ADDRESS_FIRST, ADDRESS_LAST, ADDRESS_SPACE, Segment
from ..utils.error_handler import ValidationError


def partition(worker_count: int, first: int = ADDRESS_FIRST, last: int = ADDRESS_LAST,
              space: int = ADDRESS_SPACE) -> List[Segment]:
    """
    Compute the segment of every worker.

    Worker i gets [i * size, (i + 1) * size - 1] with size = space // worker_count,
    clamped to [first, last]. The last segment always ends at `last`, so the
    segments cover the range exactly even when worker_count does not divide
    `space`. With more than space // 2 workers some leading segments are empty.

    Args:
        worker_count: Number of scan workers (>= 1)
        first: Lowest host identifier
        last: Highest host identifier
        space: Size of the address space the arithmetic divides

    Returns:
        One Segment per worker, in ascending order

    Raises:
        ValidationError: If worker_count is below 1
    """
    if worker_count < 1:
        raise ValidationError(f"Worker count must be at least 1, got {worker_count}")

    segment_size = space // worker_count
    segments = []
    for i in range(worker_count):
        lower = max(i * segment_size, first)
        upper = min((i + 1) * segment_size - 1, last)
        if i == worker_count - 1:
            upper = last
        segments.append(Segment(lower, upper))
    return segments
