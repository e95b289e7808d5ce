"""Connected-region partitioning of open cells."""

from .partition import Region, Partitioner

__all__ = ['Region', 'Partitioner']
