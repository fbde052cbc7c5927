"""
RoadmapX backend.

Learning roadmaps (phases, milestones, resources), progress tracking,
file uploads to S3 and optional AWS AI services for generating roadmaps
from a free-text description.
"""

__version__ = "0.3.0"
