"""
API Routes package
"""
from . import assistant, flows, jobs, live, storybook, students

__all__ = ['assistant', 'flows', 'jobs', 'live', 'storybook', 'students']
