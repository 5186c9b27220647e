# Database models
from pvsync.models.sample import Sample
from pvsync.models.tracker import Tracker

__all__ = ["Sample", "Tracker"]
