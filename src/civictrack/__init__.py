"""CivicTrack - civic issue reporting and triage backend"""

__version__ = "0.1.0"
