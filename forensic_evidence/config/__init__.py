"""Configuration for the forensic evidence core."""

from forensic_evidence.config.settings import CoreSettings, settings

__all__ = ["CoreSettings", "settings"]
