from .retention import RetentionManager, parse_version, select_stale

__all__ = ["RetentionManager", "parse_version", "select_stale"]
