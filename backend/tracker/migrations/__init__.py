from .schema import migrate, get_schema_version, LATEST_VERSION

__all__ = ["migrate", "get_schema_version", "LATEST_VERSION"]
