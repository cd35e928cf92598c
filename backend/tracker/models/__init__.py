from .click import Click, UNKNOWN_COUNTRY, LOCAL_COUNTRY
from .schema_version import SchemaVersion

__all__ = ["Click", "SchemaVersion", "UNKNOWN_COUNTRY", "LOCAL_COUNTRY"]
