class DexBrowserError(Exception):
    """Base exception for all dex_browser errors"""
    pass

class ConfigError(DexBrowserError):
    """Invalid or inconsistent global.json"""
    pass

class DatasetSchemaError(DexBrowserError):
    """
    CSV doesn't match what RecordSet expects:
    missing configured columns, no rows, etc
    """
    pass

class CategoryNotFound(DexBrowserError):
    """
    A requested category key is absent from the aggregated data.
    Raised by the aggregator and recovered by the caller (never fatal).
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Category '{key}' not found")
