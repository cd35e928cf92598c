from .click import ClickResponse, AdvancedStats

__all__ = ["ClickResponse", "AdvancedStats"]
