"""Settlement and expense validation package."""

from splitledger.validation.validator import SettlementValidator

__all__ = ["SettlementValidator"]
