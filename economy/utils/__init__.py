from economy.utils.commission import calculate_commission, get_commission_percent
from economy.utils.db import ledger_unit

__all__ = ["calculate_commission", "get_commission_percent", "ledger_unit"]
