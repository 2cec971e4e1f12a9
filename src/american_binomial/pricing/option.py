import datetime as dt
from dataclasses import dataclass

from american_binomial.pricing.enums import OptionType


@dataclass
class OptionContract:
    """Class used to represent an American option contract and its market inputs.

    The contract holds flat values only, so ``copy.copy`` yields an independent clone.
    """

    option_type: OptionType
    num_steps: int
    spot_price: float
    strike_price: float
    start_date: dt.date
    end_date: dt.date
    volatility: float
    interest_rate: float = 0.0
    dividend_yield: float = 0.0
    market_price: float = 0.0

    @property
    def sign(self) -> int:
        """+1 for a call, -1 for a put."""
        return int(self.option_type)

    @property
    def is_call(self) -> bool:
        return self.sign == OptionType.CALL
