import datetime as dt
import logging
import time

import american_binomial.pricing as pricing
from american_binomial.analysis import LogNormalProbability

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

contract = pricing.OptionContract(
    option_type=pricing.OptionType.PUT,
    num_steps=2,
    spot_price=3.061,
    strike_price=3.12,
    market_price=-0.0833,
    start_date=dt.date(2019, 12, 1),
    end_date=dt.date(2020, 1, 22),
    volatility=0.1105,
    interest_rate=0.0303,
    dividend_yield=0,
)

sample_prices = [3, 2, 3, 4, 5, 6, 7, 8, 7]
asset_price = 3
breakpoints = [4, 6]

if __name__ == "__main__":
    start = time.perf_counter()
    tree = pricing.AmericanBinomialTree(contract)
    print(f"Initialisation : {time.perf_counter() - start:.6f} s")

    start = time.perf_counter()
    results = pricing.LatticeGreeks(tree).summary()
    print(f"Results : {time.perf_counter() - start:.6f} s")
    for name, value in results.items():
        print(f"{name:<26} {value: .6f}")

    start = time.perf_counter()
    probability = LogNormalProbability(sample_prices)
    probability_map = probability.get_probability_map(asset_price, breakpoints)
    intervals = probability.get_interval_probability(breakpoints)
    print(
        f"Probability map : {time.perf_counter() - start:.6f} s, "
        f"{len(probability_map)} points, interval probabilities sum to {sum(intervals):.6f}"
    )
