import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import pandas as pd
from pathlib import Path
from datetime import datetime

from lending_model.src.constants import INTEREST_SCALE, YEAR_IN_SECONDS
from lending_model.src.instructions.interest import accrue_interest, get_borrow_rate
from lending_model.src.logging_setup import configure_logging
from lending_model.src.state.asset import Tier
from lending_model.src.state.pool import PoolState
from lending_model.src.state.protocol_config import RateConfig

# Notional pool used to turn a utilization fraction into pool totals
POOL_SIZE = 10**15

@dataclass
class SimulationParams:
    initial_utilization: float = 0.5
    utilization_volatility: float = 0.02
    simulation_days: int = 365
    steps_per_day: int = 24  # hourly steps
    principal: int = 10_000 * 10**6  # 10k base units with 6 decimals
    random_seed: Optional[int] = None
    experiment_name: str = "default"
    rate_config: RateConfig = field(default_factory=RateConfig)

def pool_at(utilization: float) -> PoolState:
    """Pool whose borrow/supply ratio matches the given utilization"""
    return PoolState(
        total_supplied_liquidity=POOL_SIZE,
        total_borrow=int(POOL_SIZE * utilization),
    )

def rate_curve(rate_config: RateConfig, n_points: int = 101) -> pd.DataFrame:
    """
    Annual borrow rate per tier across utilization, as floats.
    One row per utilization point, one column per tier.
    """
    utilizations = np.linspace(0, 1, n_points)
    rows = []
    for u in utilizations:
        pool = pool_at(float(u))
        row = {"utilization": float(u)}
        for tier in Tier:
            row[tier.name] = get_borrow_rate(tier, pool, rate_config) / INTEREST_SCALE
        rows.append(row)
    return pd.DataFrame(rows)

class UtilizationSimulation:
    def __init__(self, params: SimulationParams):
        self.params = params
        self.times: List[float] = []
        self.utilizations: List[float] = []
        self.rates: Dict[Tier, List[float]] = {tier: [] for tier in Tier}
        self.debts: Dict[Tier, List[int]] = {tier: [] for tier in Tier}

        if params.random_seed is not None:
            np.random.seed(params.random_seed)

    def simulate(self) -> pd.DataFrame:
        step_seconds = 24 * 60 * 60 // self.params.steps_per_day
        total_steps = self.params.simulation_days * self.params.steps_per_day
        utilization = self.params.initial_utilization
        debt = {tier: self.params.principal for tier in Tier}

        for step in range(total_steps):
            # Utilization follows a bounded random walk
            utilization += np.random.normal(0, self.params.utilization_volatility)
            utilization = float(np.clip(utilization, 0.0, 1.0))
            pool = pool_at(utilization)

            self.times.append(step / self.params.steps_per_day)
            self.utilizations.append(utilization)
            for tier in Tier:
                rate = get_borrow_rate(tier, pool, self.params.rate_config)
                debt[tier] = accrue_interest(debt[tier], rate, step_seconds)
                self.rates[tier].append(rate / INTEREST_SCALE)
                self.debts[tier].append(debt[tier])

        return self.to_frame()

    def to_frame(self) -> pd.DataFrame:
        frame = pd.DataFrame({"day": self.times, "utilization": self.utilizations})
        for tier in Tier:
            frame[f"rate_{tier.name}"] = self.rates[tier]
            frame[f"debt_{tier.name}"] = self.debts[tier]
        return frame

    def plot_results(self):
        output_dir = Path('research/results') / self.params.experiment_name
        output_dir.mkdir(parents=True, exist_ok=True)

        fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 11))

        ax1.plot(self.times, np.array(self.utilizations) * 100, label='Utilization')
        ax1.axhline(
            y=self.params.rate_config.optimal_utilization * 100 / INTEREST_SCALE,
            color='r', linestyle='--', alpha=0.3,
        )
        ax1.set_ylabel('Utilization (%)')
        ax1.set_title('Pool Utilization Over Time')
        ax1.legend()
        ax1.grid(True)

        for tier in Tier:
            ax2.plot(self.times, np.array(self.rates[tier]) * 100, label=tier.name)
        ax2.set_ylabel('Borrow Rate (%)')
        ax2.set_title('Borrow Rate per Tier')
        ax2.legend()
        ax2.grid(True)

        for tier in Tier:
            ax3.plot(self.times, np.array(self.debts[tier]) / 10**6, label=tier.name)
        ax3.set_ylabel('Debt (base units)')
        ax3.set_xlabel('Time (days)')
        ax3.set_title(f'Debt on {self.params.principal / 10**6:,.0f} principal')
        ax3.legend()
        ax3.grid(True)

        plt.tight_layout()

        plot_name = f"volatility_{self.params.utilization_volatility}"
        if self.params.random_seed is not None:
            plot_name += f"_seed_{self.params.random_seed}"

        plt.savefig(output_dir / f"{plot_name}.png")
        plt.close()

def plot_rate_curve(curve: pd.DataFrame, rate_config: RateConfig):
    output_dir = Path('research/results/rate_curves')
    output_dir.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(10, 6))
    for tier in Tier:
        ax.plot(curve["utilization"] * 100, curve[tier.name] * 100, label=tier.name)

    kink = rate_config.optimal_utilization * 100 / INTEREST_SCALE
    ax.axvline(x=kink, color='r', linestyle='--', alpha=0.3)
    ax.set_xlabel('Utilization (%)')
    ax.set_ylabel('Annual Borrow Rate (%)')
    ax.set_title('Borrow Rate Curve per Tier')
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    plt.savefig(output_dir / f"rate_curve_{timestamp}.png", bbox_inches='tight', dpi=300)
    plt.close()

def main():
    configure_logging("INFO")
    rate_config = RateConfig()
    curve = rate_curve(rate_config)
    plot_rate_curve(curve, rate_config)

    params = SimulationParams(
        experiment_name="utilization_walk",
        random_seed=57,
        simulation_days=100,
    )
    sim = UtilizationSimulation(params)
    frame = sim.simulate()
    sim.plot_results()

    final = frame.iloc[-1]
    for tier in Tier:
        growth = final[f"debt_{tier.name}"] / params.principal - 1
        print(f"{tier.name:>8}: {growth * 100:.3f}% over {params.simulation_days} days "
              f"({YEAR_IN_SECONDS // 86400}-day year)")

if __name__ == "__main__":
    main()
