"""
Gas usage report for contract deployments.
Collects gas used per deployment and renders a console table when enabled.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from config.network_config import GasReporterConfig
from models.contracts import DeployedContract

WEI_PER_GWEI = Decimal(10) ** 9
WEI_PER_ETHER = Decimal(10) ** 18


@dataclass(frozen=True)
class GasReportRow:
    contract_name: str
    gas_used: int
    gas_price_wei: Optional[int]

    @property
    def cost_wei(self) -> Optional[int]:
        if self.gas_price_wei is None:
            return None
        return self.gas_used * self.gas_price_wei


class GasReporter:
    """Records deployment gas; excluded contracts are never recorded"""

    def __init__(self, config: GasReporterConfig, gas_price_wei: Optional[int] = None):
        self.config = config
        self.gas_price_wei = gas_price_wei
        self.rows: List[GasReportRow] = []

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def record(self, deployed: DeployedContract) -> Optional[GasReportRow]:
        if deployed.contract_name in self.config.exclude_contracts:
            return None

        # Prefer what the receipt says was actually paid
        price = deployed.effective_gas_price if deployed.effective_gas_price is not None else self.gas_price_wei
        row = GasReportRow(contract_name=deployed.contract_name, gas_used=deployed.gas_used, gas_price_wei=price)
        self.rows.append(row)
        return row

    def render(self) -> str:
        header = ("Contract", "Gas used", "Gas price (gwei)", "Cost (native)")
        lines = [header]
        for row in self.rows:
            price = "-" if row.gas_price_wei is None else f"{Decimal(row.gas_price_wei) / WEI_PER_GWEI:.2f}"
            cost = "-" if row.cost_wei is None else f"{Decimal(row.cost_wei) / WEI_PER_ETHER:.6f}"
            lines.append((row.contract_name, str(row.gas_used), price, cost))

        widths = [max(len(line[i]) for line in lines) for i in range(len(header))]
        sep = "-" * (sum(widths) + 3 * (len(widths) - 1))

        out = [f"Deployment gas report (currency: {self.config.currency}, sources: {self.config.src})", sep]
        for i, line in enumerate(lines):
            out.append(" | ".join(cell.ljust(widths[j]) for j, cell in enumerate(line)))
            if i == 0:
                out.append(sep)
        out.append(sep)
        out.append(f"Total gas used: {sum(r.gas_used for r in self.rows)}")
        return "\n".join(out)

    def report(self):
        if not self.enabled:
            return
        print(self.render())
