"""Resource ledger for consumable budgets."""

from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from terradata.core.errors import InsufficientResource
from terradata.core.models import LedgerSnapshot
from terradata.utils.constants import Resource


@dataclass(frozen=True)
class Transaction:
    week: int
    resource: Resource
    amount: float
    reason: str


@dataclass
class ResourceLedger:
    """Water and fertilizer budgets. Budgets never go negative."""
    water_budget: float
    fertilizer_budget: float
    initial_water_budget: Optional[float] = None
    initial_fertilizer_budget: Optional[float] = None
    history: list = field(default_factory=list)

    def __post_init__(self):
        if self.water_budget < 0 or self.fertilizer_budget < 0:
            raise ValueError("Budgets must be non-negative")
        if self.initial_water_budget is None:
            self.initial_water_budget = self.water_budget
        if self.initial_fertilizer_budget is None:
            self.initial_fertilizer_budget = self.fertilizer_budget

    def balance(self, resource: Resource) -> float:
        return self.water_budget if resource == Resource.WATER else self.fertilizer_budget

    def can_afford(self, resource: Resource, amount: float) -> bool:
        return self.balance(resource) >= amount

    def require(self, resource: Resource, amount: float) -> None:
        available = self.balance(resource)
        if available < amount:
            raise InsufficientResource(resource.value, amount, available)

    def charge(self, resource: Resource, amount: float, week: int = 0, reason: str = "") -> None:
        """Deduct `amount` or raise InsufficientResource without touching the budget."""
        self.require(resource, amount)
        if resource == Resource.WATER:
            self.water_budget -= amount
        else:
            self.fertilizer_budget -= amount
        self.history.append(Transaction(week=week, resource=resource, amount=amount, reason=reason))
        logger.debug(f"Charged {amount:g} {resource.value} ({reason}), {self.balance(resource):g} left")

    @property
    def water_used(self) -> float:
        return self.initial_water_budget - self.water_budget

    @property
    def fertilizer_used(self) -> float:
        return self.initial_fertilizer_budget - self.fertilizer_budget

    @property
    def water_used_fraction(self) -> float:
        if self.initial_water_budget <= 0:
            return 0.0
        return self.water_used / self.initial_water_budget

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            water_budget=self.water_budget,
            fertilizer_budget=self.fertilizer_budget,
            initial_water_budget=self.initial_water_budget,
            initial_fertilizer_budget=self.initial_fertilizer_budget,
        )
