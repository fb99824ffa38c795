from dataclasses import dataclass

from config import PENSION_WITHDRAWAL_RATE

@dataclass(frozen=True)
class PensionDrawdown:
    """
    Fixed-rate pension income once retired: pot * withdrawal_rate each year.

    deplete_pot=False keeps the pot untouched by withdrawals, so retirement
    income is paid without shrinking the pot. Set it to True to take the
    withdrawn amount out of the pot each year instead.
    """
    withdrawal_rate: float = PENSION_WITHDRAWAL_RATE
    deplete_pot: bool = False

    def income(self, pension_pot: float, is_retired: bool) -> float:
        if not is_retired:
            return 0.0
        return pension_pot * self.withdrawal_rate

    def pot_after_withdrawal(self, pension_pot: float, withdrawn: float) -> float:
        if not self.deplete_pot:
            return pension_pot
        return max(0.0, pension_pot - withdrawn)
