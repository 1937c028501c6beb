"""
Journal Entry Generator
Creates the initial recognition entries and a representative set of
first-period entries for disclosure.

Only the first amortization period is materialized; callers needing every
period apply the same entry shape to each row of the amortization schedule.
"""

from datetime import date
from typing import List, Dict, Optional, Sequence

from ..core.models import AmortizationRow, JournalEntry
from .date_utils import add_months
from .finance import round_currency

ROU_ASSET = "Right-of-use asset"
LEASE_LIABILITY = "Lease liability"
INITIAL_MEASUREMENT_CLEARING = "Cash and other initial measurement adjustments"
INTEREST_EXPENSE = "Interest expense (lease)"
CASH = "Cash"
DEPRECIATION_EXPENSE = "Depreciation expense"
ACCUMULATED_DEPRECIATION = "Accumulated depreciation - ROU asset"
REMEASUREMENT_GAIN = "Gain on lease remeasurement (P&L)"


class JournalGenerator:
    """Generate journal entries from a lease's measurement and schedules"""

    def __init__(self, currency: str = "NGN"):
        self.currency = currency
        self.journal_entries: List[JournalEntry] = []

    def generate_journals(
        self,
        commencement: date,
        initial_liability: float,
        initial_rou: float,
        amortization_schedule: Sequence[AmortizationRow]
    ) -> List[JournalEntry]:
        """
        Initial recognition at commencement, then the first period's interest,
        principal, payment and depreciation dated one month after commencement
        """
        self.journal_entries = []

        self._add_entry(commencement, ROU_ASSET, debit=initial_rou,
                        memo="Initial recognition of ROU asset")
        self._add_entry(commencement, LEASE_LIABILITY, credit=initial_liability,
                        memo="Initial recognition of lease liability")

        # IDC, prepayments and incentives (or the fair value allocation)
        difference = round_currency(initial_rou - initial_liability)
        if difference > 0:
            self._add_entry(commencement, INITIAL_MEASUREMENT_CLEARING, credit=difference,
                            memo="Initial direct costs and prepayments net of incentives")
        elif difference < 0:
            self._add_entry(commencement, INITIAL_MEASUREMENT_CLEARING, debit=-difference,
                            memo="Lease incentives net of initial direct costs and prepayments")

        if amortization_schedule:
            first = amortization_schedule[0]
            entry_date = add_months(commencement, 1)
            self._add_entry(entry_date, INTEREST_EXPENSE, debit=first.interest,
                            memo="Monthly interest expense")
            self._add_entry(entry_date, LEASE_LIABILITY, debit=first.principal,
                            memo="Principal reduction")
            self._add_entry(entry_date, CASH, credit=first.payment,
                            memo="Lease payment")
            self._add_entry(entry_date, DEPRECIATION_EXPENSE, debit=first.depreciation,
                            memo="Monthly depreciation")
            self._add_entry(entry_date, ACCUMULATED_DEPRECIATION, credit=first.depreciation,
                            memo="Accumulated depreciation")

        return self.journal_entries

    def add_remeasurement(self, modification_date: date, liability_adjustment: float,
                          gain_in_profit_or_loss: float = 0.0) -> List[JournalEntry]:
        """
        IFRS 16.44 remeasurement: the liability change is taken to the ROU asset,
        any amount beyond a nil ROU goes to profit or loss
        """
        adjustment = round_currency(liability_adjustment)
        gain = round_currency(gain_in_profit_or_loss)
        rou_change = round_currency(adjustment + gain)

        if adjustment > 0:
            self._add_entry(modification_date, ROU_ASSET, debit=rou_change,
                            memo="Remeasurement of lease liability")
            self._add_entry(modification_date, LEASE_LIABILITY, credit=adjustment,
                            memo="Remeasurement of lease liability")
        elif adjustment < 0:
            self._add_entry(modification_date, LEASE_LIABILITY, debit=-adjustment,
                            memo="Remeasurement of lease liability")
            if rou_change < 0:
                self._add_entry(modification_date, ROU_ASSET, credit=-rou_change,
                                memo="Remeasurement of lease liability")
            if gain > 0:
                self._add_entry(modification_date, REMEASUREMENT_GAIN, credit=gain,
                                memo="Remeasurement in excess of ROU carrying amount")

        return self.journal_entries

    def _add_entry(self, entry_date: date, account: str, debit: float = 0.0,
                   credit: float = 0.0, memo: str = ""):
        self.journal_entries.append(JournalEntry(
            date=entry_date,
            account=account,
            debit=debit,
            credit=credit,
            memo=memo,
            currency=self.currency,
        ))

    def verify_balance(self) -> bool:
        """
        Verify that journal entries balance (debits = credits)
        """
        return self.get_debit_credit_summary()['is_balanced']

    def get_debit_credit_summary(self) -> Dict[str, float]:
        """Get summary of debits and credits"""
        debits = sum(entry.debit for entry in self.journal_entries)
        credits = sum(entry.credit for entry in self.journal_entries)
        difference = debits - credits

        return {
            'total_debits': debits,
            'total_credits': credits,
            'difference': difference,
            'is_balanced': abs(difference) < 0.01  # Allow for rounding
        }


def generate_lease_journal(
    commencement: date,
    initial_liability: float,
    initial_rou: float,
    amortization_schedule: Sequence[AmortizationRow],
    currency: str = "NGN",
    modification_date: Optional[date] = None,
    liability_adjustment: float = 0.0,
    gain_in_profit_or_loss: float = 0.0
) -> List[JournalEntry]:
    """
    Convenience function to generate journal entries
    """
    generator = JournalGenerator(currency=currency)
    generator.generate_journals(commencement, initial_liability, initial_rou, amortization_schedule)
    if modification_date is not None:
        generator.add_remeasurement(modification_date, liability_adjustment, gain_in_profit_or_loss)
    return generator.journal_entries
