"""Account eligibility filtering and display severity tiers"""

from decimal import Decimal
from typing import List
from wallet_gateway.domain.models import Account, AccountSummary, EligibleAccount, SeverityTier


class AccountEligibilityFilter:
    """
    Select the accounts a transaction may target.

    Tier bands (display emphasis only, never a validation gate):
    - balance > healthy_floor:                   healthy
    - moderate_floor < balance <= healthy_floor: moderate
    - balance <= moderate_floor:                 low
    """

    def __init__(
        self,
        moderate_floor: Decimal = Decimal("50000"),
        healthy_floor: Decimal = Decimal("100000"),
    ):
        if moderate_floor >= healthy_floor:
            raise ValueError("moderate_floor must be below healthy_floor")
        self.moderate_floor = moderate_floor
        self.healthy_floor = healthy_floor

    def severity_tier(self, balance: Decimal) -> SeverityTier:
        if balance > self.healthy_floor:
            return SeverityTier.HEALTHY
        elif balance > self.moderate_floor:
            return SeverityTier.MODERATE
        else:
            return SeverityTier.LOW

    def classify(self, account: Account) -> EligibleAccount:
        return EligibleAccount(account=account, tier=self.severity_tier(account.balance))

    def filter(self, accounts: List[Account]) -> List[EligibleAccount]:
        """Drop inactive accounts, keep registry order, attach tiers"""
        return [self.classify(account) for account in accounts if account.is_active]

    def summarize(self, accounts: List[Account]) -> AccountSummary:
        """
        Totals for the account overview.

        Total balance covers every account, inactive included; the low balance
        count only considers active accounts.
        """
        classified = [self.classify(account) for account in accounts]
        return AccountSummary(
            total_balance=sum((a.balance for a in accounts), Decimal("0")),
            active_count=sum(1 for a in accounts if a.is_active),
            low_balance_count=sum(
                1 for c in classified
                if c.account.is_active and c.tier == SeverityTier.LOW
            ),
            accounts=classified,
        )
