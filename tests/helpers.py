"""Test doubles for the payment and identity providers."""

from uuid import UUID

from src.rosterhub.core.providers.identity import AccountOutcome, AccountResult, IdentityProvider
from src.rosterhub.core.providers.payments import CancellationOutcome, CancellationResult
from src.rosterhub.core.security import create_access_token


class FakePaymentGateway:
    """Returns a fixed outcome and records every cancellation request."""

    def __init__(
        self,
        outcome: CancellationOutcome = CancellationOutcome.CANCELED,
        error: str | None = None,
    ) -> None:
        self.outcome = outcome
        self.error = error
        self.calls: list[str] = []

    async def cancel_subscription(self, subscription_id: str) -> CancellationResult:
        self.calls.append(subscription_id)
        return CancellationResult(
            outcome=self.outcome, subscription_id=subscription_id, error=self.error
        )


class FlakyIdentityProvider:
    """Fails the first ``failures`` calls, then delegates."""

    def __init__(self, delegate: IdentityProvider, failures: int = 1) -> None:
        self.delegate = delegate
        self.failures = failures
        self.calls = 0

    async def create_account(self, email: str, password: str) -> AccountResult:
        self.calls += 1
        if self.calls <= self.failures:
            return AccountResult(outcome=AccountOutcome.FAILED, error="identity provider timeout")
        return await self.delegate.create_account(email, password)


class RaisingIdentityProvider:
    """Raises the given error from every call."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    async def create_account(self, email: str, password: str) -> AccountResult:
        self.calls += 1
        raise self.error


class FixedIdentityProvider:
    """Reports a fixed outcome, e.g. an externally managed account id."""

    def __init__(self, outcome: AccountOutcome, user_id: UUID | None = None) -> None:
        self.outcome = outcome
        self.user_id = user_id
        self.calls = 0

    async def create_account(self, email: str, password: str) -> AccountResult:
        self.calls += 1
        return AccountResult(outcome=self.outcome, user_id=self.user_id)


def auth_headers(user_id: UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
