from __future__ import annotations


class MockeraError(Exception):
    """Base class for errors that are part of the normal request flow.

    Each subclass carries the HTTP status and a stable error code; the app
    factory renders them into the common error payload.
    """

    status_code: int = 400
    error_code: str = "bad_request"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.error_code)
        self.message = message or self.error_code

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class TestNotFound(MockeraError):
    __test__ = False

    status_code = 404
    error_code = "test_not_found"

    def __init__(self, test_id: object):
        super().__init__(f"test not found: {test_id}")
        self.test_id = test_id


class UserNotFound(MockeraError):
    status_code = 404
    error_code = "user_not_found"

    def __init__(self, user_id: object):
        super().__init__(f"user not found: {user_id}")
        self.user_id = user_id


class InsufficientCredits(MockeraError):
    status_code = 400
    error_code = "insufficient_credits"

    def __init__(self, *, balance: int, cost: int):
        super().__init__(f"insufficient credits: balance {balance}, cost {cost}")
        self.balance = balance
        self.cost = cost


class TransientStoreFailure(MockeraError):
    status_code = 503
    error_code = "store_unavailable"
    retry_after_seconds = 1

    @property
    def headers(self) -> dict[str, str] | None:
        return {"Retry-After": str(self.retry_after_seconds)}
