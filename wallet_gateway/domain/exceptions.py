"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RegistryAPIError(DomainException):
    """Account, category or movement-type registry returned an error or is unavailable"""

    pass


class AccountNotFoundError(DomainException):
    """Draft targets an account that is not in the registry snapshot"""

    pass


class CategoryNotFoundError(DomainException):
    """Draft references a category missing from the category registry"""

    pass


class InvalidTransitionError(DomainException):
    """Confirmation action is not allowed in the controller's current state"""

    def __init__(self, action: str, state: str):
        super().__init__(f"Cannot {action} while {state}")
        self.action = action
        self.state = state


class PersistenceError(DomainException):
    """Persistence collaborator failed after a submission was accepted"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
