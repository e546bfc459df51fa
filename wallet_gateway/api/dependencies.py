"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from wallet_gateway.config import settings
from wallet_gateway.domain.eligibility import AccountEligibilityFilter
from wallet_gateway.domain.validation import ValidationEngine
from wallet_gateway.infrastructure.clients.registry import RegistryClient
from wallet_gateway.infrastructure.clients.ledger import LedgerClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_registry_client() -> RegistryClient:
    """Provide registry API client instance"""
    return RegistryClient()


def get_ledger_client() -> LedgerClient:
    """Provide ledger persistence client instance"""
    return LedgerClient()


def get_validation_engine() -> ValidationEngine:
    """Provide validation engine configured from settings"""
    return ValidationEngine(low_balance_threshold=settings.low_balance_threshold)


def get_eligibility_filter() -> AccountEligibilityFilter:
    """Provide eligibility filter configured from settings"""
    return AccountEligibilityFilter(
        moderate_floor=settings.moderate_balance_floor,
        healthy_floor=settings.healthy_balance_floor,
    )
