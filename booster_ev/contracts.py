"""Interface contracts for external collaborators and core components.

Contracts define the methods each collaborator must provide so that
alternative loaders, caches or price sources can be swapped in and
verified automatically.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

from booster_ev.models.booster import SetDetail, SetInfo
from booster_ev.models.price import FinishPreference, Quote


# ============================================================================
# Protocol Definitions (Duck Typing Interfaces)
# ============================================================================


@runtime_checkable
class DatasetLoaderProtocol(Protocol):
    """Protocol for dataset loading implementations."""

    def fetch_set_list(self, use_cache: bool = True) -> list[SetInfo]:
        """Load the list of all sets."""
        ...

    def fetch_identifiers(self, use_cache: bool = True) -> dict[str, dict]:
        """Load uuid -> card identity data."""
        ...

    def fetch_prices(self, use_cache: bool = True) -> dict[str, dict]:
        """Load uuid -> price entry data."""
        ...

    def fetch_set(self, code: str, use_cache: bool = True) -> SetDetail:
        """Load one set document."""
        ...


@runtime_checkable
class PriceResolverProtocol(Protocol):
    """Protocol for price resolution implementations."""

    def resolve(
        self, card_id: str, preference: Optional[FinishPreference] = None
    ) -> Optional[Quote]:
        """Resolve one card's price, or None."""
        ...


@runtime_checkable
class ReferencePriceProtocol(Protocol):
    """Protocol for curated reference price sources."""

    def trend_price(self, set_code: str, product_type: str) -> Optional[float]:
        """Curated price for a set's product type, or None."""
        ...


@runtime_checkable
class CacheProtocol(Protocol):
    """Protocol for cache implementations."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, payload: Any, ttl: Optional[float] = None) -> None:
        ...

    def clear(self, prefix: Optional[str] = None) -> int:
        ...


# ============================================================================
# Contract Dataclasses (For Testing & Validation)
# ============================================================================


@dataclass
class MethodContract:
    """Contract specification: a named set of required callables."""

    required_methods: list[str] = field(default_factory=list)

    def validate(self, instance: object) -> tuple[bool, list[str]]:
        """Validate that instance fulfills the contract."""
        errors = []

        for method in self.required_methods:
            if not hasattr(instance, method):
                errors.append(f"Missing required method: {method}")
            elif not callable(getattr(instance, method)):
                errors.append(f"Method {method} is not callable")

        return len(errors) == 0, errors


@dataclass
class LoaderContract(MethodContract):
    """Contract specification for dataset loaders."""

    required_methods: list[str] = field(
        default_factory=lambda: [
            "fetch_set_list",
            "fetch_identifiers",
            "fetch_prices",
            "fetch_set",
        ]
    )


@dataclass
class ResolverContract(MethodContract):
    """Contract specification for price resolvers."""

    required_methods: list[str] = field(default_factory=lambda: ["resolve"])

    def validate_output(self, quote: Optional[Quote]) -> tuple[bool, str]:
        """A resolver returns a non-negative Quote or None, never raises."""
        if quote is None:
            return True, ""
        if not isinstance(quote, Quote):
            return False, f"Expected Quote or None, got {type(quote)}"
        if quote.value < 0:
            return False, f"Negative price {quote.value}"
        return True, ""


@dataclass
class ReferencePriceContract(MethodContract):
    """Contract specification for reference price sources."""

    required_methods: list[str] = field(default_factory=lambda: ["trend_price"])


@dataclass
class CacheContract(MethodContract):
    """Contract specification for caches."""

    required_methods: list[str] = field(default_factory=lambda: ["get", "set", "clear"])


# ============================================================================
# Contract Registry
# ============================================================================


CONTRACTS = {
    "loader": LoaderContract(),
    "resolver": ResolverContract(),
    "reference_prices": ReferencePriceContract(),
    "cache": CacheContract(),
}


def validate_all_contracts(modules: dict[str, object]) -> dict[str, tuple[bool, list[str]]]:
    """
    Validate all modules against their contracts.

    Args:
        modules: Dict mapping contract name to module instance

    Returns:
        Dict mapping contract name to (is_valid, errors) tuple
    """
    results = {}

    for name, instance in modules.items():
        if name in CONTRACTS:
            results[name] = CONTRACTS[name].validate(instance)
        else:
            results[name] = (False, [f"Unknown contract: {name}"])

    return results
