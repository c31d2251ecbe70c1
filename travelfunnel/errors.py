"""Error taxonomy shared by the flows and the HTTP layer.

- ValidationError: request fields missing or malformed (HTTP 400)
- ServiceUnavailable: a required upstream call failed and there is no degraded path (HTTP 502)
- ConfigurationError: vendor credentials missing for the selected mode (HTTP 500)
- PaymentFailed: the charge was not accepted; checkout stops (HTTP 400)
- DegradedSubsystemFailure: issuance/provisioning failed after payment; recorded, never surfaced as a failed request
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


class FunnelError(Exception):
    """Base class for errors raised by the funnel backend."""


@dataclass
class ValidationError(FunnelError):
    """Raised when a request body is incomplete or malformed.

    Attributes:
        field_errors: mapping of field name -> human-readable error message.
        message: top-level message returned to the caller.
    """

    field_errors: Dict[str, str] = field(default_factory=dict)
    message: str = "Incomplete data"

    def __str__(self) -> str:
        return self.message


class ServiceUnavailable(FunnelError):
    pass


class ConfigurationError(FunnelError):
    def __init__(self, component: str, missing: List[str]) -> None:
        self.component = component
        self.missing = list(missing)
        super().__init__(f"Missing credentials for {component}: {', '.join(self.missing)}")


class PaymentFailed(FunnelError):
    pass


class DegradedSubsystemFailure(FunnelError):
    pass


class IssuanceError(DegradedSubsystemFailure):
    pass


class ProvisioningError(DegradedSubsystemFailure):
    pass
