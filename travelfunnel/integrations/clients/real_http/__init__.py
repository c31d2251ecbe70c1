from .coris import CorisSoapClient
from .esim import EsimClient
from .payments import PaymentIngestionClient

__all__ = ["CorisSoapClient", "EsimClient", "PaymentIngestionClient"]
