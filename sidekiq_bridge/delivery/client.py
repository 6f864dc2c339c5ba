"""Cliente HTTP para la API de series de Datadog.

Un POST síncrono por entrega, sin reintentos: la política de reintento es
del llamador (y el poll loop elige no reintentar).
"""

from __future__ import annotations

import logging

import requests

from ..errors import DeliveryError
from ..metrics.models import Series

logger = logging.getLogger(__name__)

DD_SERIES_URL = "https://app.datadoghq.com/api/v1/series"
DEFAULT_TIMEOUT = 10.0
ACCEPTED = 202


class DatadogClient:
    """Envía Series al endpoint ``/api/v1/series``.

    Uso:
        client = DatadogClient(api_key)
        client.deliver(series)
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DD_SERIES_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout

    @property
    def endpoint_url(self) -> str:
        return f"{self._base_url}?api_key={self._api_key}"

    @property
    def redacted_url(self) -> str:
        return f"{self._base_url}?api_key=***"

    def deliver(self, series: Series) -> None:
        """Serializa y envía el lote.

        Raises:
            DeliveryError: status != 202 o fallo de red (DNS, TLS, timeout)
        """
        body = series.to_json()
        logger.debug("[DELIVERY] POST %s\n%s", self.redacted_url, body)

        try:
            response = requests.post(
                self.endpoint_url,
                data=body,
                headers={"content-type": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            # requests puede incluir la URL completa (con api_key) en el mensaje
            message = str(e).replace(self._api_key, "***")
            raise DeliveryError(f"request failed: {message}") from e

        if response.status_code != ACCEPTED:
            raise DeliveryError(
                f"unexpected status {response.status_code}: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.info("[DELIVERY] Sent %d metric(s): %s", len(series), ",".join(series.names))
