"""Errores del bridge.

Taxonomía cerrada: cada capa traduce las excepciones de su librería
(redis, requests) a una de estas clases en su propio borde.
"""

from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base de todos los errores del bridge."""


class ConfigError(BridgeError):
    """Variable de entorno requerida ausente o inválida."""


class StoreConnectionError(BridgeError):
    """Redis no disponible o fallo de protocolo durante una lectura."""


class DeliveryError(BridgeError):
    """La API de series no aceptó el envío (red o status != 202)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
