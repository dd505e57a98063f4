from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class ServiceError(Exception):
    """Consistent service-layer exception with HTTP-friendly metadata."""

    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    def __str__(self) -> str:  # pragma: no cover - convenience for logging
        return f"{self.status_code} {self.code}: {self.message} | {self.details}"


class CardNotFoundError(ServiceError):
    def __init__(self, card_id: str):
        super().__init__(
            status_code=404,
            code="NOT_FOUND",
            message=f"Card {card_id!r} does not exist in the catalog.",
            details={"card_id": card_id},
        )


class ModelCallError(Exception):
    """The language model could not be reached or refused the request."""


class ModelResponseError(ModelCallError):
    """The language model answered, but not in the expected format."""
