"""
Base classes for WhatsApp event payloads.

Payload models are deliberately lenient: the gateway adds fields over time,
so unknown fields are kept (``extra="allow"``) rather than rejected, and keys
are matched case-insensitively against the field aliases the gateway uses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


def _key_lookup(model: type[BaseModel]) -> dict[str, str]:
    lookup: dict[str, str] = {}
    for name, info in model.model_fields.items():
        key = info.alias or name
        lookup[name.lower()] = key
        lookup[key.lower()] = key
    return lookup


class WuzModel(BaseModel):
    """
    Base model for everything decoded from the gateway's JSON.

    Incoming keys are remapped to the declared alias when they differ only by
    case, so ``{"Id": ...}`` and ``{"ID": ...}`` both populate a field aliased
    ``"ID"``.

    Example:
        >>> class Info(WuzModel):
        ...     id: str | None = Field(default=None, alias="ID")
        >>> Info.model_validate({"id": "m1"}).id
        'm1'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _match_keys_case_insensitively(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        lookup = _key_lookup(cls)
        remapped: dict[Any, Any] = {}
        for key, value in data.items():
            target = lookup.get(key.lower(), key) if isinstance(key, str) else key
            # An exact-case key wins over a case-insensitive match
            if target in remapped and key != target:
                continue
            remapped[target] = value
        return remapped


class WhatsAppEvent(WuzModel):
    """
    Base class for all typed event payloads.

    Subclasses declare the fields they care about; anything else the gateway
    sends is still available through ``model_extra``.
    """

    pass


__all__ = [
    "WhatsAppEvent",
    "WuzModel",
]
