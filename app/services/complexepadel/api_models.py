"""
Pydantic models that mirror the Amelia ``/slots`` response.

Free times are keyed by date then ``HH:MM``; each value is a list of
``[provider_id, location_id]`` pairs and is empty when nothing is free.
Depending on the plugin version the map sits under ``data.slots`` or at the
top level.
"""

from __future__ import annotations

from pydantic import BaseModel

SlotMap = dict[str, dict[str, list]]


class SlotsData(BaseModel):
    slots: SlotMap = {}


class SlotsResponse(BaseModel):
    message: str | None = None
    data: SlotsData | None = None
    slots: SlotMap | None = None

    def slot_map(self) -> SlotMap:
        if self.data is not None and self.data.slots:
            return self.data.slots
        return self.slots or {}
