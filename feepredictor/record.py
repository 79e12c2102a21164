"""Host-side fee record owning a sample window."""

from dataclasses import dataclass, field
from typing import Any, Dict
from .window import SampleWindow
from .gateway import sample_from_list
from .constants import RECORD_SEED


def record_id_for(payer: str) -> str:
    """Derive the record id owned by ``payer``."""
    return f"{RECORD_SEED}:{payer}"


@dataclass
class FeeRecord:
    """A sample window together with its authority and last update time."""
    record_id: str
    authority: str
    last_updated: int
    window: SampleWindow = field(default_factory=SampleWindow)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with samples as lists in canonical field order."""
        return {
            "record_id": self.record_id,
            "authority": self.authority,
            "last_updated": self.last_updated,
            "samples": [s.to_list() for s in self.window.snapshot()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeeRecord":
        """Rebuild a record; every stored sample is range-checked."""
        window = SampleWindow.from_samples(
            sample_from_list(values) for values in data.get("samples", [])
        )
        return cls(
            record_id=data["record_id"],
            authority=data["authority"],
            last_updated=int(data["last_updated"]),
            window=window,
        )
