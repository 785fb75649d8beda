from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ResourceRecord:
    resource_id: str
    resource_name: str
    category: str                 # free-form, e.g. "Shelter", "Equipment"
    unit: str                     # e.g. "kits", "capacity"
    available_qty: int
    disaster_tags: Tuple[str, ...] = ()

    def has_tag(self, tag: str) -> bool:
        return tag in self.disaster_tags
