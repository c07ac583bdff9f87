from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .common import LabelType
from .config import logger


@dataclass
class RegistryEntry:
    """What is known about one resolved label.

    Attributes:
        label: The label name, e.g. "eq:einstein"
        label_type: Type the label was resolved as
        owner: Handle of the rendered node holding the anchor (see ``RenderedTree.handle_for``)
        number: The number shown in the rendered document, if one could be read
        anchor_id: Id of the anchor element links point at
        created_at: Unix timestamp of registration
        unreliable: Set when another label shares this entry's owner and number
    """

    label: str
    label_type: LabelType
    owner: Optional[str]
    number: Optional[str]
    anchor_id: str
    created_at: float = field(default_factory=time.time)
    unreliable: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(self.number) and self.label_type is not None and bool(self.owner)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "type": self.label_type.value,
            "owner": self.owner,
            "number": self.number,
            "anchor_id": self.anchor_id,
            "created_at": self.created_at,
            "unreliable": self.unreliable,
        }


class ReferenceRegistry:
    """Label -> RegistryEntry map for one document build."""

    def __init__(self):
        self._entries: Dict[str, RegistryEntry] = dict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, label: str) -> bool:
        return label in self._entries

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._entries.values())

    def register(
        self,
        label: str,
        label_type: LabelType,
        owner: Optional[str],
        number: Optional[str],
        anchor_id: str,
    ) -> RegistryEntry:
        if label in self._entries:
            logger.debug(f'Overwriting registry entry for "{label}"')
        entry = RegistryEntry(label, label_type, owner, number, anchor_id)
        self._entries[label] = entry
        logger.debug(f'Registered "{label}" ({label_type.value}) number={number} owner={owner}')
        return entry

    def get(self, label: str) -> Optional[RegistryEntry]:
        return self._entries.get(label)

    def entries(self) -> List[RegistryEntry]:
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()
