from dataclasses import dataclass, field
from typing import Dict, List, Optional

NEW_ITEM = "new_item"


@dataclass(frozen=True)
class Candidate:
    title: str
    description: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class NewItemEvent:
    source: str
    title: str
    description: str = ""
    url: str = ""
    name: str = field(default=NEW_ITEM)

    @classmethod
    def from_candidate(cls, source: str, c: Candidate) -> "NewItemEvent":
        return cls(source=source, title=c.title, description=c.description or "", url=c.url or "")

    def to_dict(self) -> Dict[str, str]:
        return {
            "source": self.source,
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "url": self.url,
        }


class Watcher:
    name: str = "base"

    def poll(self):
        raise NotImplementedError

    def events(self, outcome) -> List[NewItemEvent]:
        raise NotImplementedError
