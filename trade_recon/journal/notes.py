"""
Journal notes

Free-form notes a trader keeps alongside an account's journal, such as
session reviews or chart screenshots.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass
class JournalNote:
    """A titled note attached to one account's journal"""
    title: str = ""
    content: str = ""
    image_path: str = ""
    account: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    note_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'note_id': self.note_id,
            'account': self.account,
            'created_at': self.created_at.isoformat(),
            'title': self.title,
            'content': self.content,
            'image_path': self.image_path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JournalNote':
        created_at = data.get('created_at')
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return cls(
            note_id=str(data.get('note_id') or uuid.uuid4()),
            account=data.get('account') or "",
            created_at=created_at or datetime.now(),
            title=data.get('title') or "",
            content=data.get('content') or "",
            image_path=data.get('image_path') or "",
        )
