"""
Editor block model

The structured block editor hands over a list of blocks shaped like

    {"type": "heading", "text": "Intro", "level": 1}
    {"type": "code", "language": "python", "code": "print(1)"}
    {"type": "carousel", "caption": "Steps",
     "images": [{"src": "a.png", "alt": "First"}]}
    {"type": "code-collection", "title": "Hello",
     "snippets": [{"language": "python", "code": "print(1)"}]}

EditorBlock keeps the type apart from the free-form fields.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping


@dataclass
class EditorBlock:
    """
    One block from the structured editor

    Attributes:
        type: Block type; the Serializer's handlers decide which are supported
        fields: Block fields as entered in the editor
    """
    type: str
    fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EditorBlock":
        """
        Build a block from the editor's flat JSON shape

        Example:
            >>> EditorBlock.from_dict({"type": "note", "text": "Hi"})
            EditorBlock(type='note', fields={'text': 'Hi'})
        """
        fields = {key: value for key, value in data.items() if key != "type"}
        return cls(type=str(data.get("type") or ""), fields=fields)

    def text_get(self, name: str, default: str = "") -> str:
        """Field as a string; None and missing give the default"""
        value = self.fields.get(name)
        return default if value is None else str(value)

    def items_get(self, name: str) -> List[Any]:
        """
        List field (images, snippets); missing gives []

        A scalar is returned as a one-entry list so the caller can reject it.
        """
        value = self.fields.get(name)
        if not value:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]
