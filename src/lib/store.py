"""
Content store interface

The store persists envelope text per topic and never looks inside it.
Real deployments back this with their HTTP API or database; the codec only
needs the two calls below.
"""

from typing import Dict, Protocol


class ContentStore(Protocol):
    """Persistence collaborator for envelope text"""

    def get_content(self, topic_key: str) -> str:
        ...

    def put_content(self, topic_key: str, envelope_text: str) -> None:
        ...


class MemoryContentStore:
    """
    Dict-backed ContentStore

    Example:
        >>> store = MemoryContentStore()
        >>> store.put_content("python/intro", "<content/>")
        >>> store.get_content("python/intro")
        '<content/>'
    """

    def __init__(self) -> None:
        self.contents: Dict[str, str] = {}

    def get_content(self, topic_key: str) -> str:
        """
        Raises:
            KeyError: No content stored for topic_key
        """
        return self.contents[topic_key]

    def put_content(self, topic_key: str, envelope_text: str) -> None:
        self.contents[topic_key] = envelope_text
