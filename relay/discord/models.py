"""
Discord webhook payload records.

Serialization follows Discord's execute-webhook JSON: optional values that are
empty are left out of the body entirely.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class EmbedField:
    name: str
    value: str
    inline: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "value": self.value}
        if self.inline:
            data["inline"] = True
        return data


@dataclass
class EmbedFooter:
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass
class DiscordEmbed:
    """A single rich card in a Discord message."""
    title: str = ""
    description: str = ""
    url: str = ""
    color: int = 0  # 24-bit RGB
    fields: List[EmbedField] = field(default_factory=list)
    timestamp: str = ""  # ISO 8601
    footer: Optional[EmbedFooter] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.title:
            data["title"] = self.title
        if self.description:
            data["description"] = self.description
        if self.url:
            data["url"] = self.url
        if self.color:
            data["color"] = self.color
        if self.fields:
            data["fields"] = [f.to_dict() for f in self.fields]
        if self.timestamp:
            data["timestamp"] = self.timestamp
        if self.footer is not None:
            data["footer"] = self.footer.to_dict()
        return data


@dataclass
class DiscordWebhook:
    """Body of one POST to a Discord webhook URL."""
    content: str = ""
    embeds: List[DiscordEmbed] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.content:
            data["content"] = self.content
        if self.embeds:
            data["embeds"] = [e.to_dict() for e in self.embeds]
        return data
