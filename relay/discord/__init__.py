# Package
from relay.discord.api import DeliveryError, DiscordAPI
from relay.discord.models import DiscordEmbed, DiscordWebhook, EmbedField, EmbedFooter

__all__ = [
    "DeliveryError",
    "DiscordAPI",
    "DiscordEmbed",
    "DiscordWebhook",
    "EmbedField",
    "EmbedFooter",
]
