"""
Translate Jenkins build events into Discord webhook messages.

Everything here is a pure function of its inputs. Unknown result, phase and
event codes render gray with the raw code as the label instead of failing.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from relay.datetime_utils import format_datetime_local, format_duration_ms, format_epoch_millis
from relay.discord.models import DiscordEmbed, DiscordWebhook, EmbedField, EmbedFooter
from relay.jenkins.models import InboundEvent, JenkinsEvent, LegacyJenkinsEvent

GREEN = 0x00FF00
RED = 0xFF0000
ORANGE = 0xFFA500
GRAY = 0x808080
BLUE = 0x0099FF

FOOTER_TEXT = "Jenkins CI/CD"

# Terminal build results, matched case-sensitively
RESULT_STYLES = {
    "SUCCESS": (GREEN, "✅ Success"),
    "FAILURE": (RED, "❌ Failure"),
    "UNSTABLE": (ORANGE, "⚠️ Unstable"),
    "ABORTED": (GRAY, "🛑 Aborted"),
}

# Lifecycle phases, used while the result is still empty
PHASE_STYLES = {
    "STARTED": (BLUE, "🔄 Started"),
    "COMPLETED": (GREEN, "✅ Completed"),
}

# Event names sent by the legacy flat payload
EVENT_STYLES = {
    "success": (GREEN, "✅ Success"),
    "failure": (RED, "❌ Failure"),
    "failed": (RED, "❌ Failure"),
    "unstable": (ORANGE, "⚠️ Unstable"),
    "aborted": (GRAY, "🛑 Aborted"),
    "started": (BLUE, "🔄 Started"),
}


def classify(result: str, status: str) -> Tuple[int, str]:
    """
    Return the (color, label) for a build.

    A non-empty result wins over the status/phase.
    """
    if result:
        return RESULT_STYLES.get(result, (GRAY, result))
    return PHASE_STYLES.get(status, (GRAY, status))


def classify_event(event: str) -> Tuple[int, str]:
    return EVENT_STYLES.get(event, (GRAY, event))


def format_build_vars(build_vars: str) -> str:
    """
    Render a Jenkins build-variables string as Discord markdown lines.

    Input looks like "{BRANCH=main, TARGET=prod}". Only the outermost braces
    are stripped, entries are split on ", " and each entry on its first "=".
    Entries without "=" are dropped, so nested braces or commas inside values
    degrade to fewer lines rather than an error.
    """
    if not build_vars:
        return ""

    clean_vars = build_vars
    if clean_vars.startswith("{"):
        clean_vars = clean_vars[1:]
    if clean_vars.endswith("}"):
        clean_vars = clean_vars[:-1]
    if not clean_vars:
        return ""

    formatted = []
    for entry in clean_vars.split(", "):
        key, sep, value = entry.partition("=")
        if sep:
            formatted.append(f"**{key.strip()}**: {value.strip()}")

    return "\n".join(formatted)


def build_embed(event: JenkinsEvent) -> DiscordEmbed:
    build = event.build
    color, status_text = classify(build.result, build.status)
    display_name = event.display_name or event.name

    fields = [
        EmbedField("Build Number", f"#{build.number}", inline=True),
        EmbedField("Status", status_text, inline=True),
        EmbedField("Duration", format_duration_ms(build.duration), inline=True),
        EmbedField("Phase", build.status, inline=True),
    ]
    if build.cause:
        fields.append(EmbedField("Cause", build.cause))

    return DiscordEmbed(
        title=f"{display_name} - Build #{build.number}",
        description=build.full_display_name,
        url=build.url,
        color=color,
        fields=fields,
        timestamp=format_epoch_millis(build.timestamp),
        footer=EmbedFooter(FOOTER_TEXT),
    )


def build_legacy_embed(event: LegacyJenkinsEvent, now: datetime) -> DiscordEmbed:
    color, status_text = classify_event(event.event)

    fields = [
        EmbedField("Build", event.build_name, inline=True),
        EmbedField("Status", status_text, inline=True),
        EmbedField("Project", event.project_name, inline=True),
    ]
    build_vars = format_build_vars(event.build_vars)
    if build_vars:
        fields.append(EmbedField("Build Variables", build_vars))

    return DiscordEmbed(
        title=f"{event.project_name} - {event.build_name}",
        description=f"Build {event.event}",
        url=event.build_url,
        color=color,
        fields=fields,
        timestamp=format_datetime_local(now),
        footer=EmbedFooter(FOOTER_TEXT),
    )


def convert(event: InboundEvent, now: Optional[datetime] = None) -> DiscordWebhook:
    """
    Convert a Jenkins event into a Discord message with a single embed.

    Args:
        event: parsed inbound event of either shape
        now: time stamped on legacy events, which carry no build time

    Returns:
        DiscordWebhook ready to be sent
    """
    if isinstance(event, LegacyJenkinsEvent):
        embed = build_legacy_embed(event, now or datetime.now(timezone.utc))
    else:
        embed = build_embed(event)

    return DiscordWebhook(embeds=[embed])
