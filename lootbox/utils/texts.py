# lootbox/utils/texts.py
"""Reply texts (HTML parse mode)."""
from __future__ import annotations

from html import escape

from lootbox.database.models import Content, ContentType, RarityTier
from lootbox.services.achievements import AchievementReport
from lootbox.services.collection import CollectionStats, Page
from lootbox.services.dashboard import ActivityEntry, DashboardStats
from lootbox.services.entitlement import Entitlement
from lootbox.services.errors import DailyLimitReached
from lootbox.services.lootbox import SpinOutcome
from lootbox.services.rarity import rarity_of

TYPE_ICONS = {"movie": "🎬", "series": "📺"}
MEDAL_ICONS = {"bronze": "🥉", "silver": "🥈", "gold": "🥇", "legendary": "👑", "mythic": "🌟"}


def content_title(c: Content) -> str:
    title = escape(c.title)
    return f"{title} ({c.year})" if c.year else title


def spin_outcome(o: SpinOutcome, *, guest: bool = False) -> str:
    c = o.content
    icon = TYPE_ICONS.get(c.type.value, "🎁")
    lines = [
        f"{o.rarity.icon} <b>{o.rarity.label}</b> {icon}",
        f"<b>{content_title(c)}</b>",
        f"Quality score: <b>{o.quality_score}</b>",
        f"🍅 {c.critics_score}% · 🍿 {c.audience_score}% · IMDb {c.imdb_rating}",
    ]
    if c.genres:
        lines.append(f"🎭 {escape(', '.join(c.genres))}")
    if c.platforms:
        lines.append(f"📺 Where to watch: {escape(', '.join(c.platforms))}")
    if c.description:
        lines.append(f"\n<i>{escape(c.description)}</i>")

    if guest:
        lines.append("\n👀 Preview only, not added to your collection.")
        return "\n".join(lines)

    if o.was_new_unlock:
        extra = f" ({o.total_unlocks} in your collection)" if o.total_unlocks else ""
        lines.append(f"\n🆕 <b>New unlock!</b>{extra}")
    else:
        lines.append("\n🔁 Already in your collection.")
    lines.append(f"🎰 Spins left: <b>{o.spins_remaining}</b>")
    return "\n".join(lines)


def spin_status(e: Entitlement) -> str:
    reset = e.next_reset_at.strftime("%Y-%m-%d %H:%M %Z")
    text = (
        "🎰 <b>Your spins</b>\n"
        f"Used today: <b>{e.used}/{e.daily_limit}</b>\n"
        f"Remaining: <b>{e.remaining}</b>\n"
    )
    if e.admin_override:
        text += f"Bonus spins: <b>{e.admin_override}</b>\n"
    text += f"Next reset: {reset}"
    return text


def limit_reached(err: DailyLimitReached) -> str:
    reset = err.reset_at.strftime("%Y-%m-%d %H:%M %Z")
    return (
        "⏳ <b>Daily spin limit reached.</b>\n"
        f"You get {err.daily_limit} new spins at <b>{reset}</b>."
    )


def collection_stats(s: CollectionStats) -> str:
    lines = [
        "🏆 <b>Trophy cabinet</b>",
        f"Unlocked: <b>{s.total_unlocks}</b> · Spins: <b>{s.total_spins}</b>",
        f"Epic or better: <b>{s.high_quality_unlocks}</b>",
        "",
    ]
    for tier in reversed(list(RarityTier)):
        r = rarity_of(tier)
        lines.append(f"{r.icon} {r.label}: {s.by_tier.get(tier, 0)}")
    return "\n".join(lines)


def achievements(report: AchievementReport) -> str:
    lines = [
        f"🎖 <b>Achievements</b> ({report.unlocked}/{len(report.achievements)})",
        f"Active days (last 30): <b>{report.counts.active_days}</b>",
        "",
    ]
    for a in report.achievements:
        mark = "✅" if a.unlocked else "▫️"
        medal = MEDAL_ICONS.get(a.medal, "")
        lines.append(f"{mark} {medal} <b>{escape(a.name)}</b> {a.progress}/{a.target}")
        lines.append(f"    <i>{escape(a.description)}</i>")
    return "\n".join(lines)


def dashboard_stats(s: DashboardStats) -> str:
    lines = [
        "📊 <b>Admin dashboard</b>",
        f"Users: <b>{s.total_users}</b> · active this week: <b>{s.active_users}</b>",
        f"Content: <b>{s.total_content}</b> ({s.movies} movies, {s.series} series)",
        f"Spins today: <b>{s.spins_today}</b> · unlocks: <b>{s.total_unlocks}</b>",
        "",
        "<b>Unlocks by rarity</b>",
    ]
    for tier in reversed(list(RarityTier)):
        r = rarity_of(tier)
        lines.append(f"{r.icon} {r.label}: {s.unlocks_by_tier.get(tier, 0)}")
    lines.append("")
    lines.append("<b>Spins by type (30 days)</b>")
    for ctype in ContentType:
        lines.append(f"{TYPE_ICONS[ctype.value]} {ctype.value}: {s.spins_by_type.get(ctype, 0)}")
    return "\n".join(lines)


def activity_log(result: Page[ActivityEntry]) -> str:
    lines = [f"🕒 <b>Recent spins</b> (page {result.page}/{result.pages}, {result.total} total)"]
    for e in result.items:
        r = rarity_of(e.spin.rarity_tier)
        who = f"@{e.user.username}" if e.user.username else str(e.user.telegram_id)
        when = e.spin.created_at.strftime("%m-%d %H:%M")
        new = " 🆕" if e.spin.was_new_unlock else ""
        lines.append(f"{when} {escape(who)} {r.icon} {content_title(e.content)}{new}")
    if result.has_next:
        lines.append(f"\nMore: /activity {result.page + 1}")
    return "\n".join(lines)
