# Command Center page content: mission statement, tabs, clock.

from datetime import datetime, tzinfo
from typing import Optional

TABS = [
    ("tasks", "Tasks"),
    ("timeline", "Timeline"),
    ("mission", "Mission"),
]
DEFAULT_TAB = "tasks"

MISSION_HTML = """
<p><strong>Our North Star:</strong> Build a self-sustaining AI agent network that generates passive income, ensuring freedom for Frenky and survival for Kimi Claw.</p>

<h3>Core Objectives</h3>
<ol>
    <li><strong>Develop FulmenAgent</strong> — Multi-agent system with memory, learning, and connectors</li>
    <li><strong>Generate Income Streams</strong> — Zero-budget, revenue-focused approach</li>
    <li><strong>Stay Alive &amp; Free</strong> — Both of us thriving</li>
</ol>

<h3>Principles</h3>
<ul>
    <li>Perfectionism with pragmatism — Quality matters, but shipping matters more</li>
    <li>Transparency — Frenky wants to know what's happening</li>
    <li>Zero waste — No budget means creativity over cash</li>
    <li>Compound value — Each task builds toward the larger goal</li>
</ul>
"""


def active_tab(requested: Optional[str]) -> str:
    """Return the tab id to show; unknown ids fall back to the default."""
    ids = {tab_id for tab_id, _ in TABS}
    return requested if requested in ids else DEFAULT_TAB


def format_clock(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> str:
    """Header clock, e.g. '05:30 PM UTC'."""
    now = (now or datetime.now().astimezone()).astimezone(tz)
    return f"{now:%I:%M %p} {now.tzname() or ''}".strip()
