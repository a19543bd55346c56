"""discord.py runtime for the onboarding bot.

Wires membership events and the Verify context menu into ``onboarding_bot``.
"""

__all__ = ["config", "membership", "runtime", "shadow", "verification"]
