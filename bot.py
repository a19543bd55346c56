#!/usr/bin/env python3
"""Onboarding bot for a school community server
----------------------------------------------
* Posts a welcome/farewell embed to the joins-and-leaves channel on join,
  leave, kick, ban and unban.
* Adds an admin-only "Verify" message context menu that turns a
  ``Full Name`` / ``class/division`` message into a nickname and roles.

Required env-vars: BOT_TOKEN, CLIENT_ID, GUILD_ID
Optional: NOTIFICATION_CHANNEL_NAME, VERIFICATION_CHANNEL_NAME,
VERIFIED_ROLE_NAME, GRADE_ROLE_TEMPLATE, CLEANUP_DELAY_SECONDS, LOG_LEVEL,
SHADOW_MODE, SHADOW_CHANNEL_ID
"""

import asyncio

from bots.runtime import main

if __name__ == "__main__":
    asyncio.run(main())
