"""Core logic for the onboarding bot.

Membership notifications and the Verify workflow live here; the discord.py
runtime in ``bots`` only wires platform events into these modules.
"""
