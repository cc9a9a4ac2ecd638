"""CLI command modules for obsidian-anki-bridge.

- shared.py: Common utilities (config/logger loading, console, tables)
- flashcard_commands.py: parse, preview, sync, list and check
"""
