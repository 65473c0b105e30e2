#!/usr/bin/env python3
"""
Replace the bot's registered Telegram commands with the ones this bot handles.
Reads TELEGRAM_BOT_TOKEN from the environment (or .env), or prompts for it.
"""

import os
import sys

import requests
from dotenv import load_dotenv

API_URL = "https://api.telegram.org/bot{token}/{method}"

BOT_COMMANDS = [
    {"command": "start", "description": "Show status and help"},
    {"command": "model_flash", "description": "Use gemini-1.5-flash (faster)"},
    {"command": "model_pro", "description": "Use gemini-1.5-pro (smarter)"},
    {"command": "models", "description": "List available Gemini models"},
]


def _call(token, method, payload=None):
    """POST to a Bot API method and return its result, or None on failure"""
    url = API_URL.format(token=token, method=method)
    response = requests.post(url, json=payload, timeout=10)

    if response.status_code == 200:
        data = response.json()
        if data.get('ok'):
            return data.get('result')
    return None


def get_current_commands(token):
    """Get currently registered commands"""
    return _call(token, "getMyCommands") or []


def delete_all_commands(token):
    """Delete all bot commands"""
    return bool(_call(token, "deleteMyCommands"))


def set_commands(token, commands=BOT_COMMANDS):
    """Register the given commands"""
    return bool(_call(token, "setMyCommands", {"commands": commands}))


def main():
    load_dotenv()
    token = os.getenv('TELEGRAM_BOT_TOKEN', '').strip()
    if not token:
        token = input("📝 Enter your Telegram Bot Token: ").strip()

    if not token:
        print("❌ No token provided. Exiting.")
        sys.exit(1)

    print("\n📋 Current registered commands:")
    current = get_current_commands(token)
    if current:
        for cmd in current:
            print(f"  /{cmd['command']} - {cmd['description']}")
    else:
        print("  (No commands registered)")

    print("\n🗑️  Deleting old commands...")
    if not delete_all_commands(token):
        print("❌ Failed to delete commands. Check your bot token.")
        sys.exit(1)

    print("✨ Setting new commands...")
    if not set_commands(token):
        print("❌ Failed to set new commands. Check your bot token.")
        sys.exit(1)

    for cmd in BOT_COMMANDS:
        print(f"  /{cmd['command']} - {cmd['description']}")
    print("\n🎉 Done! Restart your Telegram app to see the new command list.")


if __name__ == "__main__":
    main()
