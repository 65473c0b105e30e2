#!/usr/bin/env python3
"""Print the Gemini models visible to GOOGLE_API_KEY as JSON."""

import json
import os
import sys
from dataclasses import asdict

from dotenv import load_dotenv

from errors import ProviderError
from gemini_provider import GeminiProvider


def main(provider=None) -> int:
    if provider is None:
        load_dotenv()
        api_key = os.getenv('GOOGLE_API_KEY') or os.getenv('GEMINI_API_KEY')
        if not api_key:
            print("❌ GOOGLE_API_KEY is not set", file=sys.stderr)
            return 1
        provider = GeminiProvider(api_key)

    try:
        models = provider.list_models()
    except ProviderError as e:
        print(f"listModels error: {e}", file=sys.stderr)
        return 1

    print(json.dumps([asdict(m) for m in models], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
