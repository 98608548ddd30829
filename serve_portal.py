#!/usr/bin/env python3
"""Staff Reflection Portal — web server launcher.

Launch: python3 serve_portal.py
Serves at http://0.0.0.0:8000 (or PORT env var)
"""

import uvicorn

from reflection_portal.config import HOST, PORT, SUPABASE_URL


def main():
    print("=" * 60)
    print("  Staff Reflection Portal")
    print("=" * 60)

    if not SUPABASE_URL:
        print("\n  WARNING: SUPABASE_URL not set. Set environment variables:")
        print("    SUPABASE_URL, SUPABASE_SERVICE_KEY, ANTHROPIC_API_KEY, SESSION_SECRET")
        print("  Continuing anyway for local development...\n")

    url = f"http://{HOST}:{PORT}"
    print(f"\n  Portal: {url}")
    print("  Press Ctrl+C to stop\n")

    from reflection_portal.app import create_app
    app = create_app()
    uvicorn.run(app, host=HOST, port=PORT, log_level="info")


if __name__ == "__main__":
    main()
