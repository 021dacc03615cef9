#!/usr/bin/env python3
"""
Super simple AI Assistant REST API demo.

Start the server first:
    uvicorn aiassistant.rest.main:app --reload

Without AIAssistant__EndPoint, AIAssistant__Key and AIAssistant__Id (or the
matching vault secrets) the server answers in test mode and echoes messages.
"""

import sys
import requests


def main():
    print("🤖 Simple AI Assistant Demo")
    print("=" * 30)

    base_url = "http://localhost:8000"
    prompt = " ".join(sys.argv[1:]) or "Hello! Tell me a fun fact about Python programming."

    try:
        # Step 1: Check which mode the server is in
        print("🩺 Checking server health...")
        response = requests.get(f"{base_url}/health")
        response.raise_for_status()
        print(f"   ✅ Server is {response.json()['mode']}")

        # Step 2: Send a chat message
        print("\n💭 Sending chat message...")
        print(f"   👤 User: {prompt}")

        response = requests.post(f"{base_url}/chat", json={"message": prompt})
        response.raise_for_status()
        reply = response.json()
        print(f"   🤖 Assistant ({reply['kind']}): {reply['response']}")

    except requests.exceptions.ConnectionError:
        print("❌ Can't connect to API server. Make sure it's running:")
        print("   uvicorn aiassistant.rest.main:app --reload")

    except Exception as e:
        print(f"❌ Error: {e}")


if __name__ == "__main__":
    main()
