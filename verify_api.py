"""Smoke test a running server.

    python seed_data.py && uvicorn travelblog.main:app --port 8000
    python verify_api.py http://localhost:8000
"""
import json
import os
import sys

import requests

BASE_URL = (sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000").rstrip("/")
API_URL = f"{BASE_URL}/api/v1"
EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
PASSWORD = os.environ.get("ADMIN_PASSWORD", "change-me-please")


def print_response(name, response):
    print(f"--- {name} ---")
    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2)[:1500])
    except ValueError:
        print(response.text[:500])
    print("\n")


def run_verification():
    print("1. Logging in...")
    resp = requests.post(f"{API_URL}/auth/token", data={"username": EMAIL, "password": PASSWORD})
    print_response("Login", resp)
    if resp.status_code != 200:
        print("Login failed, aborting.")
        return False
    headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}

    print("2. Dashboard stats...")
    print_response("Stats", requests.get(f"{API_URL}/admin/dashboard/stats", headers=headers))

    print("3. Public blog posts...")
    resp = requests.get(f"{API_URL}/blog/posts", params={"limit": 3})
    print_response("Blog Posts", resp)
    posts = resp.json().get("posts", []) if resp.ok else []

    if posts:
        print("4. Post detail and comments...")
        slug = posts[0]["slug"]
        print_response("Post Detail", requests.get(f"{API_URL}/blog/posts/{slug}"))
        print_response("Comments", requests.get(f"{API_URL}/comments", params={"postId": posts[0]["id"]}))

    print("5. Directory listings...")
    resp = requests.get(f"{API_URL}/directory-listings", params={"sort": "name", "order": "ASC"})
    print_response("Directory Listings", resp)

    print("6. Search...")
    print_response("Search", requests.get(f"{API_URL}/search", params={"q": "Sydney"}))

    print("7. Pages and feeds...")
    ok = True
    for path in ["/", "/blog", "/directory", "/destinations", "/destinations/sydney", "/sitemap.xml", "/rss"]:
        resp = requests.get(f"{BASE_URL}{path}")
        print(f"{path}: {resp.status_code}")
        ok = ok and resp.status_code == 200
    return ok


if __name__ == "__main__":
    sys.exit(0 if run_verification() else 1)
