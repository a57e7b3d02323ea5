"""
ServiceHub client
=================
A small client for the ServiceHub API with two views:

    /register  -> RegistrationView  (username + password form)
    /book      -> BookingView       (category selector + description)

Usage:
    python client.py register alice pw1
    python client.py book alice pw1 "Leaky faucet" --category Plumber

The API base URL is read from SERVICEHUB_API_URL (default http://localhost:8000).
"""

import argparse
import logging
import os
from typing import List, Optional

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

API_URL = os.getenv("SERVICEHUB_API_URL", "http://localhost:8000")


def alert(message: str):
    print(message)


class ServiceHubClient:
    """Thin wrapper over a requests.Session bound to one API base URL."""

    def __init__(self, base_url: str = API_URL, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    @property
    def logged_in(self) -> bool:
        return self.token is not None

    def _post(self, path: str, payload: dict) -> dict:
        response = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _get(self, path: str):
        response = self.session.get(f"{self.base_url}{path}", timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def register(self, username: str, password: str) -> dict:
        return self._post("/api/users/register", {"username": username, "password": password})

    def login(self, username: str, password: str) -> dict:
        data = self._post("/api/users/login", {"username": username, "password": password})
        self.token = data["access_token"]
        self.session.headers["Authorization"] = f"Bearer {self.token}"
        return data

    def list_categories(self) -> List[dict]:
        return self._get("/api/services")

    def book_service(self, description: str, category_id: int) -> dict:
        return self._post("/api/bookService", {"description": description, "categoryId": category_id})


class RegistrationView:
    def __init__(self, client: ServiceHubClient):
        self.client = client
        self.username = ""
        self.password = ""

    def submit(self) -> bool:
        try:
            self.client.register(self.username, self.password)
        except requests.RequestException as e:
            logger.error(f"Registration failed: {e}")
            return False
        alert("User registered successfully")
        return True


class BookingView:
    def __init__(self, client: ServiceHubClient):
        self.client = client
        self.categories: List[dict] = []
        self.selected_category: Optional[int] = None
        self.description = ""
        self._mounted = False

    def mount(self):
        """Fetch the category list once."""
        if self._mounted:
            return
        self._mounted = True
        try:
            self.categories = self.client.list_categories()
        except requests.RequestException as e:
            logger.error(f"Could not load categories: {e}")
            self.categories = []

    def select(self, category_id: int):
        if not any(c["id"] == category_id for c in self.categories):
            raise ValueError(f"Unknown category id {category_id}")
        self.selected_category = category_id

    def select_by_name(self, name: str):
        for c in self.categories:
            if c["name"].lower() == name.lower():
                self.selected_category = c["id"]
                return
        raise ValueError(f"Unknown category {name!r}")

    def submit(self) -> Optional[dict]:
        if self.selected_category is None:
            logger.error("Booking failed: no category selected")
            return None
        try:
            result = self.client.book_service(self.description, self.selected_category)
        except requests.RequestException as e:
            logger.error(f"Booking failed: {e}")
            return None
        alert("Service booked successfully")
        return result


ROUTES = {
    "/register": RegistrationView,
    "/book": BookingView,
}

# routes that need a logged-in client
PROTECTED_ROUTES = {"/book"}


class AuthRequired(Exception):
    pass


def navigate(client: ServiceHubClient, path: str):
    """Build a fresh view for ``path``; view state never survives navigation."""
    try:
        view_cls = ROUTES[path]
    except KeyError:
        raise ValueError(f"No route for {path!r}") from None
    if path in PROTECTED_ROUTES and not client.logged_in:
        raise AuthRequired(f"Login required for {path}")
    view = view_cls(client)
    if hasattr(view, "mount"):
        view.mount()
    return view


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="ServiceHub client")
    parser.add_argument("--api", default=API_URL, help="API base URL")
    sub = parser.add_subparsers(dest="command", required=True)

    reg = sub.add_parser("register", help="register a new account")
    reg.add_argument("username")
    reg.add_argument("password")

    book = sub.add_parser("book", help="log in and book a service")
    book.add_argument("username")
    book.add_argument("password")
    book.add_argument("description")
    book.add_argument("--category", required=True, help="category name")

    args = parser.parse_args(argv)
    client = ServiceHubClient(args.api)

    if args.command == "register":
        view = navigate(client, "/register")
        view.username, view.password = args.username, args.password
        return 0 if view.submit() else 1

    try:
        client.login(args.username, args.password)
    except requests.RequestException as e:
        logger.error(f"Login failed: {e}")
        return 1
    view = navigate(client, "/book")
    try:
        view.select_by_name(args.category)
    except ValueError as e:
        logger.error(str(e))
        return 1
    view.description = args.description
    return 0 if view.submit() else 1


if __name__ == "__main__":
    raise SystemExit(main())
