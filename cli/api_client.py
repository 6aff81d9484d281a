"""REST API client for kanadrill server."""

import requests


class DrillAPIClient:
    """Client for communicating with the kanadrill REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "default"):
        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        if params is None:
            params = {}
        params['user_id'] = self.user_id
        response = self.session.get(f"{self.base_url}{endpoint}", params=params)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict = None) -> dict:
        """Make a POST request."""
        data = dict(data or {})
        data['user_id'] = self.user_id
        response = self.session.post(f"{self.base_url}{endpoint}", json=data)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        response = self.session.get(f"{self.base_url}/")
        response.raise_for_status()
        return response.json()

    def get_session(self) -> dict:
        return self._get("/api/session")

    def send_input(self, text: str) -> dict:
        return self._post("/api/input", {'text': text})

    def commit(self) -> dict:
        return self._post("/api/commit")

    def toggle_reveal(self) -> dict:
        return self._post("/api/reveal")

    def change_settings(self, settings: dict) -> dict:
        return self._post("/api/settings", settings)
