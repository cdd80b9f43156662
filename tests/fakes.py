import requests


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Substitui requests.Session: respostas registradas por URL."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, url, payload=None, status_code=200, exc=None):
        self.routes[url] = (payload, status_code, exc)

    def get(self, url, timeout=None):
        self.calls.append(url)
        if url not in self.routes:
            raise requests.ConnectionError(f"no route for {url}")
        payload, status_code, exc = self.routes[url]
        if exc is not None:
            raise exc
        return FakeResponse(payload, status_code)
