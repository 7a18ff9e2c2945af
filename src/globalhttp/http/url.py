"""
URL builder used by the verb facades.
"""

from urllib.parse import quote, urlencode


class UrlBuilder:
    """
    Assemble a URL from a base, path segments and query parameters.

    Usage:
        UrlBuilder("https://api.example.com/v1").path("users", 42).query("expand", "groups").build()
    """

    def __init__(self, base_url: str = ""):
        self.base_url = base_url
        self._segments: list[str] = []
        self._query: list[tuple[str, str]] = []

    def path(self, *segments) -> "UrlBuilder":
        """Append escaped path segments."""
        for segment in segments:
            self._segments.append(quote(str(segment), safe=""))
        return self

    def query(self, name: str, value) -> "UrlBuilder":
        """Append one query parameter (None values are skipped)."""
        if value is not None:
            self._query.append((name, str(value)))
        return self

    def params(self, **params) -> "UrlBuilder":
        for name, value in params.items():
            self.query(name, value)
        return self

    def build(self) -> str:
        url = self.base_url
        if self._segments:
            url = url.rstrip("/") + "/" + "/".join(self._segments)
        if self._query:
            separator = "&" if "?" in url else "?"
            url = url + separator + urlencode(self._query)
        return url

    def __str__(self) -> str:
        return self.build()
