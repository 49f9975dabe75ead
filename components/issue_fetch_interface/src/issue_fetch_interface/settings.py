"""Connection settings contract."""

from dataclasses import dataclass, fields as dataclass_fields


@dataclass(frozen=True)
#frozen so the settings cannot change once loaded
class ConnectionSettings:
    """
    Args:
        base_url:  Jira instance root URL (e.g. 'https://myorg.atlassian.net')
        username:  Account name or email used for basic authentication
        api_token: API token paired with the username
    """

    base_url: str
    username: str
    api_token: str

    def __post_init__(self) -> None:
        empty = [f.name for f in dataclass_fields(self) if not str(getattr(self, f.name) or "").strip()]
        if empty:
            raise ValueError(f"Connection settings must not be empty: {', '.join(empty)}")

    @property
    def root_url(self) -> str:
        """Return base_url without a trailing slash."""
        return self.base_url.rstrip("/")

    #keep the token out of logs and tracebacks
    def __repr__(self) -> str:
        return f"<ConnectionSettings base_url={self.base_url!r} username={self.username!r}>"
