from typing import Optional

BODY_PREVIEW = 250


class ConfigurationError(RuntimeError):
  """A required setting is missing or malformed. Raised at startup only."""


class UpstreamError(Exception):
  """Non-success response, transport failure or unusable payload from the Riot API."""

  def __init__(self, message: str, *, url: str = "", status: Optional[int] = None, body: str = ""):
    super().__init__(message)
    self.url = url
    self.status = status
    self.body = (body or "")[:BODY_PREVIEW]

  @classmethod
  def http(cls, url: str, status: int, body: str) -> "UpstreamError":
    preview = (body or "")[:BODY_PREVIEW]
    return cls(f"HTTP {status} for {url}: {preview}", url=url, status=status, body=preview)

  @classmethod
  def invalid_json(cls, url: str, body: str, status: Optional[int] = None) -> "UpstreamError":
    preview = (body or "")[:BODY_PREVIEW]
    return cls(f"Invalid JSON from {url}: {preview}", url=url, status=status, body=preview)

  @classmethod
  def invalid_payload(cls, what: str, err: Exception, *, url: str = "", body: str = "") -> "UpstreamError":
    """Short one-line error for an upstream payload that fails model validation."""
    errors = err.errors() if hasattr(err, "errors") else []
    if errors:
      first = errors[0]
      where = ".".join(str(p) for p in first.get("loc", ())) or "payload"
      reason = f"{where}: {first.get('msg', '')}"
    else:
      reason = str(err).splitlines()[0] if str(err) else type(err).__name__
    return cls(f"Invalid {what} from {url or 'upstream'}: {reason}", url=url, body=body)
