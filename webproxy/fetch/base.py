from dataclasses import dataclass
from typing import Optional

DEFAULT_CONTENT_TYPE = "application/octet-stream"

@dataclass(frozen=True)
class FetchResult:
    url: str
    final_url: str
    content_type: str
    body: bytes
    encoding: Optional[str]
    fetched_at: str  # ISO 8601

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding or "utf-8", errors="replace")
