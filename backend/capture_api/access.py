import hmac
from typing import Any, Mapping, Optional

from .options import SECRET_KEY


def is_allowed(query: Optional[Mapping[str, Any]], secret: Optional[str]) -> bool:
    """Check the request's secret token against the configured one.

    Without a configured secret every request is allowed; otherwise the
    token must match exactly.
    """
    if not secret:
        return True
    token = (query or {}).get(SECRET_KEY)
    if not isinstance(token, str) or not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))
