"""HTTP caller for the exchange core.

ExchangeSession issues the GET/PUT requests, keeps the session cookies,
and re-interprets every resource it receives or every body it mutates.
"""

from auth_explorer.client.session import ExchangeResult, ExchangeSession

__all__ = [
    "ExchangeResult",
    "ExchangeSession",
]
