"""Response Middleware — counts every HTTP status served by the app.

Invariants:
    - Exactly one increment per response, including error envelopes
    - An exception escaping the app counts as 500, then propagates unchanged
"""

from fastapi import FastAPI, Request

from quietbackend.infrastructure.metrics import HttpStatusCounter


def register_response_metrics(app: FastAPI, counter: HttpStatusCounter) -> None:
    @app.middleware("http")
    async def count_http_responses(request: Request, call_next):
        try:
            response = await call_next(request)
        except Exception:
            counter.increment(500)
            raise
        counter.increment(response.status_code)
        return response
