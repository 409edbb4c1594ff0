"""FastAPI web application for textask."""

import logging
from typing import Dict, Optional

from fastapi import Depends, FastAPI, Header, Request, status
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from textask import __version__
from textask.api.dependencies import get_coda_client, get_oracle, get_rate_limiter, get_settings
from textask.auth.twilio_signature import is_allowed_sender, is_valid_signature
from textask.config import Settings
from textask.engine.delimiter_parser import TaskInputError
from textask.engine.interpret import interpret
from textask.integrations.coda import CodaClient, CodaError
from textask.integrations.openai_client import OracleClient
from textask.integrations.rate_limiter import InMemoryRateLimiter
from textask.models.metrics import PipelineMetrics

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Item successfully added!"
PERSISTENCE_FAILURE_MESSAGE = "Oops! Something went wrong. Please try again later."

# Initialize FastAPI app
app = FastAPI(
    title="textask API",
    description="Turns inbound SMS messages into tasks",
    version=__version__,
)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


def _create_task(
    body: str,
    coda: CodaClient,
    oracle: OracleClient,
    settings: Settings,
    metrics: PipelineMetrics,
) -> Dict[str, str]:
    vocabularies = coda.fetch_vocabularies()
    record = interpret(body, vocabularies, settings, oracle=oracle, metrics=metrics)
    return coda.create_record(record)


@app.post("/sms", response_class=PlainTextResponse)
async def receive_sms(
    request: Request,
    x_twilio_signature: Optional[str] = Header(default=None, alias="X-Twilio-Signature"),
    settings: Settings = Depends(get_settings),
    rate_limiter: InMemoryRateLimiter = Depends(get_rate_limiter),
    oracle: OracleClient = Depends(get_oracle),
    coda: CodaClient = Depends(get_coda_client),
):
    """Twilio SMS webhook: create a task from the message body."""
    form = await request.form()
    params = {key: str(value) for key, value in form.items()}
    sender = params.get("From", "")
    body = params.get("Body", "")

    if not is_allowed_sender(sender, settings.outbound_phone):
        logger.warning("Rejected message from unknown sender")
        return PlainTextResponse("Forbidden", status_code=status.HTTP_403_FORBIDDEN)

    if settings.twilio_auth_token:
        url = settings.public_webhook_url or str(request.url)
        if not is_valid_signature(settings.twilio_auth_token, url, params, x_twilio_signature):
            logger.warning("Rejected message with invalid Twilio signature")
            return PlainTextResponse("Forbidden", status_code=status.HTTP_403_FORBIDDEN)

    if not rate_limiter.allow(sender):
        logger.warning("Rate limit exceeded for sender")
        return PlainTextResponse(
            "Too many messages. Please try again later.",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    metrics = PipelineMetrics()
    try:
        created = await run_in_threadpool(_create_task, body, coda, oracle, settings, metrics)
    except TaskInputError as e:
        logger.info(f"Rejected message: {e}")
        return PlainTextResponse(str(e), status_code=status.HTTP_400_BAD_REQUEST)
    except CodaError as e:
        logger.error(f"Failed to persist task: {e}")
        return PlainTextResponse(PERSISTENCE_FAILURE_MESSAGE, status_code=status.HTTP_502_BAD_GATEWAY)

    logger.info(f"Created task {created['id']} metrics={metrics.model_dump()}")
    return PlainTextResponse(SUCCESS_MESSAGE)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
