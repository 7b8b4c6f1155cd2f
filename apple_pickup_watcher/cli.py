"""Command-line interface for the Apple pickup watcher."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

import click

from .api_client import AppleStoreClient
from .config import Config
from .exceptions import ConfigurationError, MalformedResponseError
from .models import Carrier
from .notifier import Notifier, build_channels
from .parts import build_query
from .watcher import StockWatcher

logger = logging.getLogger(__name__)


@click.command()
@click.argument("zip_code", envvar="ZIP_CODE", metavar="ZIP")
@click.option(
    "--carrier",
    type=click.Choice([c.value for c in Carrier], case_sensitive=False),
    default=Carrier.TMOBILE.value,
    show_default=True,
    help="Carrier the device is locked to.",
)
@click.option("--model", default="x", show_default=True, help="Model key in the part number table.")
@click.option("--color", default="gray", show_default=True, help="Device color.")
@click.option("--storage", default="256", show_default=True, help="Storage size in GB.")
@click.option("--distance", type=float, default=None, help="Only report stores closer than this distance.")
@click.option("--delay", type=float, default=None, help="Seconds between requests (default 30).")
@click.option("--email", "email_to", default=None, help="Send the result to this email address.")
@click.option("--push/--no-push", default=True, help="Send a Pushover notification when credentials are set.")
@click.option(
    "--parts-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Alternate part number table (JSON).",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Credential file with EMAIL_* and PUSHOVER_* settings.",
)
@click.option("--strict", is_flag=True, help="Stop on an unexpected response instead of retrying.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(
    zip_code: str,
    carrier: str,
    model: str,
    color: str,
    storage: str,
    distance: Optional[float],
    delay: Optional[float],
    email_to: Optional[str],
    push: bool,
    parts_file: Optional[str],
    env_file: Optional[str],
    strict: bool,
    verbose: bool,
) -> None:
    """Poll Apple until the selected iPhone can be picked up near ZIP."""
    if env_file:
        Config.reload(env_file)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        query = build_query(
            zip_code=zip_code,
            model=model,
            carrier=carrier,
            color=color,
            storage=storage,
            max_distance=distance,
            poll_interval=delay,
            parts_file=parts_file,
        )
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    settings = {
        "carrier": query.carrier.value,
        "model": model,
        "color": color,
        "storage": storage,
        "zip": query.zip_code,
        "partNumber": query.part_number,
        "distance": query.max_distance,
        "delay": query.poll_interval,
    }
    logger.info("Starting with the following settings:\n%s", json.dumps(settings, indent=2))

    notifier = Notifier(build_channels(email_to=email_to, push=push))
    with AppleStoreClient() as client:
        watcher = StockWatcher(query, client, notifier, strict=strict)
        try:
            watcher.run()
        except MalformedResponseError as exc:
            logger.error("Stopping on unexpected response: %s", exc)
            sys.exit(2)
        except KeyboardInterrupt:
            watcher.status_line.clear()
            logger.info("Interrupted after %s requests", watcher.state.requests_made)
            sys.exit(130)
