"""Click CLI for classifying messages and inspecting stored requests."""

from __future__ import annotations

import asyncio
import json

import click

from sevalink.ai.adapter import GeminiAdapter
from sevalink.ai.breaker import QuotaBreaker
from sevalink.heuristics.classifier import HeuristicClassifier
from sevalink.language import detector, normalizer
from sevalink.models import InboundMessage, Language, RequestType
from sevalink.pipeline import MessagePipeline
from sevalink.storage.db import SevaLinkStore


@click.group()
@click.option(
    "--rules", default="config/classifier-rules.json", help="Path to classifier rules JSON.",
)
@click.option("--db", default="data/sevalink.db", help="SevaLink database path.")
@click.pass_context
def cli(ctx: click.Context, rules: str, db: str) -> None:
    """SevaLink message classification CLI."""
    ctx.ensure_object(dict)
    ctx.obj["rules"] = rules
    ctx.obj["db"] = db


@cli.command()
@click.argument("text")
@click.option(
    "--language",
    type=click.Choice([lang.value for lang in Language]),
    default=Language.AUTO.value,
    help="Message language; auto detects it.",
)
@click.option("--use-ai", is_flag=True, help="Call the AI service when GEMINI_API_KEY is set.")
@click.pass_context
def classify(ctx: click.Context, text: str, language: str, use_ai: bool) -> None:
    """Classify TEXT and print the reply and any request that would be created."""
    classifier = HeuristicClassifier(ctx.obj["rules"])
    adapter = GeminiAdapter.from_env(QuotaBreaker()) if use_ai else None
    pipeline = MessagePipeline(classifier=classifier, adapter=adapter)
    message = InboundMessage(text=text, language=Language(language), user_id="cli-user")
    outcome = asyncio.run(pipeline.process(message))
    click.echo(outcome.model_dump_json(indent=2))


@cli.command()
@click.argument("text")
def detect(text: str) -> None:
    """Print the detected language code of TEXT."""
    click.echo(detector.detect(text).value)


@cli.command()
@click.argument("text")
def normalize(text: str) -> None:
    """Print TEXT with known Hindi/Telugu terms replaced by English."""
    click.echo(normalizer.to_english(text))


@cli.group("requests")
def requests_group() -> None:
    """Inspect stored service requests."""


@requests_group.command("list")
@click.option(
    "--type", "request_type",
    type=click.Choice([t.value for t in RequestType]),
    default=None,
    help="Only list requests of this type.",
)
@click.option("--limit", default=20, show_default=True, help="Maximum rows to print.")
@click.pass_context
def requests_list(ctx: click.Context, request_type: str | None, limit: int) -> None:
    """List stored service requests, newest first."""
    with SevaLinkStore(ctx.obj["db"]) as store:
        items = store.list_requests(
            RequestType(request_type) if request_type else None, limit=limit,
        )
    output = [
        {
            "id": r.id,
            "type": r.type.value,
            "title": r.title,
            "priority": r.priority.value,
            "status": r.status,
            "created_at": r.created_at,
        }
        for r in items
    ]
    click.echo(json.dumps(output, indent=2, ensure_ascii=False))


def main() -> None:
    cli(obj={})
