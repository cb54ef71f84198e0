from __future__ import annotations
import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from .client import AggregatorClient, ClientState
from .config import load_settings
from .errors import ConfigError
from .render import Reporter, render_cards_text

DEFAULT_URL = "http://127.0.0.1:8000"


def cmd_serve(host: str, port: int) -> int:
    import uvicorn

    try:
        load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    uvicorn.run("ai_aggregator.app:create_app", factory=True, host=host, port=port)
    return 0


async def _ask(client: AggregatorClient, prompt: str, refresh_providers: bool):
    if refresh_providers:
        try:
            await client.fetch_providers()
        except Exception as e:
            # fall back to the default provider list for error cards
            logging.getLogger(__name__).warning("Could not list providers: %s", e)
    return await client.submit(prompt)


def cmd_ask(url: str, prompt: str, as_json: bool = False, html_out: Optional[Path] = None) -> int:
    client = AggregatorClient(base_url=url)
    if not client.can_submit(prompt):
        print("Prompt is required", file=sys.stderr)
        return 2
    cards = asyncio.run(_ask(client, prompt, refresh_providers=True)) or []
    failed = client.state is ClientState.SHOWING_TRANSPORT_ERROR
    if as_json:
        print(json.dumps([asdict(c) for c in cards], indent=2))
    else:
        print(render_cards_text(cards))
    if html_out:
        path = Reporter().write_html(prompt, cards, html_out, transport_error=failed)
        print(f"Wrote {path}")
    return 1 if failed else 0


def cmd_providers() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    rows = [(p.name, p.model, "simulated" if not p.has_credential else "live") for p in settings.providers]
    w1 = max(len(r[0]) for r in rows)
    w2 = max(len(r[1]) for r in rows)
    header = f"{'PROVIDER'.ljust(w1)}  {'MODEL'.ljust(w2)}  MODE"
    print(header)
    print("-" * len(header))
    for name, model, mode in rows:
        print(f"{name.ljust(w1)}  {model.ljust(w2)}  {mode}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ai-aggregator", description="Compare answers from several AI providers")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the aggregator HTTP service")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    ask = sub.add_parser("ask", help="Send one prompt to a running aggregator")
    ask.add_argument("prompt")
    ask.add_argument("--url", default=DEFAULT_URL, help="Aggregator base URL")
    ask.add_argument("--json", dest="as_json", action="store_true", help="Print cards as JSON")
    ask.add_argument("--html", help="Also write the cards to this HTML file")

    sub.add_parser("providers", help="Show configured providers and whether they are simulated")
    return p


def main(argv: List[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "serve":
        # the app configures logging from LOG_LEVEL
        return cmd_serve(args.host, args.port)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if args.command == "ask":
        return cmd_ask(args.url, args.prompt, as_json=args.as_json, html_out=Path(args.html) if args.html else None)
    if args.command == "providers":
        return cmd_providers()
    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
