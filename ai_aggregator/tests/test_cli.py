import json

from ai_aggregator import cli
from ai_aggregator.client import Card
from ai_aggregator.render import Reporter, render_cards_text


def cards():
    return [
        Card(provider="ChatGPT", response="Gravity is a force.\n\nIt pulls.", response_time=412, color="#22c55e"),
        Card(provider="Claude", response="", response_time=205, color="#f97316", error="Failed to get response from Claude"),
    ]


def test_render_cards_text():
    out = render_cards_text(cards(), width=40)
    lines = out.splitlines()
    assert lines[0].startswith("== ChatGPT ") and lines[0].endswith(" 412ms ==")
    assert len(lines[0]) == 40
    assert "  Gravity is a force." in lines
    assert "  ! Failed to get response from Claude" in lines


def test_html_export_escapes_and_shows_errors(tmp_path):
    path = Reporter().write_html("<b>hi</b>", cards(), tmp_path / "out.html")
    html = path.read_text(encoding="utf-8")
    assert "&lt;b&gt;hi&lt;/b&gt;" in html
    assert "412ms" in html
    assert "Failed to get response from Claude" in html


def test_providers_command(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    for k in ["OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY", "GOOGLE_API_KEY", "PERPLEXITY_API_KEY"]:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("AGGREGATOR_PROVIDERS", "ChatGPT,Claude")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "ak")
    assert cli.main(["providers"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("PROVIDER")
    assert out[2].startswith("ChatGPT") and out[2].endswith("simulated")
    assert out[3].startswith("Claude") and out[3].endswith("live")


def test_ask_blank_prompt(capsys):
    assert cli.main(["ask", "   "]) == 2
    assert "Prompt is required" in capsys.readouterr().err


def test_ask_reports_transport_failure(monkeypatch, capsys):
    async def fake_ask(client, prompt, refresh_providers):
        client.providers = ["ChatGPT"]
        return await client.submit(prompt)

    monkeypatch.setattr(cli, "_ask", fake_ask)
    # nothing listens on port 9
    assert cli.main(["ask", "hi", "--url", "http://127.0.0.1:9", "--json"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data == [
        {"provider": "ChatGPT", "response": "", "response_time": 0, "color": "#22c55e", "error": "Failed to get response"}
    ]


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 2
    assert "usage" in capsys.readouterr().out.lower()
